from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EventCategory = Literal["wedding", "corporate", "private"]


class EventBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9-]+$")
    location: str = Field(..., min_length=1, max_length=300)
    pax: int = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    images: List[str] = Field(default_factory=list)
    featured_image_index: int = Field(0, ge=0)
    event_date: date
    category: EventCategory
    flavors: List[str] = Field(default_factory=list)


class EventCreate(EventBase):
    @field_validator("images")
    @classmethod
    def keep_http_images(cls, images: List[str]) -> List[str]:
        return [url.strip() for url in images if url and url.strip().startswith("http")]

    @field_validator("flavors")
    @classmethod
    def drop_blank_flavors(cls, flavors: List[str]) -> List[str]:
        return [f.strip() for f in flavors if f and f.strip()]

    @model_validator(mode="after")
    def check_featured_image(self):
        # Index points into the filtered list; fall back to the first image
        if self.featured_image_index >= max(len(self.images), 1):
            self.featured_image_index = 0
        return self


class EventUpdate(EventCreate):
    pass


class EventRead(EventBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
