from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PortionControlItemBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    ingredient_product_id: Optional[int] = None
    ingredient_variant_id: Optional[int] = None
    ingredient_name: str = Field(..., min_length=1, max_length=200, description="Ingredient name")
    quantity: float = Field(..., gt=0, description="Quantity per serving")
    unit: str = Field("pcs", min_length=1, max_length=20, description="Unit, e.g. pcs, g, ml")
    notes: Optional[str] = Field(None, max_length=500)


class PortionControlItemCreate(PortionControlItemBase):
    @model_validator(mode="after")
    def check_variant_has_product(self):
        if self.ingredient_variant_id is not None and self.ingredient_product_id is None:
            raise ValueError("ingredient_variant_id requires ingredient_product_id")
        return self


class PortionControlItemRead(PortionControlItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    portion_control_id: int
    ingredient_product_name: Optional[str] = None
    ingredient_variant_name: Optional[str] = None


class PortionControlBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: int
    variant_id: Optional[int] = None
    name: str = Field(..., min_length=2, max_length=200, description="Recipe name")
    description: Optional[str] = Field(None, max_length=1000)
    serving_size: Optional[str] = Field(None, max_length=100, description="e.g. 1 cup, 1 portion")


class PortionControlCreate(PortionControlBase):
    items: List[PortionControlItemCreate] = Field(..., min_length=1)


class PortionControlUpdate(PortionControlCreate):
    pass


class PortionControlSummary(PortionControlBase):
    """Recipe row joined with product, variant and category names."""

    id: int
    product_name: Optional[str] = None
    variant_name: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    items_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PortionControlRead(PortionControlSummary):
    items: List[PortionControlItemRead] = Field(default_factory=list)


class PortionControlGroup(BaseModel):
    key: str
    category_id: Optional[int] = None
    name: str
    recipes: List[PortionControlSummary] = Field(default_factory=list)


class RecipeTarget(BaseModel):
    """A product or product variant that can still receive a recipe."""

    id: str
    name: str
    product_id: int
    product_name: str
    variant_id: Optional[int] = None
    has_variants: bool


class RecipeTargetVariant(BaseModel):
    id: str
    variant_id: int
    name: str


class GroupedRecipeTarget(BaseModel):
    product_id: int
    product_name: str
    category_name: Optional[str] = None
    has_variants: bool
    variants: List[RecipeTargetVariant] = Field(default_factory=list)
