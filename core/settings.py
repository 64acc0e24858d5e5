"""Application settings and shared constants."""

from datetime import date, datetime, time
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

QUEUE_STATUSES = ("pending", "processing")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "Back Office CMS"
    database_url: str = Field("sqlite:///./backoffice_cms.db")
    addons_category_name: str = Field("add-ons")
    uncategorized_label: str = "Uncategorized"
    log_level: str = Field("INFO")
    debug: bool = False

    @field_validator("addons_category_name")
    @classmethod
    def validate_addons_category_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("addons_category_name must not be blank")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max)


def round_money(value: float) -> float:
    return round(value, 2)


@lru_cache
def get_settings() -> Settings:
    return Settings()
