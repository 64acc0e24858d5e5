"""Tests for settings, error helpers and the health endpoint."""
from datetime import date

import pytest
from pydantic import ValidationError

from core.errors import is_unique_violation
from core.settings import Settings, end_of_day, round_money, start_of_day


class FakeDriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


def test_unique_violation_detection():
    wrapped = type("Wrapped", (Exception,), {})()
    wrapped.orig = FakeDriverError("UNIQUE constraint failed: portion_controls.product_id")
    assert is_unique_violation(wrapped)
    assert is_unique_violation(FakeDriverError("boom", pgcode="23505"))
    assert not is_unique_violation(FakeDriverError("FOREIGN KEY constraint failed"))


def test_settings_normalize_values():
    settings = Settings(addons_category_name="  Add-ons ", log_level="debug")
    assert settings.addons_category_name == "Add-ons"
    assert settings.log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(addons_category_name="   ")


def test_day_bounds_and_rounding():
    day = date(2025, 3, 10)
    assert start_of_day(day).isoformat() == "2025-03-10T00:00:00"
    assert end_of_day(day).hour == 23
    assert round_money(0.1 + 0.2) == 0.3


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
