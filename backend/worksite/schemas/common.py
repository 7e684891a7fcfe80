"""
Shared schema building blocks.

Wire format is camelCase; models accept either camelCase or snake_case input.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

PHONE_PATTERN = r"^\+?[0-9\s-]+$"

_NON_DIGITS = re.compile(r"\D")


class CamelModel(BaseModel):
    """Base for every request and response schema."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def digit_count(phone: str) -> int:
    return len(_NON_DIGITS.sub("", phone))


def require_phone_digits(phone: str | None, minimum: int = 10) -> str | None:
    """Reject phone numbers with fewer than `minimum` digits."""
    if phone is not None and digit_count(phone) < minimum:
        raise ValueError(f"Phone must contain at least {minimum} digits")
    return phone
