"""
Faculty directory request schemas.

Clients send camelCase keys (`isActive`, `displayOrder`); snake_case is
accepted too.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from media import references

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class FacultyMemberIn(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(..., min_length=1, max_length=100)
    designation: str = Field(..., min_length=1, max_length=150)
    department: str = Field(..., min_length=1, max_length=100)
    bio: str = Field(default="", max_length=1000)
    photo: str = ""
    email: str = Field(default="", max_length=320)
    linkedin: str = Field(default="", max_length=2048)
    specialization: list[str] = Field(default_factory=list)
    experience: str = Field(default="", max_length=100)
    education: str = Field(default="", max_length=500)
    is_active: bool = True
    display_order: int = Field(default=0, ge=0)

    @field_validator("photo", mode="before")
    @classmethod
    def _photo(cls, value: str | None) -> str:
        # InvalidImageReference is a ValueError, so pydantic reports it.
        return references.parse_image_reference(value).value

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.lower()
        if value and not EMAIL_RE.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("linkedin")
    @classmethod
    def _linkedin(cls, value: str) -> str:
        if value and not references.is_valid_url(value):
            raise ValueError("LinkedIn must be a valid URL")
        return value

    @field_validator("specialization")
    @classmethod
    def _specialization(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]
