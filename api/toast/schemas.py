"""
Toast notification request schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from media import references


class _ToastBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @field_validator("photo", mode="before", check_fields=False)
    @classmethod
    def _photo(cls, value: str | None) -> str:
        return references.parse_image_reference(value).value


class ToastCreate(_ToastBase):
    message: str = Field(..., min_length=1, max_length=200)
    link: str = Field(default="", max_length=2048)
    event_id: int | None = None
    photo: str = ""
    is_active: bool = True


class ToastUpdate(_ToastBase):
    message: str | None = Field(default=None, min_length=1, max_length=200)
    link: str | None = Field(default=None, max_length=2048)
    event_id: int | None = None
    photo: str | None = None
    is_active: bool | None = None
