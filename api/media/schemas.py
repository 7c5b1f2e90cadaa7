"""
Request bodies for media endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ValidateUrlRequest(BaseModel):
    url: str | None = Field(default=None, max_length=4096)


class DeleteImageRequest(BaseModel):
    public_id: str | None = Field(default=None, max_length=512)
    url: str | None = Field(default=None, max_length=4096)

    @model_validator(mode="after")
    def _one_target(self) -> "DeleteImageRequest":
        if not (self.public_id or "").strip() and not (self.url or "").strip():
            raise ValueError("Provide public_id or url.")
        return self
