from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator


class GenerateRequest(BaseModel):
    profile: str | None = None
    jd: str | None = None
    company: str | None = None
    role: str | None = None

    @field_validator("profile", "jd", "company", "role", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return str(value) if value else None


class PostingRejectedResponse(BaseModel):
    error: str
    locationType: str
