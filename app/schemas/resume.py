from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PostingDecision = Literal["proceed", "reject"]
RejectionReason = Literal["hybrid", "onsite", "entry-level"]


class Experience(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    company: str | None = None
    title: str | None = None
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class Education(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    degree: str | None = None
    school: str | None = None
    start_year: str | None = None
    end_year: str | None = None

    @field_validator("start_year", "end_year", mode="before")
    @classmethod
    def _coerce_year(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)


class PostingClassification(BaseModel):
    is_hybrid: bool = False
    is_onsite: bool = False
    has_remote_signal: bool = False
    is_entry_level: bool = False
    is_intern: bool = False
    decision: PostingDecision
    reason_code: RejectionReason | None = None
    message: str | None = None

    @property
    def rejected(self) -> bool:
        return self.decision == "reject"


class ModelExperience(BaseModel):
    title: str = ""
    details: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("details", mode="before")
    @classmethod
    def _none_details(cls, value: object) -> object:
        return [] if value is None else value


class ModelContent(BaseModel):
    title: str
    summary: str
    skills: dict[str, list[str]]
    experience: list[ModelExperience]


class RenderExperience(BaseModel):
    title: str
    company: str | None = None
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    details: list[str] = Field(default_factory=list)


class RenderData(BaseModel):
    name: str
    title: str
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None
    summary: str
    skills: dict[str, list[str]]
    experience: list[RenderExperience]
    education: list[Education] = Field(default_factory=list)
