"""Pydantic schemas for the dietary profile and its remote mirror."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Severity = Literal["mild", "moderate", "severe"]


class UserProfile(BaseModel):
    """
    The user's dietary profile. Field aliases match the JSON shape used by the
    frontend and by the persisted local document.
    """

    model_config = ConfigDict(populate_by_name=True)

    allergies: list[str] = Field(default_factory=list)
    severity_levels: dict[str, Severity] = Field(
        default_factory=dict, alias="severityLevels"
    )
    diet_tags: list[str] = Field(default_factory=list, alias="dietTags")
    notes: str = ""
    is_complete: bool = Field(False, alias="isComplete")

    @model_validator(mode="after")
    def _drop_orphans(self) -> "UserProfile":
        """Deduplicate lists and drop severities for allergies that are not listed."""
        self.allergies = list(dict.fromkeys(self.allergies))
        self.diet_tags = list(dict.fromkeys(self.diet_tags))
        self.severity_levels = {
            k: v for k, v in self.severity_levels.items() if k in self.allergies
        }
        return self


class ProfileUpdate(BaseModel):
    """Body for PUT /profile — only the supplied fields are replaced."""

    model_config = ConfigDict(populate_by_name=True)

    allergies: Optional[list[str]] = None
    severity_levels: Optional[dict[str, Severity]] = Field(None, alias="severityLevels")
    diet_tags: Optional[list[str]] = Field(None, alias="dietTags")
    notes: Optional[str] = None
    is_complete: Optional[bool] = Field(None, alias="isComplete")


class AllergyAdd(BaseModel):
    """Body for POST /profile/allergies."""

    allergy: str = Field(..., min_length=1)
    severity: Severity = "moderate"


class DietTagAdd(BaseModel):
    """Body for POST /profile/diet-tags."""

    tag: str = Field(..., min_length=1)


class ProfileOptions(BaseModel):
    """Reference lists rendered by the profile editor."""

    allergens: list[str]
    diet_tags: list[str] = Field(alias="dietTags")
    severity_levels: dict[str, str] = Field(alias="severityLevels")


class RemoteProfileWrite(BaseModel):
    """Body for PUT /profiles/{uid} — full replace of the remote profile record."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    allergies: list[str] = Field(default_factory=list)
    severity_levels: dict[str, Severity] = Field(
        default_factory=dict, alias="severityLevels"
    )
    diet_tags: list[str] = Field(default_factory=list, alias="dietTags")
    notes: str = ""


class RemoteProfileRead(BaseModel):
    """Remote profile record returned by GET /profiles/{uid}."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    email: Optional[str] = None
    allergies: list[str]
    severity_levels: dict[str, str] = Field(alias="severityLevels")
    diet_tags: list[str] = Field(alias="dietTags")
    notes: str
    updated_at: Optional[datetime] = None
