"""Pydantic models for the candidate profile and user-supplied filters."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jobmatch.errors import InvalidProfile
from jobmatch.models.job import ExperienceLevel
from jobmatch.tools.skills import normalize_skills


class LocationPreference(str, Enum):
    REMOTE = "remote"
    ONSITE = "onsite"
    ANY = "any"


class LocationFilter(str, Enum):
    ANY = "any"
    REMOTE = "remote"
    ONSITE = "onsite"


class ExperienceBand(str, Enum):
    ANY = "any"
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"


class SalaryBand(str, Enum):
    ANY = "any"
    UNDER_100K = "under100k"
    BETWEEN_100K_150K = "100k-150k"
    OVER_150K = "over150k"


class CandidateProfile(BaseModel):
    """Structured job seeker profile. Immutable for the lifetime of a request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    skills: frozenset[str] = Field(default_factory=frozenset)
    experience_level: ExperienceLevel = ExperienceLevel.MID
    preferred_location_type: LocationPreference = LocationPreference.ANY
    min_salary: int | None = Field(default=None, ge=0)
    culture_preferences: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_profile_skills(cls, v: Any) -> frozenset[str]:
        return normalize_skills(v)

    @field_validator("culture_preferences", mode="before")
    @classmethod
    def normalize_culture(cls, v: Any) -> frozenset[str]:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        elif not isinstance(v, Iterable):
            raise ValueError(f"culture_preferences must be a list or comma-separated string, got {type(v).__name__}")
        return frozenset(str(tag).strip().lower() for tag in v if str(tag).strip())

    @field_validator("experience_level", "preferred_location_type", mode="before")
    @classmethod
    def lower_enum_text(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class FilterSpec(BaseModel):
    """Conjunctive filters applied after categorization. Everything defaults to 'any'."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: LocationFilter = LocationFilter.ANY
    experience: ExperienceBand = ExperienceBand.ANY
    salary: SalaryBand = SalaryBand.ANY

    @field_validator("location", "experience", "salary", mode="before")
    @classmethod
    def lower_enum_text(cls, v: Any) -> Any:
        if v is None:
            return "any"
        # The UI historically sent "all" for an unset filter
        if isinstance(v, str):
            v = v.strip().lower()
            return "any" if v in ("", "all") else v
        return v


def load_profile(data: CandidateProfile | Mapping[str, Any]) -> CandidateProfile:
    """Validate caller input into a CandidateProfile, raising InvalidProfile on misuse."""
    if isinstance(data, CandidateProfile):
        return data
    if not isinstance(data, Mapping):
        raise InvalidProfile(f"profile must be a mapping, got {type(data).__name__}")
    try:
        return CandidateProfile.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidProfile(_describe("profile", e)) from e


def load_filters(data: FilterSpec | Mapping[str, Any] | None) -> FilterSpec:
    """Validate caller filters; None means no filtering."""
    if data is None:
        return FilterSpec()
    if isinstance(data, FilterSpec):
        return data
    if not isinstance(data, Mapping):
        raise InvalidProfile(f"filters must be a mapping, got {type(data).__name__}")
    try:
        return FilterSpec.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidProfile(_describe("filters", e)) from e


def _describe(what: str, error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or what}: {err['msg']}" for err in error.errors()
    )
    return f"invalid {what}: {problems}"
