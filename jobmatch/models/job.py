"""Pydantic model for normalized job records."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any
from urllib.parse import parse_qs, urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from jobmatch.errors import InvalidRecord
from jobmatch.tools.skills import normalize_skills


class LocationType(str, Enum):
    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"


class CompanySize(str, Enum):
    STARTUP = "startup"
    MEDIUM = "medium"
    LARGE = "large"


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"


class JobSource(str, Enum):
    CURATED = "curated"
    REMOTE = "remote"


# Query parameters that turn a job-board URL into a region-dependent search
SEARCH_QUERY_PARAMS = frozenset({
    "q", "query", "keywords", "search", "search_keywords",
    "what", "where", "k", "l", "location",
})
SEARCH_PATH_SEGMENTS = frozenset({"search", "search-results"})

_SENIOR_TITLE = re.compile(r"\b(senior|sr|lead|principal|staff|head)\b")
_ENTRY_TITLE = re.compile(r"\b(junior|jr|entry|intern|internship|graduate|associate|trainee)\b")


def is_direct_url(url: str) -> bool:
    """True when *url* points at a posting or career page rather than a search query."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False

    segments = {seg.lower() for seg in parsed.path.split("/") if seg}
    if segments & SEARCH_PATH_SEGMENTS:
        return False

    params = {key.lower() for key in parse_qs(parsed.query, keep_blank_values=True)}
    return not params & SEARCH_QUERY_PARAMS


def implied_level_from_title(title: str) -> ExperienceLevel:
    """Guess the seniority a job title implies; defaults to mid."""
    text = title.lower()
    if _SENIOR_TITLE.search(text):
        return ExperienceLevel.SENIOR
    if _ENTRY_TITLE.search(text):
        return ExperienceLevel.ENTRY
    return ExperienceLevel.MID


class SalaryRange(BaseModel):
    """Annual salary band in whole currency units."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def check_order(self) -> SalaryRange:
        if self.min > self.max:
            raise ValueError(f"salary min {self.min} exceeds max {self.max}")
        return self


class JobRecord(BaseModel):
    """A single posting, curated or remote, normalized to a common shape."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    company_size: CompanySize = CompanySize.MEDIUM
    required_skills: frozenset[str] = Field(default_factory=frozenset)
    location: str = ""
    location_type: LocationType = LocationType.ONSITE
    salary_range: SalaryRange | None = None
    application_url: str
    source: JobSource = JobSource.CURATED
    experience_level: ExperienceLevel | None = None
    description: str = ""

    @field_validator("required_skills", mode="before")
    @classmethod
    def normalize_required_skills(cls, v: Any) -> frozenset[str]:
        return normalize_skills(v)

    @field_validator("application_url")
    @classmethod
    def require_direct_url(cls, v: str) -> str:
        v = v.strip()
        if not is_direct_url(v):
            raise ValueError(f"application_url must be a direct posting or career page, got {v!r}")
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dedupe_key(self) -> str:
        """Fuzzy dedupe key from normalized company + title."""
        company = "".join(c for c in self.company.lower() if c.isalnum())
        title = "".join(c for c in self.title.lower() if c.isalnum())
        return f"{company}|{title}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def implied_level(self) -> ExperienceLevel:
        """Explicit level when set, otherwise the level the title implies."""
        return self.experience_level or implied_level_from_title(self.title)


def validate_record(data: dict[str, Any], source: JobSource | None = None) -> JobRecord:
    """Build a JobRecord from raw data, raising InvalidRecord on any violation."""
    if source is not None:
        data = {**data, "source": source}
    try:
        return JobRecord.model_validate(data)
    except ValidationError as e:
        ident = data.get("id") or data.get("title") or "<unknown>"
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidRecord(f"record {ident!r} rejected: {problems}") from e
    except TypeError as e:
        ident = data.get("id") or data.get("title") or "<unknown>"
        raise InvalidRecord(f"record {ident!r} rejected: {e}") from e
