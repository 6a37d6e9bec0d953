"""Status and result types returned by the coordinator and the pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from jobmatch.models.job import JobRecord, JobSource
from jobmatch.models.scoring import ScoredJob


class ProviderStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"
    TIMEOUT = "timeout"
    DISABLED = "disabled"


class GatherStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    NO_CANDIDATES = "no_candidates"


class Category(str, Enum):
    RECOMMENDED = "recommended"
    REMOTE = "remote"
    HIGH_SALARY = "highSalary"
    NOTABLE_EMPLOYER = "notableEmployer"


class RemoteQuery(BaseModel):
    """Query handed to a remote listing provider."""

    skills: list[str] = Field(default_factory=list)
    location: str = ""
    keywords: list[str] = Field(default_factory=list)


class ProviderResult(BaseModel):
    """Outcome of a single bounded remote fetch."""

    status: ProviderStatus
    records: list[JobRecord] = Field(default_factory=list)
    error: str | None = None

    @property
    def usable(self) -> bool:
        return self.status == ProviderStatus.OK and bool(self.records)


class GatherResult(BaseModel):
    """Merged candidate set plus which sources contributed to it."""

    status: GatherStatus
    records: list[JobRecord] = Field(default_factory=list)
    sources: list[JobSource] = Field(default_factory=list)
    provider_status: ProviderStatus = ProviderStatus.DISABLED
    duplicates_dropped: int = 0


class RecommendationResult(BaseModel):
    """What callers of recommend() receive."""

    status: GatherStatus
    sources: list[JobSource] = Field(default_factory=list)
    provider_status: ProviderStatus = ProviderStatus.DISABLED
    total_candidates: int = 0
    categories: dict[Category, list[ScoredJob]] = Field(default_factory=dict)

    @property
    def has_results(self) -> bool:
        return any(self.categories.values())
