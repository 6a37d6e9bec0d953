"""Pydantic models for scoring weights and scored output."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from jobmatch.models.job import JobRecord

CRITERIA: tuple[str, ...] = ("skill", "experience", "location", "salary", "culture")


class ScoringWeights(BaseModel):
    """Per-criterion weights. Passed into the engine, never shared process-wide."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    skill: float = Field(default=0.40, ge=0.0, le=1.0)
    experience: float = Field(default=0.25, ge=0.0, le=1.0)
    location: float = Field(default=0.15, ge=0.0, le=1.0)
    salary: float = Field(default=0.10, ge=0.0, le=1.0)
    culture: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_sum(self) -> ScoringWeights:
        total = sum(self.as_dict().values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"weights must sum to 1.0, got {total:.4f}")
        return self

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in CRITERIA}


class ScoredJob(BaseModel):
    """A job record annotated with its match against one candidate profile."""

    job: JobRecord
    score: float = Field(ge=0.0, le=1.0)
    score_breakdown: dict[str, float] = Field(default_factory=dict)
    sub_scores: dict[str, float] = Field(default_factory=dict)
    matched_skills: frozenset[str] = Field(default_factory=frozenset)
    reasoning: list[str] = Field(default_factory=list)
