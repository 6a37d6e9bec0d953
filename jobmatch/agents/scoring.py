"""Weighted multi-criteria scoring of a job against a candidate profile."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from jobmatch.agents.employer import culture_tags
from jobmatch.models.job import ExperienceLevel, JobRecord, LocationType
from jobmatch.models.profile import CandidateProfile, LocationPreference
from jobmatch.models.scoring import CRITERIA, ScoredJob, ScoringWeights

logger = logging.getLogger(__name__)

REASON_THRESHOLD = 0.6
CULTURE_NEUTRAL = 0.5

_LEVEL_RANK: dict[ExperienceLevel, int] = {
    ExperienceLevel.ENTRY: 0,
    ExperienceLevel.MID: 1,
    ExperienceLevel.SENIOR: 2,
}


class ScoringEngine:
    """Scores (profile, job) pairs with a transparent weighted sum.

    The engine holds only its weights; every call is a pure function of the
    profile and job passed in.
    """

    def __init__(self, weights: ScoringWeights | None = None) -> None:
        self.weights = weights or ScoringWeights()

    def score(self, profile: CandidateProfile, job: JobRecord) -> ScoredJob:
        matched = profile.skills & job.required_skills
        sub_scores = {
            "skill": _skill_score(matched, job.required_skills),
            "experience": _experience_score(profile.experience_level, job.implied_level),
            "location": _location_score(profile.preferred_location_type, job.location_type),
            "salary": _salary_score(profile.min_salary, job),
            "culture": _culture_score(profile.culture_preferences, job),
        }

        weights = self.weights.as_dict()
        breakdown = {name: weights[name] * sub_scores[name] for name in CRITERIA}
        total = min(1.0, max(0.0, sum(breakdown.values())))

        reasoning = _reasoning(sub_scores, job, len(matched))
        logger.debug("Scored %s (%s at %s): %.3f", job.id, job.title, job.company, total)

        return ScoredJob(
            job=job,
            score=total,
            score_breakdown=breakdown,
            sub_scores=sub_scores,
            matched_skills=matched,
            reasoning=reasoning,
        )

    def score_all(self, profile: CandidateProfile, jobs: Iterable[JobRecord]) -> list[ScoredJob]:
        return [self.score(profile, job) for job in jobs]


def load_weights(filepath: str = "weights.yaml") -> ScoringWeights:
    """Read a YAML mapping of criterion -> weight; missing file yields defaults."""
    path = Path(filepath)
    if not path.exists():
        logger.warning("Weights file not found at %s — using defaults", filepath)
        return ScoringWeights()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    weights = ScoringWeights(**data.get("weights", data))
    logger.info("Loaded scoring weights from %s: %s", filepath, weights.as_dict())
    return weights


# =============================================================================
# Sub-scores, each in [0, 1]
# =============================================================================


def _skill_score(matched: frozenset[str], required: frozenset[str]) -> float:
    # A job listing no skills is a miss, not a perfect match
    if not required:
        return 0.0
    return len(matched) / len(required)


def _experience_score(wanted: ExperienceLevel, implied: ExperienceLevel) -> float:
    distance = abs(_LEVEL_RANK[wanted] - _LEVEL_RANK[implied])
    if distance == 0:
        return 1.0
    if distance == 1:
        return 0.5
    return 0.0


def _location_score(preference: LocationPreference, location_type: LocationType) -> float:
    if preference == LocationPreference.ANY:
        return 1.0
    return 1.0 if preference.value == location_type.value else 0.0


def _salary_score(min_salary: int | None, job: JobRecord) -> float:
    if not min_salary or job.salary_range is None:
        return 1.0
    if job.salary_range.max >= min_salary:
        return 1.0
    return max(0.0, job.salary_range.max / min_salary)


def _culture_score(preferences: frozenset[str], job: JobRecord) -> float:
    if preferences & culture_tags(job.company_size):
        return 1.0
    return CULTURE_NEUTRAL


def _reasoning(sub_scores: dict[str, float], job: JobRecord, matched_count: int) -> list[str]:
    reasons: list[str] = []
    for name in CRITERIA:
        if sub_scores[name] <= REASON_THRESHOLD:
            continue
        if name == "skill":
            reasons.append(
                f"Strong skill overlap ({matched_count}/{len(job.required_skills)} skills)"
            )
        elif name == "experience":
            reasons.append("Experience level match")
        elif name == "location":
            if job.location_type == LocationType.REMOTE:
                reasons.append("Remote-friendly match")
            else:
                reasons.append("Location preference match")
        elif name == "salary":
            reasons.append("Salary meets expectation")
        elif name == "culture":
            reasons.append("Company culture fit")
    return reasons
