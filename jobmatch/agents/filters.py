"""Conjunctive user filters over categorized results."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from jobmatch.models.job import JobRecord, LocationType
from jobmatch.models.profile import ExperienceBand, FilterSpec, LocationFilter, SalaryBand
from jobmatch.models.results import Category
from jobmatch.models.scoring import ScoredJob

logger = logging.getLogger(__name__)

SALARY_LOW = 100_000
SALARY_HIGH = 150_000


def _location_ok(job: JobRecord, wanted: LocationFilter) -> bool:
    if wanted == LocationFilter.REMOTE:
        return job.location_type == LocationType.REMOTE
    if wanted == LocationFilter.ONSITE:
        # Hybrid roles count as on-site
        return job.location_type != LocationType.REMOTE
    return True


def _experience_ok(job: JobRecord, wanted: ExperienceBand) -> bool:
    if wanted == ExperienceBand.ANY:
        return True
    return job.implied_level.value == wanted.value


def _salary_ok(job: JobRecord, wanted: SalaryBand) -> bool:
    if wanted == SalaryBand.ANY:
        return True
    if job.salary_range is None:
        return False
    top = job.salary_range.max
    if wanted == SalaryBand.UNDER_100K:
        return top < SALARY_LOW
    if wanted == SalaryBand.BETWEEN_100K_150K:
        return SALARY_LOW <= top <= SALARY_HIGH
    return top > SALARY_HIGH


def job_passes(job: JobRecord, filters: FilterSpec) -> bool:
    """True when the job satisfies every active filter."""
    return (
        _location_ok(job, filters.location)
        and _experience_ok(job, filters.experience)
        and _salary_ok(job, filters.salary)
    )


def apply_filters(
    categorized: Mapping[Category, list[ScoredJob]],
    filters: FilterSpec,
) -> dict[Category, list[ScoredJob]]:
    """Drop jobs failing any filter; order within each category is preserved."""
    result = {
        category: [s for s in jobs if job_passes(s.job, filters)]
        for category, jobs in categorized.items()
    }

    before = sum(len(v) for v in categorized.values())
    after = sum(len(v) for v in result.values())
    logger.info(
        "Filters (location=%s, experience=%s, salary=%s): %d → %d category entries",
        filters.location.value, filters.experience.value, filters.salary.value,
        before, after,
    )
    return result
