"""Partition scored jobs into named, independently ordered categories."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jobmatch.models.job import CompanySize, LocationType
from jobmatch.models.results import Category
from jobmatch.models.scoring import ScoredJob

logger = logging.getLogger(__name__)

RECOMMENDED_MIN_SCORE = 0.5
HIGH_SALARY_MIN = 120_000


def _by_score(s: ScoredJob) -> tuple[float, str]:
    return (-s.score, s.job.id)


def _by_salary(s: ScoredJob) -> tuple[int, float, str]:
    salary_max = s.job.salary_range.max if s.job.salary_range else 0
    return (-salary_max, -s.score, s.job.id)


def categorize(
    scored_jobs: Iterable[ScoredJob],
    recommended_min_score: float = RECOMMENDED_MIN_SCORE,
    high_salary_min: int = HIGH_SALARY_MIN,
) -> dict[Category, list[ScoredJob]]:
    """Bucket scored jobs; a job may land in several categories.

    Every category key is present in the result, possibly with an empty list.
    Ties on the primary key fall back to job id ascending.
    """
    jobs = list(scored_jobs)

    recommended = [s for s in jobs if s.score >= recommended_min_score]
    remote = [s for s in jobs if s.job.location_type == LocationType.REMOTE]
    high_salary = [
        s for s in jobs
        if s.job.salary_range is not None and s.job.salary_range.max >= high_salary_min
    ]
    notable = [s for s in jobs if s.job.company_size == CompanySize.LARGE]

    categories = {
        Category.RECOMMENDED: sorted(recommended, key=_by_score),
        Category.REMOTE: sorted(remote, key=_by_score),
        Category.HIGH_SALARY: sorted(high_salary, key=_by_salary),
        Category.NOTABLE_EMPLOYER: sorted(notable, key=_by_score),
    }

    logger.info(
        "Categorized %d jobs: %s",
        len(jobs),
        ", ".join(f"{c.value}={len(v)}" for c, v in categories.items()),
    )
    return categories
