"""Tests for category partitioning and ordering."""

from __future__ import annotations

from jobmatch.agents.categorizer import categorize
from jobmatch.models.job import CompanySize, JobRecord, LocationType
from jobmatch.models.results import Category
from jobmatch.models.scoring import ScoredJob


def _make_scored(
    id: str,
    score: float,
    location_type: LocationType = LocationType.ONSITE,
    salary_max: int | None = None,
    company_size: CompanySize = CompanySize.MEDIUM,
) -> ScoredJob:
    job = JobRecord(
        id=id,
        title=f"Engineer {id}",
        company=f"Company {id}",
        company_size=company_size,
        location_type=location_type,
        salary_range={"min": 0, "max": salary_max} if salary_max is not None else None,
        application_url=f"https://example.com/careers/{id}",
    )
    return ScoredJob(job=job, score=score)


def _ids(jobs: list[ScoredJob]) -> list[str]:
    return [s.job.id for s in jobs]


class TestMembership:
    """Which jobs land in which category."""

    def test_all_keys_present_when_empty(self) -> None:
        """An empty input still yields every category."""
        result = categorize([])
        assert set(result) == set(Category)
        assert all(v == [] for v in result.values())

    def test_recommended_threshold_inclusive(self) -> None:
        """Score exactly 0.5 is recommended; just below is not."""
        result = categorize([_make_scored("a", 0.5), _make_scored("b", 0.49)])
        assert _ids(result[Category.RECOMMENDED]) == ["a"]

    def test_remote_only_remote_jobs(self) -> None:
        """Hybrid and on-site jobs stay out of the remote category."""
        result = categorize([
            _make_scored("a", 0.2, LocationType.REMOTE),
            _make_scored("b", 0.9, LocationType.HYBRID),
            _make_scored("c", 0.9, LocationType.ONSITE),
        ])
        assert _ids(result[Category.REMOTE]) == ["a"]

    def test_high_salary_requires_known_salary(self) -> None:
        """Max >= 120k qualifies; missing salary never does."""
        result = categorize([
            _make_scored("a", 0.5, salary_max=120_000),
            _make_scored("b", 0.5, salary_max=119_999),
            _make_scored("c", 0.5),
        ])
        assert _ids(result[Category.HIGH_SALARY]) == ["a"]

    def test_notable_employer_is_large_company(self) -> None:
        """Only large companies are notable employers."""
        result = categorize([
            _make_scored("a", 0.3, company_size=CompanySize.LARGE),
            _make_scored("b", 0.9, company_size=CompanySize.STARTUP),
        ])
        assert _ids(result[Category.NOTABLE_EMPLOYER]) == ["a"]

    def test_job_can_be_in_several_categories(self) -> None:
        """Categories are independent, not exclusive."""
        job = _make_scored("a", 0.9, LocationType.REMOTE, 200_000, CompanySize.LARGE)
        result = categorize([job])
        assert all(_ids(v) == ["a"] for v in result.values())


class TestOrdering:
    """Deterministic order inside each category."""

    def test_score_descending_with_id_tiebreak(self) -> None:
        """Equal scores fall back to ascending id."""
        result = categorize([
            _make_scored("b", 0.7),
            _make_scored("c", 0.9),
            _make_scored("a", 0.7),
        ])
        assert _ids(result[Category.RECOMMENDED]) == ["c", "a", "b"]

    def test_high_salary_by_salary_then_score(self) -> None:
        """High salary sorts by max salary, then score, then id."""
        result = categorize([
            _make_scored("a", 0.9, salary_max=130_000),
            _make_scored("b", 0.4, salary_max=200_000),
            _make_scored("c", 0.8, salary_max=130_000),
            _make_scored("d", 0.8, salary_max=130_000),
        ])
        assert _ids(result[Category.HIGH_SALARY]) == ["b", "a", "c", "d"]

    def test_input_order_does_not_matter(self) -> None:
        """Shuffled input gives the same output."""
        jobs = [_make_scored(i, s, LocationType.REMOTE) for i, s in (("x", 0.6), ("y", 0.6), ("z", 0.8))]
        assert categorize(jobs) == categorize(list(reversed(jobs)))

    def test_custom_thresholds(self) -> None:
        """Thresholds are injectable."""
        result = categorize(
            [_make_scored("a", 0.6, salary_max=90_000)],
            recommended_min_score=0.7,
            high_salary_min=80_000,
        )
        assert result[Category.RECOMMENDED] == []
        assert _ids(result[Category.HIGH_SALARY]) == ["a"]
