"""Tests for the fallback coordinator."""

from __future__ import annotations

import threading
import time

import httpx

from jobmatch.agents.coordinator import FallbackCoordinator, build_query
from jobmatch.errors import ProviderUnavailable
from jobmatch.models.job import JobRecord, JobSource, LocationType
from jobmatch.models.profile import CandidateProfile, FilterSpec
from jobmatch.models.results import GatherStatus, ProviderResult, ProviderStatus, RemoteQuery
from jobmatch.storage.store import JobRecordStore
from jobmatch.tools.sources import RemoteListingProvider, RemotiveProvider


def _make_job(id: str, title: str, company: str, source: JobSource = JobSource.CURATED, **kwargs) -> JobRecord:
    slug = company.lower().replace(" ", "-")
    return JobRecord(
        id=id,
        title=title,
        company=company,
        required_skills=("python",),
        location_type=LocationType.REMOTE,
        application_url=kwargs.pop("application_url", f"https://{slug}.example.com/careers/{id}"),
        source=source,
        **kwargs,
    )


class FakeProvider(RemoteListingProvider):
    """Provider returning canned listings or raising a canned error."""

    name = "fake"

    def __init__(self, records=None, error: Exception | None = None) -> None:
        self.records = records if records is not None else []
        self.error = error
        self.queries: list[RemoteQuery] = []

    def fetch_listings(self, query: RemoteQuery, timeout: float):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.records


class SlowProvider(RemoteListingProvider):
    """Provider that blocks until released, simulating a hung connection."""

    name = "slow"

    def __init__(self) -> None:
        self.release = threading.Event()

    def fetch_listings(self, query: RemoteQuery, timeout: float):
        self.release.wait(5)
        return [_make_job("remote-late", "Late Engineer", "Tardy Inc", JobSource.REMOTE)]


def _store() -> JobRecordStore:
    return JobRecordStore([
        _make_job("cur-1", "Backend Engineer", "Acme Corp"),
        _make_job("cur-2", "Data Engineer", "Globex"),
    ])


PROFILE = CandidateProfile(skills=["python", "sql", "aws", "docker"], preferred_location_type="remote")
FILTERS = FilterSpec()


class TestFallback:
    """Remote failures degrade to the curated corpus instead of raising."""

    def test_failing_provider_degrades(self) -> None:
        """ProviderUnavailable yields curated-only results with a degraded status."""
        provider = FakeProvider(error=ProviderUnavailable("fake", "HTTP 500"))
        result = FallbackCoordinator(_store(), provider).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.DEGRADED
        assert result.provider_status == ProviderStatus.FAILED
        assert [r.id for r in result.records] == ["cur-1", "cur-2"]
        assert result.sources == [JobSource.CURATED]

    def test_unexpected_exception_degrades(self) -> None:
        """Any provider exception is contained."""
        provider = FakeProvider(error=RuntimeError("boom"))
        result = FallbackCoordinator(_store(), provider).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.DEGRADED
        assert len(result.records) == 2

    def test_slow_provider_times_out(self) -> None:
        """A hung provider is abandoned after the timeout."""
        provider = SlowProvider()
        coordinator = FallbackCoordinator(_store(), provider, timeout_secs=0.2)
        try:
            started = time.monotonic()
            result = coordinator.gather_candidates(PROFILE, FILTERS)
            elapsed = time.monotonic() - started
        finally:
            provider.release.set()

        assert elapsed < 2.0
        assert result.status == GatherStatus.DEGRADED
        assert result.provider_status == ProviderStatus.TIMEOUT
        assert all(r.source == JobSource.CURATED for r in result.records)

    def test_malformed_response_degrades(self) -> None:
        """A non-list payload is treated as a failure."""
        provider = FakeProvider(records={"jobs": []})
        result = FallbackCoordinator(_store(), provider).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.DEGRADED
        assert result.provider_status == ProviderStatus.FAILED

    def test_empty_provider_is_not_degraded(self) -> None:
        """An empty but healthy provider keeps status ok."""
        result = FallbackCoordinator(_store(), FakeProvider([])).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.OK
        assert result.provider_status == ProviderStatus.EMPTY
        assert len(result.records) == 2

    def test_no_provider_is_disabled(self) -> None:
        """Offline mode uses only the curated store."""
        result = FallbackCoordinator(_store()).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.OK
        assert result.provider_status == ProviderStatus.DISABLED

    def test_no_candidates_anywhere(self) -> None:
        """Empty store plus failed provider is NO_CANDIDATES, not an error."""
        provider = FakeProvider(error=ProviderUnavailable("fake", "down"))
        result = FallbackCoordinator(JobRecordStore(), provider).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.NO_CANDIDATES
        assert result.records == []
        assert result.sources == []


class TestMerge:
    """Curated and remote records are merged without duplicates."""

    def test_remote_records_appended_after_curated(self) -> None:
        """Curated first, then remote, in their original order."""
        remote = [
            _make_job("remote-a", "ML Engineer", "Initech", JobSource.REMOTE),
            _make_job("remote-b", "SRE", "Umbrella", JobSource.REMOTE),
        ]
        result = FallbackCoordinator(_store(), FakeProvider(remote)).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.OK
        assert [r.id for r in result.records] == ["cur-1", "cur-2", "remote-a", "remote-b"]
        assert result.sources == [JobSource.CURATED, JobSource.REMOTE]

    def test_curated_wins_on_duplicate(self) -> None:
        """Same company and title keeps the curated record."""
        remote = [
            _make_job(
                "remote-dup", "Backend  engineer", "ACME Corp.", JobSource.REMOTE,
                application_url="https://boards.example.com/jobs/12345",
            ),
        ]
        result = FallbackCoordinator(_store(), FakeProvider(remote)).gather_candidates(PROFILE, FILTERS)

        ids = [r.id for r in result.records]
        assert ids == ["cur-1", "cur-2"]
        assert result.duplicates_dropped == 1
        assert result.records[0].application_url == "https://acme-corp.example.com/careers/cur-1"

    def test_duplicate_ids_dropped(self) -> None:
        """A remote record reusing a curated id is dropped."""
        remote = [_make_job("cur-1", "Totally Different Role", "Other Co", JobSource.REMOTE)]
        result = FallbackCoordinator(_store(), FakeProvider(remote)).gather_candidates(PROFILE, FILTERS)

        assert len(result.records) == 2
        assert len({r.id for r in result.records}) == 2


class TestBuildQuery:
    """Remote query derivation."""

    def test_query_uses_sorted_skills(self) -> None:
        """Skills are sorted and capped for a reproducible query."""
        query = build_query(PROFILE, FILTERS)
        assert query.skills == ["aws", "docker", "python"]
        assert query.location == "remote"

    def test_query_passed_to_provider(self) -> None:
        """The provider receives the derived query and configured keywords."""
        provider = FakeProvider([])
        FallbackCoordinator(_store(), provider, keywords=("backend",)).gather_candidates(PROFILE, FILTERS)

        assert provider.queries[0].keywords == ["backend"]

    def test_onsite_profile_has_no_location(self) -> None:
        """Only a remote preference or filter narrows the query location."""
        profile = CandidateProfile(skills=["python"], preferred_location_type="onsite")
        assert build_query(profile, FilterSpec()).location == ""
        assert build_query(profile, FilterSpec(location="remote")).location == "remote"


class TestRemoteItemQuality:
    """A bad remote item never costs the valid ones."""

    def test_badly_typed_item_keeps_provider_ok(self) -> None:
        """An empty store plus one good and one bad Remotive item still yields the good one."""
        payload = {
            "jobs": [
                {
                    "title": "Python Developer",
                    "url": "https://remotive.com/remote-jobs/software-dev/python-developer-1",
                    "company_name": "Globex",
                    "description": "Python services",
                    "tags": ["python"],
                },
                {"title": None, "url": "https://remotive.com/remote-jobs/software-dev/x-2", "company_name": "Nullco"},
            ]
        }
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)))
        provider = RemotiveProvider(client=client)

        result = FallbackCoordinator(JobRecordStore(), provider).gather_candidates(PROFILE, FILTERS)

        assert result.status == GatherStatus.OK
        assert result.provider_status == ProviderStatus.OK
        assert [r.title for r in result.records] == ["Python Developer"]


class TestProviderResult:
    """Only usable provider results contribute records."""

    def test_usable_requires_ok_and_records(self) -> None:
        job = _make_job("remote-a", "ML Engineer", "Initech", JobSource.REMOTE)
        assert ProviderResult(status=ProviderStatus.OK, records=[job]).usable
        assert not ProviderResult(status=ProviderStatus.OK).usable
        assert not ProviderResult(status=ProviderStatus.FAILED, records=[job]).usable

    def test_unusable_records_not_merged(self) -> None:
        """Records attached to a failed result are ignored by the merge."""
        job = _make_job("remote-a", "ML Engineer", "Initech", JobSource.REMOTE)
        failed = ProviderResult(status=ProviderStatus.FAILED, records=[job], error="boom")

        result = FallbackCoordinator(_store())._merge(list(_store().all()), failed)

        assert [r.id for r in result.records] == ["cur-1", "cur-2"]
        assert result.status == GatherStatus.DEGRADED
