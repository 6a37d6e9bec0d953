"""Fallback coordinator: one bounded remote attempt, curated corpus always.

Policy, strictly ordered:
    1. Ask the remote provider, bounded by a timeout. Any failure becomes a
       ProviderResult status; nothing is raised.
    2. Read the curated store (concurrently with step 1).
    3. Merge curated first, then remote, de-duplicating on the normalized
       company|title key so the curated application URL wins.
    4. An empty merge is reported as NO_CANDIDATES, not as an error.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from jobmatch.errors import ProviderUnavailable
from jobmatch.models.job import JobRecord, JobSource, LocationType
from jobmatch.models.profile import CandidateProfile, FilterSpec, LocationFilter, LocationPreference
from jobmatch.models.results import (
    GatherResult,
    GatherStatus,
    ProviderResult,
    ProviderStatus,
    RemoteQuery,
)
from jobmatch.storage.store import JobRecordStore
from jobmatch.tools.sources import DEFAULT_TIMEOUT, RemoteListingProvider

logger = logging.getLogger(__name__)

MAX_QUERY_SKILLS = 3


class FallbackCoordinator:
    """Gathers candidate jobs from the remote provider and the curated store."""

    def __init__(
        self,
        store: JobRecordStore,
        provider: RemoteListingProvider | None = None,
        timeout_secs: float = DEFAULT_TIMEOUT,
        keywords: tuple[str, ...] = (),
    ) -> None:
        self.store = store
        self.provider = provider
        self.timeout_secs = timeout_secs
        self.keywords = tuple(keywords)

    def gather_candidates(self, profile: CandidateProfile, filters: FilterSpec) -> GatherResult:
        query = build_query(profile, filters, self.keywords)

        if self.provider is None:
            curated = list(self.store.all())
            remote = ProviderResult(status=ProviderStatus.DISABLED)
        else:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="remote-fetch")
            try:
                future = executor.submit(self.provider.fetch_listings, query, self.timeout_secs)
                # The curated path never waits on the network
                curated = list(self.store.all())
                remote = self._await_remote(future)
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        return self._merge(curated, remote)

    def _await_remote(self, future) -> ProviderResult:
        name = getattr(self.provider, "name", type(self.provider).__name__)
        try:
            records = future.result(timeout=self.timeout_secs)
        except FutureTimeout:
            future.cancel()
            logger.warning(
                "Degraded: %s did not answer within %.1fs — using curated jobs only",
                name, self.timeout_secs,
            )
            return ProviderResult(
                status=ProviderStatus.TIMEOUT,
                error=f"timed out after {self.timeout_secs:.1f}s",
            )
        except ProviderUnavailable as e:
            logger.warning("Degraded: %s unavailable (%s) — using curated jobs only", name, e.reason)
            return ProviderResult(status=ProviderStatus.FAILED, error=str(e))
        except Exception as e:
            logger.warning("Degraded: %s failed (%s) — using curated jobs only", name, e)
            return ProviderResult(status=ProviderStatus.FAILED, error=str(e) or type(e).__name__)

        if not isinstance(records, list) or not all(isinstance(r, JobRecord) for r in records):
            logger.warning("Degraded: %s returned a malformed response — using curated jobs only", name)
            return ProviderResult(status=ProviderStatus.FAILED, error="malformed response")
        if not records:
            logger.info("%s returned no listings", name)
            return ProviderResult(status=ProviderStatus.EMPTY)
        return ProviderResult(status=ProviderStatus.OK, records=records)

    def _merge(self, curated: list[JobRecord], remote: ProviderResult) -> GatherResult:
        merged: list[JobRecord] = []
        seen_keys: set[str] = set()
        seen_ids: set[str] = set()
        dropped = 0

        remote_records = remote.records if remote.usable else []
        for record in curated + remote_records:
            if record.dedupe_key in seen_keys or record.id in seen_ids:
                dropped += 1
                logger.debug("Duplicate dropped: %s at %s (%s)", record.title, record.company, record.source.value)
                continue
            seen_keys.add(record.dedupe_key)
            seen_ids.add(record.id)
            merged.append(record)

        sources = [s for s in (JobSource.CURATED, JobSource.REMOTE) if any(r.source == s for r in merged)]

        if not merged:
            status = GatherStatus.NO_CANDIDATES
            logger.warning("No candidates: curated store and remote provider both empty")
        elif remote.status in (ProviderStatus.FAILED, ProviderStatus.TIMEOUT):
            status = GatherStatus.DEGRADED
        else:
            status = GatherStatus.OK

        logger.info(
            "Gathered %d candidates (curated=%d, remote=%d, duplicates=%d, provider=%s)",
            len(merged), len(curated), len(remote_records), dropped, remote.status.value,
        )
        return GatherResult(
            status=status,
            records=merged,
            sources=sources,
            provider_status=remote.status,
            duplicates_dropped=dropped,
        )


def build_query(
    profile: CandidateProfile,
    filters: FilterSpec,
    keywords: tuple[str, ...] = (),
) -> RemoteQuery:
    """Derive the remote query from the profile; skills sorted for reproducibility."""
    wants_remote = (
        filters.location == LocationFilter.REMOTE
        or profile.preferred_location_type == LocationPreference.REMOTE
    )
    return RemoteQuery(
        skills=sorted(profile.skills)[:MAX_QUERY_SKILLS],
        location=LocationType.REMOTE.value if wants_remote else "",
        keywords=list(keywords),
    )
