"""Error taxonomy for the matching engine."""

from __future__ import annotations


class JobMatchError(Exception):
    """Base class for all jobmatch errors."""


class InvalidProfile(JobMatchError, ValueError):
    """Candidate profile or FilterSpec failed validation at the API boundary."""


class InvalidRecord(JobMatchError, ValueError):
    """A curated or fetched record violates the JobRecord invariants."""


class ProviderUnavailable(JobMatchError):
    """Remote listing provider failed, timed out, or returned a malformed payload."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
