"""Read-only store for the curated job corpus."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml

from jobmatch.errors import InvalidRecord
from jobmatch.models.job import JobRecord, JobSource, validate_record

logger = logging.getLogger(__name__)


class JobRecordStore:
    """Immutable, once-initialized curated corpus.

    Share one instance across requests by reference; nothing mutates it
    after construction.
    """

    def __init__(self, records: Iterable[JobRecord] = ()) -> None:
        unique: dict[str, JobRecord] = {}
        for record in records:
            if record.id in unique:
                logger.warning("Duplicate curated id %r — keeping first occurrence", record.id)
                continue
            unique[record.id] = record
        self._records: tuple[JobRecord, ...] = tuple(unique.values())
        self._by_id: dict[str, JobRecord] = unique

    @classmethod
    def from_file(cls, filepath: str | Path) -> JobRecordStore:
        """Load a YAML or JSON dataset; invalid rows are dropped with a warning."""
        path = Path(filepath)
        if not path.exists():
            logger.warning("Curated dataset not found at %s — starting with an empty store", path)
            return cls()

        rows = _read_rows(path)
        records: list[JobRecord] = []
        for row in rows:
            if not isinstance(row, dict):
                logger.warning("Skipping non-mapping row in %s: %r", path, row)
                continue
            try:
                records.append(validate_record(row, source=JobSource.CURATED))
            except InvalidRecord as e:
                logger.warning("Data quality: %s", e)

        store = cls(records)
        logger.info(
            "Loaded %d curated jobs from %s (%d rows rejected)",
            len(store), path, len(rows) - len(store),
        )
        return store

    def all(self) -> tuple[JobRecord, ...]:
        return self._records

    def get(self, job_id: str) -> JobRecord | None:
        return self._by_id.get(job_id)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[JobRecord]:
        return iter(self._records)


def _read_rows(path: Path) -> list[Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        logger.error("Curated dataset %s must be a list or contain a 'jobs' list", path)
        return []
    return data
