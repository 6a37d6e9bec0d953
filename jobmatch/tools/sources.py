"""Remote listing providers — Remotive, Himalayas, Greenhouse JSON.

Each provider maps its payload into validated JobRecords. Transport and
payload failures surface as ProviderUnavailable; individual bad items are
dropped with a data-quality warning.
"""

from __future__ import annotations

import hashlib
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx
import yaml

from jobmatch.agents.employer import infer_company_size
from jobmatch.errors import InvalidRecord, ProviderUnavailable
from jobmatch.models.job import CompanySize, JobRecord, JobSource, LocationType, validate_record
from jobmatch.models.results import RemoteQuery
from jobmatch.tools.html_cleaner import clean_html
from jobmatch.tools.skills import extract_skills

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 4.0
USER_AGENT = "jobmatch/1.0 (+https://github.com/local; bot)"


# =============================================================================
# Provider interface
# =============================================================================


class RemoteListingProvider(ABC):
    """Opaque source of additional postings. May fail, rate-limit, or return nothing."""

    name: str = "remote"

    @abstractmethod
    def fetch_listings(self, query: RemoteQuery, timeout: float = DEFAULT_TIMEOUT) -> list[JobRecord]:
        """Return validated records or raise ProviderUnavailable."""


class HttpListingProvider(RemoteListingProvider):
    """Shared HTTP plumbing for JSON listing APIs."""

    def __init__(self, url: str, client: httpx.Client | None = None) -> None:
        self.url = url
        self._client = client

    def _get_json(self, url: str, params: dict | None, timeout: float) -> Any:
        kwargs = {
            "params": params,
            "headers": {"User-Agent": USER_AGENT},
            "timeout": timeout,
            "follow_redirects": True,
        }
        try:
            if self._client is not None:
                response = self._client.get(url, **kwargs)
            else:
                response = httpx.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise ProviderUnavailable(self.name, f"timed out after {timeout:.1f}s") from e
        except httpx.HTTPStatusError as e:
            raise ProviderUnavailable(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailable(self.name, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ProviderUnavailable(self.name, f"malformed JSON: {e}") from e

    def _jobs_list(self, data: Any) -> list[dict]:
        if not isinstance(data, dict) or not isinstance(data.get("jobs"), list):
            raise ProviderUnavailable(self.name, "payload has no 'jobs' list")
        return [item for item in data["jobs"] if isinstance(item, dict)]

    def _collect(self, data: Any) -> list[JobRecord]:
        """Map every payload item; a bad item is dropped without sinking the batch."""
        records: list[JobRecord] = []
        for item in self._jobs_list(data):
            try:
                record = validate_record(self._map_item(item), source=JobSource.REMOTE)
            except InvalidRecord as e:
                logger.warning("Data quality (%s): %s", self.name, e)
                continue
            except Exception as e:
                logger.warning("Failed to parse %s item: %s", self.name, e)
                continue
            records.append(record)
        return records

    def _map_item(self, item: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError


# =============================================================================
# Remotive API
# =============================================================================


class RemotiveProvider(HttpListingProvider):
    name = "Remotive"

    def __init__(
        self,
        url: str = "https://remotive.com/api/remote-jobs",
        client: httpx.Client | None = None,
        limit: int = 50,
    ) -> None:
        super().__init__(url, client)
        self.limit = limit

    def fetch_listings(self, query: RemoteQuery, timeout: float = DEFAULT_TIMEOUT) -> list[JobRecord]:
        params: dict[str, Any] = {"limit": self.limit}
        # Remotive works best with one short search term
        terms = query.keywords or query.skills
        if terms:
            params["search"] = terms[0]

        records = self._collect(self._get_json(self.url, params, timeout))
        logger.info("Fetched %d jobs from Remotive", len(records))
        return records

    def _map_item(self, item: dict[str, Any]) -> dict[str, Any]:
        title = item.get("title", "")
        job_url = item.get("url", "")
        company = item.get("company_name", "")
        description = clean_html(item.get("description", ""))
        tags = item.get("tags") if isinstance(item.get("tags"), list) else []

        return {
            "id": _remote_id(job_url or f"{company}{title}"),
            "title": title,
            "company": company,
            "company_size": infer_company_size(company, description),
            "required_skills": _skills_from(tags, title + " " + description),
            "location": item.get("candidate_required_location") or "Remote",
            "location_type": LocationType.REMOTE,
            "salary_range": _salary_range(*_extract_salary(item.get("salary") or "")),
            "application_url": job_url,
            "description": description[:2000],
        }


# =============================================================================
# Himalayas API
# =============================================================================


class HimalayasProvider(HttpListingProvider):
    name = "Himalayas"

    def __init__(
        self,
        url: str = "https://himalayas.app/jobs/api",
        client: httpx.Client | None = None,
        limit: int = 50,
    ) -> None:
        super().__init__(url, client)
        self.limit = limit

    def fetch_listings(self, query: RemoteQuery, timeout: float = DEFAULT_TIMEOUT) -> list[JobRecord]:
        records = self._collect(self._get_json(self.url, {"limit": self.limit}, timeout))
        logger.info("Fetched %d jobs from Himalayas", len(records))
        return records

    def _map_item(self, item: dict[str, Any]) -> dict[str, Any]:
        title = item.get("title", "")
        job_url = item.get("applicationUrl") or item.get("url", "")
        company = item.get("companyName", "")
        description = clean_html(item.get("description", ""))
        categories = item.get("categories") if isinstance(item.get("categories"), list) else []

        locations = item.get("locationRestrictions")
        location = ", ".join(locations) if isinstance(locations, list) and locations else "Remote"

        return {
            "id": _remote_id(job_url or f"{company}{title}"),
            "title": title,
            "company": company,
            "company_size": infer_company_size(company, description),
            "required_skills": _skills_from(categories, title + " " + description),
            "location": location,
            "location_type": LocationType.REMOTE,
            "salary_range": _salary_range(
                _parse_int(item.get("minSalary")), _parse_int(item.get("maxSalary"))
            ),
            "application_url": job_url,
            "description": description[:2000],
        }


# =============================================================================
# Greenhouse JSON API
# =============================================================================


class GreenhouseProvider(HttpListingProvider):
    """One company's public Greenhouse board. Postings link straight to the role."""

    name = "Greenhouse"

    def __init__(
        self,
        company_slug: str,
        company_size: CompanySize | str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(
            f"https://boards-api.greenhouse.io/v1/boards/{company_slug}/jobs", client
        )
        self.company_slug = company_slug
        self.company = company_slug.replace("-", " ").title()
        self.company_size = CompanySize(company_size) if company_size else None
        self.name = f"Greenhouse ({company_slug})"

    def fetch_listings(self, query: RemoteQuery, timeout: float = DEFAULT_TIMEOUT) -> list[JobRecord]:
        records = self._collect(self._get_json(self.url, {"content": "true"}, timeout))
        logger.info("Fetched %d jobs from %s", len(records), self.name)
        return records

    def _map_item(self, item: dict[str, Any]) -> dict[str, Any]:
        title = item.get("title", "")
        job_url = item.get("absolute_url", "")
        description = clean_html(item.get("content", ""))
        loc_data = item.get("location")
        location = loc_data.get("name", "") if isinstance(loc_data, dict) else ""

        return {
            "id": _remote_id(job_url or f"{self.company}{title}"),
            "title": title,
            "company": self.company,
            "company_size": self.company_size or infer_company_size(self.company, description),
            "required_skills": extract_skills(title + " " + description),
            "location": location,
            "location_type": _infer_location_type(f"{title} {location} {description}"),
            "salary_range": _salary_range(*_extract_salary(description)),
            "application_url": job_url,
            "description": description[:2000],
        }


# =============================================================================
# Provider config loading
# =============================================================================


def load_provider_config(filepath: str = "sources.yaml") -> dict | None:
    """Return the first enabled provider entry from sources.yaml, or None."""
    path = Path(filepath)
    if not path.exists():
        logger.warning("Sources file not found at %s — remote provider disabled", filepath)
        return None

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    providers = data.get("providers", [])
    enabled = [p for p in providers if isinstance(p, dict) and p.get("enabled", False)]
    if len(enabled) > 1:
        logger.info("%d providers enabled — using the first (%s)", len(enabled), enabled[0].get("name"))
    return enabled[0] if enabled else None


def build_provider(
    config: dict | None,
    client: httpx.Client | None = None,
) -> RemoteListingProvider | None:
    """Instantiate the provider described by a sources.yaml entry."""
    if not config:
        return None

    provider_type = config.get("type", "")
    name = config.get("name", provider_type)

    if provider_type == "remotive":
        return RemotiveProvider(
            url=config.get("url", "https://remotive.com/api/remote-jobs"), client=client
        )
    if provider_type == "himalayas":
        return HimalayasProvider(
            url=config.get("url", "https://himalayas.app/jobs/api"), client=client
        )
    if provider_type == "greenhouse":
        slug = config.get("company_slug", "")
        if not slug:
            logger.warning("Greenhouse provider '%s' has no company_slug — disabled", name)
            return None
        return GreenhouseProvider(slug, company_size=config.get("company_size"), client=client)

    logger.warning("Unknown provider type '%s' for '%s' — disabled", provider_type, name)
    return None


# =============================================================================
# Helper functions
# =============================================================================


def _remote_id(key: str) -> str:
    return "remote-" + hashlib.sha256(key.encode()).hexdigest()[:12]


def _skills_from(tags: list, text: str) -> frozenset[str]:
    return extract_skills(" ".join(str(t) for t in tags) + " " + text)


def _parse_int(value) -> int | None:
    """Safely parse an integer from various formats."""
    if value is None:
        return None
    try:
        cleaned = str(value).replace(",", "").replace("$", "").strip()
        if cleaned.lower().endswith("k"):
            return int(float(cleaned[:-1]) * 1000)
        return int(float(cleaned))
    except (ValueError, TypeError):
        return None


def _salary_range(low: int | None, high: int | None) -> dict | None:
    """Build a salary range; a lone minimum is treated as the whole band."""
    if high is None:
        high = low
    if high is None:
        return None
    if low is None or low > high:
        low = high
    return {"min": low, "max": high}


def _infer_location_type(text: str) -> LocationType:
    """Infer remote work type from text content; defaults to on-site."""
    text_lower = text.lower()
    if any(term in text_lower for term in ["fully remote", "100% remote", "remote only", "anywhere"]):
        return LocationType.REMOTE
    if "hybrid" in text_lower:
        return LocationType.HYBRID
    if any(term in text_lower for term in ["on-site", "onsite", "in-office", "in office"]):
        return LocationType.ONSITE
    if "remote" in text_lower:
        return LocationType.REMOTE
    return LocationType.ONSITE


def _extract_salary(text: str) -> tuple[int | None, int | None]:
    """Extract an annual salary band from text as (min, max)."""
    if not text:
        return None, None

    # $XXX,XXX - $XXX,XXX  or  $XXXk - $XXXk
    match = re.search(r"\$(\d+(?:\.\d+)?)[kK]\s*(?:[–\-—]|to)\s*\$?(\d+(?:\.\d+)?)[kK]", text)
    if match:
        return int(float(match.group(1)) * 1000), int(float(match.group(2)) * 1000)

    match = re.search(
        r"\$?(\d{1,3}(?:,\d{3})+)\s*(?:[–\-—]|to)\s*\$?(\d{1,3}(?:,\d{3})+)", text
    )
    if match:
        return int(match.group(1).replace(",", "")), int(match.group(2).replace(",", ""))

    # Single salary mention
    single = re.search(r"\$(\d{1,3}(?:,\d{3})+)", text)
    if single:
        val = int(single.group(1).replace(",", ""))
        if val > 10000:  # Likely annual salary
            return val, None

    return None, None
