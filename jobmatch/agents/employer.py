"""Employer heuristics: company size inference and culture tags."""

from __future__ import annotations

import logging

from jobmatch.models.job import CompanySize

logger = logging.getLogger(__name__)

# Well-known employers treated as large when a remote source omits company size
KNOWN_LARGE_COMPANIES = {
    "google", "meta", "apple", "amazon", "microsoft", "netflix", "openai",
    "nvidia", "tesla", "stripe", "airbnb", "uber", "spotify", "salesforce",
    "adobe", "oracle", "ibm", "intel", "amd", "shopify", "atlassian",
    "paypal", "linkedin", "github", "gitlab", "cloudflare", "datadog",
    "snowflake", "databricks", "sap", "infosys", "tcs", "wipro", "flipkart",
}

# Signals that a posting comes from an early-stage company
STARTUP_SIGNALS = [
    "startup", "start-up", "seed stage", "seed-stage", "pre-seed",
    "series a", "early stage", "early-stage", "founding engineer",
    "founding team",
]

CULTURE_TAGS: dict[CompanySize, frozenset[str]] = {
    CompanySize.STARTUP: frozenset({"startup", "fast-paced", "ownership", "equity", "flexible"}),
    CompanySize.MEDIUM: frozenset({"growth", "balanced", "collaborative", "mid-size"}),
    CompanySize.LARGE: frozenset({"enterprise", "stability", "structured", "mentorship", "benefits"}),
}


def culture_tags(size: CompanySize) -> frozenset[str]:
    return CULTURE_TAGS.get(size, frozenset())


def infer_company_size(company: str, description: str = "") -> CompanySize:
    """Classify an employer as startup / medium / large from name and posting text."""
    company_lower = company.lower().strip()

    if company_lower in KNOWN_LARGE_COMPANIES:
        return CompanySize.LARGE

    # Partial match (e.g., "Google DeepMind" -> "google")
    words = set(company_lower.replace(",", " ").split())
    if words & KNOWN_LARGE_COMPANIES:
        return CompanySize.LARGE

    text = description.lower()
    for signal in STARTUP_SIGNALS:
        if signal in text:
            logger.debug("%s classified as startup (signal %r)", company, signal)
            return CompanySize.STARTUP

    return CompanySize.MEDIUM
