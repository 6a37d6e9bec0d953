"""Profile parser — reads profile.md into a CandidateProfile and FilterSpec."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from jobmatch.models.profile import CandidateProfile, FilterSpec, load_filters, load_profile

logger = logging.getLogger(__name__)


def parse_profile(filepath: str = "profile.md") -> CandidateProfile:
    """Parse a human-written profile.md file into a CandidateProfile.

    The parser looks for bullet key/value lines anywhere in the file and
    is intentionally lenient about headings and order. Values that are
    present but invalid raise InvalidProfile.
    """
    text = _read(filepath)
    if text is None:
        return CandidateProfile()

    data: dict = {}

    skills = _parse_list(text, r"-\s*[Ss]kills?\s*:\s*(.*)")
    if skills:
        data["skills"] = skills

    level = _parse_value(text, r"-\s*[Ee]xperience(?:\s+level)?\s*:\s*(.*)")
    if level:
        data["experience_level"] = level

    location = _parse_value(text, r"-\s*[Pp]referred\s+location(?:\s+type)?\s*:\s*(.*)")
    if location:
        data["preferred_location_type"] = location

    min_salary = _parse_number(text, r"[Mm]inimum\s+salary[:\s]+(\d[\d,]*)")
    if min_salary is not None:
        data["min_salary"] = min_salary

    culture = _parse_list(text, r"-\s*[Cc]ulture(?:\s+preferences)?\s*:\s*(.*)")
    if culture:
        data["culture_preferences"] = culture

    profile = load_profile(data)
    logger.info(
        "Parsed profile: %d skills, level=%s, location=%s, min salary=%s",
        len(profile.skills),
        profile.experience_level.value,
        profile.preferred_location_type.value,
        profile.min_salary,
    )
    return profile


def parse_filters(filepath: str = "profile.md") -> FilterSpec:
    """Parse the optional filter lines of profile.md into a FilterSpec."""
    text = _read(filepath)
    if text is None:
        return FilterSpec()

    data = {
        "location": _parse_value(text, r"-\s*[Ll]ocation\s+filter\s*:\s*(.*)"),
        "experience": _parse_value(text, r"-\s*[Ee]xperience\s+filter\s*:\s*(.*)"),
        "salary": _parse_value(text, r"-\s*[Ss]alary\s+filter\s*:\s*(.*)"),
    }
    return load_filters({k: v for k, v in data.items() if v})


# =============================================================================
# Parsing helpers
# =============================================================================


def _read(filepath: str) -> str | None:
    path = Path(filepath)
    if not path.exists():
        logger.warning("Profile file not found at %s — using defaults", filepath)
        return None
    text = path.read_text(encoding="utf-8")
    logger.debug("Loaded profile from %s (%d chars)", filepath, len(text))
    return text


def _parse_value(text: str, pattern: str) -> str | None:
    """Extract the single value following a pattern."""
    match = re.search(pattern, text, re.IGNORECASE)
    if not match:
        return None
    return match.group(1).strip() or None


def _parse_number(text: str, pattern: str) -> int | None:
    """Extract a number following a pattern."""
    match = re.search(pattern, text, re.IGNORECASE)
    if match:
        try:
            return int(match.group(1).replace(",", ""))
        except ValueError:
            return None
    return None


def _parse_list(text: str, pattern: str) -> list[str]:
    """Extract a comma-separated list following a pattern."""
    match = re.search(pattern, text, re.IGNORECASE)
    if not match:
        return []
    items = [item.strip().strip("-").strip() for item in match.group(1).split(",")]
    return [item for item in items if item]
