"""Skill normalization and extraction against a fixed vocabulary."""

from __future__ import annotations

import re
from collections.abc import Iterable

# Common spellings folded onto one canonical token
SKILL_ALIASES: dict[str, str] = {
    "node.js": "node",
    "nodejs": "node",
    "node js": "node",
    "react.js": "react",
    "reactjs": "react",
    "vue.js": "vue",
    "vuejs": "vue",
    "next.js": "nextjs",
    "js": "javascript",
    "ts": "typescript",
    "golang": "go",
    "k8s": "kubernetes",
    "postgres": "postgresql",
    "amazon web services": "aws",
    "google cloud": "gcp",
    "ml": "machine learning",
    "c sharp": "c#",
    "html5": "html",
    "css3": "css",
}

SKILL_VOCABULARY: frozenset[str] = frozenset({
    "javascript", "typescript", "react", "vue", "angular", "nextjs", "node",
    "html", "css", "tailwind", "graphql",
    "python", "django", "flask", "fastapi", "pandas", "numpy",
    "machine learning", "tensorflow", "pytorch", "sql", "postgresql",
    "mysql", "mongodb", "redis", "kafka", "spark",
    "java", "spring", "kotlin", "scala", "go", "rust", "ruby", "rails",
    "php", "c#", ".net", "c++", "swift",
    "aws", "gcp", "azure", "docker", "kubernetes", "terraform", "linux",
    "git", "ci/cd", "figma",
})


def normalize_skill(skill: str) -> str:
    """Lower-case, collapse whitespace and fold known aliases."""
    key = re.sub(r"\s+", " ", (skill or "").strip().lower())
    return SKILL_ALIASES.get(key, key)


def normalize_skills(skills: Iterable[str] | str | None) -> frozenset[str]:
    """Normalize an iterable (or comma-separated string) of skills, dropping blanks."""
    if skills is None:
        return frozenset()
    if isinstance(skills, str):
        skills = skills.split(",")
    elif not isinstance(skills, Iterable):
        raise ValueError(f"skills must be a list or comma-separated string, got {type(skills).__name__}")
    return frozenset(s for s in (normalize_skill(str(raw)) for raw in skills) if s)


def extract_skills(
    text: str,
    vocabulary: Iterable[str] = SKILL_VOCABULARY,
) -> frozenset[str]:
    """Find vocabulary skills mentioned in free text.

    Matches whole tokens only, so "go" does not fire on "google" and "java"
    does not fire on "javascript". Aliases found in the text are folded.
    """
    if not text:
        return frozenset()
    vocab = {normalize_skill(v) for v in vocabulary}
    terms = vocab | {alias for alias, canonical in SKILL_ALIASES.items() if canonical in vocab}

    lowered = text.lower()
    found: set[str] = set()
    for term in terms:
        pattern = r"(?<![\w.#+])" + re.escape(term) + r"(?![\w#+])"
        if re.search(pattern, lowered):
            found.add(normalize_skill(term))
    return frozenset(found)
