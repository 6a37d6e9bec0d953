"""HTML cleaning utility for remote job descriptions."""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup


def clean_html(raw_html: str | None) -> str:
    """Strip HTML tags and normalize whitespace from a job description.

    Some boards (Greenhouse) send entity-escaped markup, so entities are
    decoded before parsing.
    """
    if not raw_html:
        return ""
    text = html.unescape(raw_html)
    if "<" not in text:
        return re.sub(r"\s+", " ", text).strip()

    soup = BeautifulSoup(text, "html.parser")

    # Remove script and style elements
    for element in soup(["script", "style", "nav", "footer", "header"]):
        element.decompose()

    return re.sub(r"\s+", " ", soup.get_text(separator=" ")).strip()
