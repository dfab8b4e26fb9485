"""Console text rendering of a normalized response."""

from __future__ import annotations

from typing import Any

from MindbreezeClient.core.models import SearchResponse

_TITLE_KEYS = ("title", "mes:title", "name")
_URL_KEYS = ("url", "mes:url", "link")
_SKIP_DETAIL_KEYS = set(_TITLE_KEYS) | set(_URL_KEYS)


def render_text(response: SearchResponse, *, page: int = 1) -> str:
    """Render a response into a human-readable text block.

    Args:
        response: Normalized search response.
        page: Page number shown in the header.

    Returns:
        A formatted string ready to be printed.
    """
    pagination = response.pagination
    lines = [f"Page {page} - {len(response.records)} of ~{pagination.total} results"]
    if response.suggestion:
        lines.append(f"Did you mean: {response.suggestion}")
    lines.append("")

    for idx, record in enumerate(response.records, start=1):
        lines.append(f"{idx}. {_first_value(record.data, _TITLE_KEYS) or '(untitled)'}")
        url = _first_value(record.data, _URL_KEYS)
        if url:
            lines.append(f"   URL: {url}")
        for key, value in record.data.items():
            if key in _SKIP_DETAIL_KEYS or value in (None, ""):
                continue
            lines.append(f"   {key}: {_shorten(value)}")
        lines.append("")

    nav = []
    if pagination.prev:
        nav.append("prev")
    if pagination.next:
        nav.append("next")
    if nav:
        lines.append(f"Available: {', '.join(nav)}")
    return "\n".join(lines).rstrip() + "\n"


def _first_value(data: Any, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return ""


def _shorten(value: Any, limit: int = 160) -> str:
    text = " ".join(str(value).split())
    return text if len(text) <= limit else text[: limit - 3] + "..."
