"""Output renderers for search responses (console text, JSON)."""

from __future__ import annotations

from collections.abc import Callable

from MindbreezeClient.core.models import SearchResponse
from MindbreezeClient.renderers.console import render_text
from MindbreezeClient.renderers.json import render_json

Renderer = Callable[..., str]

_RENDERERS: dict[str, Renderer] = {
    "text": render_text,
    "json": render_json,
}


def render_response(response: SearchResponse, output_format: str, *, page: int = 1) -> str:
    """Render ``response`` in ``output_format``.

    Raises:
        ValueError: If the format is unknown.
    """
    renderer = _RENDERERS.get(output_format)
    if renderer is None:
        raise ValueError(f"Unsupported output format: {output_format}")
    return renderer(response, page=page)


__all__ = [
    "render_json",
    "render_response",
    "render_text",
]
