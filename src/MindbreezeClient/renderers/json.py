"""JSON rendering of a normalized response."""

from __future__ import annotations

import json

from MindbreezeClient.core.models import SearchResponse


def render_json(response: SearchResponse, *, page: int = 1) -> str:
    """Render a response as indented JSON text.

    The payload holds ``page``, ``records`` (each record's housekeeping
    fields plus its flattened ``data``), ``pagination`` and ``suggestion``.
    """
    payload = {"page": page, **response.to_dict()}
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str) + "\n"
