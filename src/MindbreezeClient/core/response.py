"""Mindbreeze response normalizer."""

from __future__ import annotations

import html
import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from MindbreezeClient.core.models import HttpResult, Pagination, PaginationToken, Record, SearchResponse
from MindbreezeClient.errors import HttpError
from MindbreezeClient.utils.log import log

if TYPE_CHECKING:
    from MindbreezeClient.storage.tokens import PaginationTokenStore

_TAG_RE = re.compile(r"<[^>]*>")
SPELLING_ALTERNATIVE = "query_spelling"


@dataclass(slots=True)
class ResponseNormalizer:
    """Turn one HTTP result into a ``SearchResponse``.

    Stores the continuation token of a successful response and clears it
    when the response carries no results.

    Attributes:
        token_store: Storage for continuation tokens.
        session_id: Key the token is stored under.
        clear_token_on_http_error: Also clear the stored token when the
            backend answers with a non-success status.
    """

    token_store: PaginationTokenStore
    session_id: str
    clear_token_on_http_error: bool = False

    def normalize(self, encoded_query: str, result: HttpResult) -> SearchResponse:
        """Normalize ``result`` for the query encoded as ``encoded_query``.

        Args:
            encoded_query: Encoded query of the request that produced ``result``.
            result: Status/body pair from the HTTP collaborator.

        Returns:
            Normalized response; empty when the body has no results.

        Raises:
            HttpError: If the status is not 2xx.
        """
        status = result.status_code
        if not 200 <= status < 300:
            if self.clear_token_on_http_error:
                self.token_store.set(self.session_id, None)
            raise HttpError(status)

        body = _decode_body(result.body)
        resultset = body.get("resultset") if isinstance(body, Mapping) else None
        results = resultset.get("results") if isinstance(resultset, Mapping) else None
        if not isinstance(results, list):
            log.debug("Response without results, clearing continuation token: session=%s", self.session_id)
            self.token_store.set(self.session_id, None)
            return SearchResponse()

        self._store_token(encoded_query, resultset)
        records = parse_records(results)
        log.debug("Normalized %d records", len(records))
        return SearchResponse(
            records=records,
            pagination=parse_pagination(body),
            suggestion=parse_suggestion(body),
        )

    def _store_token(self, encoded_query: str, resultset: Mapping[str, Any]) -> None:
        result_pages = resultset.get("result_pages")
        qeng_ids = result_pages.get("qeng_ids") if isinstance(result_pages, Mapping) else None
        if qeng_ids is None:
            log.debug("Response without qeng_ids, clearing continuation token: session=%s", self.session_id)
            self.token_store.set(self.session_id, None)
            return
        self.token_store.set(self.session_id, PaginationToken(query=encoded_query, vars=qeng_ids))


def parse_records(results: Sequence[Any]) -> list[Record]:
    """Flatten per-result property arrays into records."""
    records: list[Record] = []
    for result in results:
        if not isinstance(result, Mapping):
            continue
        data: dict[str, Any] = {}
        for prop in result.get("properties") or ():
            if not isinstance(prop, Mapping) or "id" not in prop:
                continue
            values = prop.get("data")
            name = str(prop["id"]).lower()
            data[name] = values[0] if isinstance(values, list) and values else None
        fields = {key: value for key, value in result.items() if key not in ("properties", "data")}
        records.append(Record(data=data, fields=fields))
    return records


def parse_pagination(body: Mapping[str, Any]) -> Pagination:
    """Build the pagination summary from a response body."""
    resultset = body.get("resultset") or {}
    return Pagination(
        prev=resultset.get("prev_avail"),
        next=resultset.get("next_avail"),
        total=body.get("estimated_count", 0) or 0,
    )


def parse_suggestion(body: Mapping[str, Any]) -> str | None:
    """Return the first spelling alternative without markup, if any."""
    for alternative in body.get("alternatives") or ():
        if not isinstance(alternative, Mapping) or alternative.get("name") != SPELLING_ALTERNATIVE:
            continue
        for entry in alternative.get("entries") or ():
            if not isinstance(entry, Mapping):
                continue
            markup = entry.get("html")
            if not isinstance(markup, str):
                return None
            return strip_tags(markup) or None
        return None
    return None


def strip_tags(text: str) -> str:
    """Unescape entities, then remove HTML tags, including entity-encoded ones."""
    return _TAG_RE.sub("", html.unescape(text)).strip()


def _decode_body(body: Any) -> Any:
    """Decode a JSON text body; mappings pass through unchanged."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            return json.loads(body)
        except ValueError:
            log.debug("Response body is not valid JSON")
            return None
    return body
