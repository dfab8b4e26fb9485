"""Search request builder for the Mindbreeze JSON API."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from MindbreezeClient.core.constraints import create_constraint
from MindbreezeClient.core.models import SearchResponse
from MindbreezeClient.core.response import ResponseNormalizer
from MindbreezeClient.errors import InvalidArgumentError, PaginationStateError
from MindbreezeClient.utils.log import log

if TYPE_CHECKING:
    from MindbreezeClient.storage.tokens import PaginationTokenStore
    from MindbreezeClient.transport.client import HttpClient

DATE_LABEL = "mes:date"
DATASOURCE_LABEL = "fqcategory"
DEFAULT_SESSION_ID = "default"

VALID_ORDER_BY: dict[str, str] = {
    "relevance": "mes:relevance",
    "date": "mes:date",
}

VALID_ORDER: dict[str, str] = {
    "asc": "ASCENDING",
    "desc": "DESCENDING",
}

JSON_HEADERS = {"Content-Type": "application/json"}


def encode_query(query: str) -> str:
    """Return the base64 form of ``query`` used to bind continuation tokens."""
    return base64.b64encode(query.encode("utf-8")).decode("ascii")


class QueryBuilder:
    """Accumulate search parameters and compile them into a request document.

    Every setter returns the builder so calls can be chained. The compiled
    document is rebuilt from the current state on every ``compile_data`` call.

    Attributes:
        url: Search endpoint the request is posted to.
        query: Free-text query.
        encoded_query: Base64 form of ``query``, the key binding a
            continuation token to the query that produced it.
        properties: Result properties to return, in order.
        facets: Facets to return, in order.
        page: 1-based page number.
        per_page: Number of results per page.
        page_count: Number of entries requested in ``result_pages``.
        alternatives: Max number of alternative queries to return.
        content_sample_length: Length of the content snippet.
        datasources: Named datasource constraints; each name maps to the
            datasource ids the constraint limits the search to.
        order_by: Internal sort key.
        order: Sort direction.
    """

    def __init__(
        self,
        http: HttpClient,
        token_store: PaginationTokenStore,
        *,
        url: str = "",
        session_id: str = DEFAULT_SESSION_ID,
        datasources: Mapping[str, Sequence[str]] | None = None,
        clear_token_on_http_error: bool = False,
    ) -> None:
        self.http = http
        self.token_store = token_store
        self.url = url
        self.session_id = session_id
        self.clear_token_on_http_error = clear_token_on_http_error

        self.query = ""
        self.encoded_query = encode_query("")
        self.properties: list[str] = []
        self.facets: list[str] = []
        self.page = 1
        self.per_page = 10
        self.page_count = 10
        self.alternatives = 10
        self.content_sample_length = 300
        self.datasources: dict[str, list[str]] = {
            name: list(ids) for name, ids in (datasources or {}).items()
        }
        self.order_by = VALID_ORDER_BY["relevance"]
        self.order = VALID_ORDER["desc"]

        self.query_constraints: list[dict[str, Any]] = []
        self.datasource_constraint: dict[str, Any] | None = None

    def set_query(self, query: str) -> QueryBuilder:
        self.query = query
        self.encoded_query = encode_query(query)
        return self

    def set_page(self, page: Any) -> QueryBuilder:
        """Set the page number; non-numeric values and values below 1 fall back to 1."""
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        self.page = page if page > 0 else 1
        return self

    def set_per_page(self, per_page: int) -> QueryBuilder:
        if per_page <= 0:
            raise InvalidArgumentError(f"per_page must be positive, got {per_page}")
        self.per_page = per_page
        return self

    def set_page_count(self, page_count: int) -> QueryBuilder:
        self.page_count = page_count
        return self

    def set_alternatives(self, alternatives: int) -> QueryBuilder:
        self.alternatives = alternatives
        return self

    def set_content_sample_length(self, length: int) -> QueryBuilder:
        self.content_sample_length = length
        return self

    def set_properties(self, properties: Iterable[str]) -> QueryBuilder:
        self.properties = list(properties)
        return self

    def add_property(self, name: str) -> QueryBuilder:
        self.properties.append(name)
        return self

    def set_facets(self, facets: Iterable[str]) -> QueryBuilder:
        self.facets = list(facets)
        return self

    def add_facet(self, name: str) -> QueryBuilder:
        self.facets.append(name)
        return self

    def set_order(self, order_by: str, order: str = "desc") -> QueryBuilder:
        """Set result ordering.

        Args:
            order_by: ``relevance`` or ``date`` (case-insensitive).
            order: ``asc`` or ``desc`` (case-insensitive).

        Raises:
            InvalidArgumentError: If either value is not in the allowed set.
        """
        if not isinstance(order_by, str) or not isinstance(order, str):
            raise InvalidArgumentError(f"order_by and order must be strings, got {order_by!r} and {order!r}")
        order_by = order_by.lower()
        order = order.lower()

        if order_by not in VALID_ORDER_BY:
            raise InvalidArgumentError(
                f"{order_by} is not a valid field to order by. "
                f"Please use one of the following: {', '.join(VALID_ORDER_BY)}"
            )
        if order not in VALID_ORDER:
            raise InvalidArgumentError(
                f"{order} is not a valid order. Please use one of the following: {', '.join(VALID_ORDER)}"
            )

        self.order_by = VALID_ORDER_BY[order_by]
        self.order = VALID_ORDER[order]
        return self

    def add_datasource_constraint(self, name: str) -> QueryBuilder:
        """Limit the search to a configured set of datasources.

        Unknown names are ignored. A later call replaces an earlier one.
        """
        datasource_ids = self.datasources.get(name)
        if datasource_ids is None:
            log.debug("Ignoring unknown datasource constraint: %s", name)
            return self

        self.datasource_constraint = create_constraint(DATASOURCE_LABEL, "term", datasource_ids)
        return self

    def add_date_constraint(self, start: float, end: float) -> QueryBuilder:
        """Limit results to documents dated between two Unix timestamps."""
        self.query_constraints.append(create_constraint(DATE_LABEL, "between_dates", [start, end]))
        return self

    def add_constraint(self, label: str, kind: str, data: Any) -> QueryBuilder:
        """Add a constraint of ``kind`` (between_dates, regex, term) on ``label``."""
        self.query_constraints.append(create_constraint(label, kind, data))
        return self

    def clear_constraints(self) -> QueryBuilder:
        self.query_constraints = []
        self.datasource_constraint = None
        return self

    def compile_data(self) -> dict[str, Any]:
        """Compile the current state into the request document.

        Returns:
            JSON-serializable request document.

        Raises:
            PaginationStateError: If ``page > 1`` and no continuation token
                for the current query is stored.
        """
        data: dict[str, Any] = {
            "content_sample_length": self.content_sample_length,
            "user": {
                "query": {"and": {"unparsed": self.query}},
                "constraints": list(self.query_constraints),
            },
            "count": self.per_page,
            "max_page_count": self.page_count,
            "alternatives_query_spelling_max_estimated_count": self.alternatives,
            "order_direction": self.order,
            "orderby": self.order_by,
            "properties": [{"formats": ["HTML", "VALUE"], "name": name} for name in self.properties],
            "facets": [{"formats": ["HTML"], "name": name} for name in self.facets],
        }

        if self.datasource_constraint:
            data["source_context"] = {"constraints": self.datasource_constraint}

        if self.page > 1:
            data["result_pages"] = {
                "qeng_ids": self._continuation_vars(),
                "pages": {
                    "starts": [(self.page - 1) * self.per_page],
                    "counts": [self.per_page],
                    "current_page": True,
                    "page_number": self.page,
                },
            }

        return data

    def send(self) -> SearchResponse:
        """Post the compiled request and normalize the backend response.

        Raises:
            HttpError: If the backend answers with a non-success status.
            PaginationStateError: See ``compile_data``.
        """
        body = json.dumps(self.compile_data())
        log.debug("Mindbreeze request: url=%s page=%d bytes=%d", self.url, self.page, len(body))
        result = self.http.post(self.url, body=body, headers=dict(JSON_HEADERS))
        normalizer = ResponseNormalizer(
            token_store=self.token_store,
            session_id=self.session_id,
            clear_token_on_http_error=self.clear_token_on_http_error,
        )
        return normalizer.normalize(self.encoded_query, result)

    def _continuation_vars(self) -> Any:
        """Return stored ``qeng_ids`` for the current query."""
        token = self.token_store.get(self.session_id)
        if token is None:
            raise PaginationStateError("On page 2+ of search and continuation token is not set.")
        if token.query != self.encoded_query:
            raise PaginationStateError("On page 2+ of search and continuation token does not match queried term.")
        return token.vars
