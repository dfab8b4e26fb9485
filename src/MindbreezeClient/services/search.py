"""Search service wiring configuration, request builder and transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from MindbreezeClient.core.models import SearchResponse
from MindbreezeClient.core.request import QueryBuilder
from MindbreezeClient.utils.log import log

if TYPE_CHECKING:
    from MindbreezeClient.config import SearchConfig
    from MindbreezeClient.storage.tokens import PaginationTokenStore
    from MindbreezeClient.transport.client import HttpClient


@dataclass(frozen=True, slots=True)
class ConstraintSpec:
    """One ad-hoc constraint requested by a caller.

    Attributes:
        label: Metadata label (e.g. ``mes:author``).
        kind: ``between_dates``, ``regex`` or ``term``.
        data: Kind-specific values.
    """

    label: str
    kind: str
    data: Any


@dataclass(frozen=True, slots=True)
class SearchParams:
    """Parameters of one search call.

    Attributes:
        query: Free-text query.
        page: 1-based page number.
        order_by: Order field; config default when None.
        order: Order direction; config default when None.
        datasource: Named datasource constraint, if any.
        date_range: Inclusive ``(start, end)`` Unix timestamps, if any.
        constraints: Additional constraints.
    """

    query: str
    page: int = 1
    order_by: str | None = None
    order: str | None = None
    datasource: str | None = None
    date_range: tuple[float, float] | None = None
    constraints: Sequence[ConstraintSpec] = field(default_factory=tuple)


@dataclass(slots=True)
class SearchService:
    """Application service running searches against one endpoint."""

    config: SearchConfig
    http: HttpClient
    token_store: PaginationTokenStore
    session_id: str = "default"
    clear_token_on_http_error: bool = False

    def build(self, params: SearchParams) -> QueryBuilder:
        """Return a builder preloaded with config defaults and ``params``."""
        builder = (
            QueryBuilder(
                self.http,
                self.token_store,
                url=self.config.url,
                session_id=self.session_id,
                datasources=self.config.datasources,
                clear_token_on_http_error=self.clear_token_on_http_error,
            )
            .set_query(params.query)
            .set_page(params.page)
            .set_per_page(self.config.per_page)
            .set_page_count(self.config.page_count)
            .set_alternatives(self.config.alternatives)
            .set_content_sample_length(self.config.content_sample_length)
            .set_properties(self.config.properties)
            .set_facets(self.config.facets)
            .set_order(params.order_by or self.config.order_by, params.order or self.config.order)
        )

        if params.datasource:
            builder.add_datasource_constraint(params.datasource)
        if params.date_range is not None:
            builder.add_date_constraint(*params.date_range)
        for spec in params.constraints:
            builder.add_constraint(spec.label, spec.kind, spec.data)
        return builder

    def search(self, params: SearchParams) -> SearchResponse:
        """Run one search and return the normalized response.

        Raises:
            InvalidArgumentError: If ordering or constraints are invalid.
            PaginationStateError: If ``params.page > 1`` without a matching token.
            HttpError: If the backend answers with a non-success status.
        """
        log.info("Search query=%r page=%d", params.query, params.page)
        response = self.build(params).send()
        log.info(
            "Fetched %d records (total=%s next=%s)",
            len(response.records),
            response.pagination.total,
            response.pagination.next,
        )
        if response.suggestion:
            log.info("Did you mean: %s", response.suggestion)
        return response

    def close(self) -> None:
        """Release the HTTP collaborator when it holds resources."""
        close_func = getattr(self.http, "close", None)
        if callable(close_func):
            close_func()
