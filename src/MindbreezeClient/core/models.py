from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True, slots=True)
class PaginationToken:
    """Continuation state issued by the backend for one query.

    Attributes:
        query: Encoded query the token was issued for.
        vars: Opaque ``qeng_ids`` value echoed back on page 2+ requests.
    """

    query: str
    vars: Any

    def to_dict(self) -> dict[str, Any]:
        return {"query": self.query, "vars": self.vars}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> PaginationToken:
        return cls(query=str(raw.get("query", "")), vars=raw.get("vars"))


@dataclass(frozen=True, slots=True)
class HttpResult:
    """Status/body pair returned by an HTTP collaborator.

    Attributes:
        status_code: HTTP status code.
        body: JSON-decoded response body (or raw text when not decoded yet).
    """

    status_code: int
    body: Any = None


@dataclass(frozen=True, slots=True)
class Record:
    """One normalized search result.

    Attributes:
        data: Flattened properties, lower-cased property id to first value.
        fields: Remaining housekeeping fields of the raw result, without
            the raw ``properties`` list.
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.fields)
        out["data"] = dict(self.data)
        return out


@dataclass(frozen=True, slots=True)
class Pagination:
    """Pagination summary of a response.

    Attributes:
        prev: Whether a previous page is available (None when unknown).
        next: Whether a next page is available (None when unknown).
        total: Estimated total number of matches.
    """

    prev: Optional[bool] = None
    next: Optional[bool] = None
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"prev": self.prev, "next": self.next, "total": self.total}


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """Normalized search response.

    Attributes:
        records: Normalized records in backend order.
        pagination: Pagination summary.
        suggestion: Spelling suggestion without markup, if any.
    """

    records: Sequence[Record] = ()
    pagination: Pagination = Pagination()
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "pagination": self.pagination.to_dict(),
            "suggestion": self.suggestion,
        }
