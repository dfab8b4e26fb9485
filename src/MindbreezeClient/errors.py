"""Error types raised by MindbreezeClient."""

from __future__ import annotations


class MindbreezeError(Exception):
    """Base class for all client errors."""


class InvalidArgumentError(MindbreezeError, ValueError):
    """Raised when a caller passes an invalid constraint, order or value."""


class HttpError(MindbreezeError):
    """Raised when the search backend answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the backend.
    """

    def __init__(self, status_code: int, message: str = "HTTP error") -> None:
        super().__init__(f"{message}: status={status_code}")
        self.status_code = status_code


class PaginationStateError(MindbreezeError):
    """Raised when page 2+ is requested without a matching continuation token."""
