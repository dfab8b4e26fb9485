"""Mindbreeze HTTP client.

POSTs request documents to the search endpoint and returns the status code
with the JSON-decoded body. Optional retry with backoff for transient
statuses; a single attempt by default.
"""

from __future__ import annotations

import random
import time
from typing import Any, Mapping, Protocol

import requests

from MindbreezeClient.core.models import HttpResult
from MindbreezeClient.utils.log import log

DEFAULT_TIMEOUT = 30.0
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}

DEFAULT_USER_AGENT = "mindbreeze-client/0.1"


class HttpClient(Protocol):
    """HTTP collaborator used by ``QueryBuilder.send``."""

    def post(self, url: str, *, body: str, headers: Mapping[str, str]) -> HttpResult:
        """POST ``body`` to ``url`` and return the status with the decoded body."""
        raise NotImplementedError


class MindbreezeHttpClient:
    """Low-level HTTP client for the Mindbreeze JSON search API."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = 1,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            timeout: Request timeout in seconds.
            max_attempts: Attempts per request; values above 1 retry
                timeouts, connection errors and retryable statuses.
            user_agent: ``User-Agent`` header sent with every request.
        """
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> MindbreezeHttpClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def post(self, url: str, *, body: str, headers: Mapping[str, str]) -> HttpResult:
        """POST a request document.

        Args:
            url: Search endpoint.
            body: Serialized JSON request document.
            headers: Extra request headers.

        Returns:
            Status code and JSON-decoded body (None when not JSON).

        Raises:
            requests.RequestException: Transport failure after all attempts.
        """
        response = self._post_with_retry(url, body=body, headers=headers)
        log.debug("Mindbreeze response: status=%s bytes=%s", response.status_code, len(response.content))
        return HttpResult(status_code=response.status_code, body=_json_or_none(response))

    def _post_with_retry(self, url: str, *, body: str, headers: Mapping[str, str]) -> requests.Response:
        """Issue POST with retries for transient failures."""
        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self._session.post(url, data=body.encode("utf-8"), headers=dict(headers), timeout=self.timeout)
                if response.status_code in RETRYABLE_STATUS and attempt < self.max_attempts:
                    raise requests.HTTPError(f"HTTP {response.status_code}", response=response)
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as error:
                last_error = error
                if attempt >= self.max_attempts:
                    raise
                delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
                log.debug(
                    "Mindbreeze retry attempt=%d/%d delay=%.2fs error=%s",
                    attempt,
                    self.max_attempts,
                    delay,
                    error,
                )
                time.sleep(delay)

        assert last_error is not None
        raise last_error


def _json_or_none(response: requests.Response) -> Any:
    """Decode the response body as JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        log.debug("Mindbreeze response is not JSON: status=%s", response.status_code)
        return None
