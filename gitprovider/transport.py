"""
HTTP Transport for gitprovider.

Handles HTTP communication with automatic retry logic, authentication,
pagination and error normalization. This is the single place where vendor
HTTP errors are turned into typed exceptions.
"""

import random
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Any

import httpx

from gitprovider.exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    GitProviderError,
    HTTPError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitedError,
)
from gitprovider.logging import log_http_request, log_http_response

# Message fragments GitLab uses when a resource already exists
_ALREADY_EXISTS_MESSAGES = ("has already been taken", "already shared with this group")

DEFAULT_PER_PAGE = 100

# A hook receives the transport below it in the chain and returns the one to use above it.
TransportHook = Callable[[httpx.BaseTransport | None], httpx.BaseTransport | None]


@dataclass
class RetryConfig:
    """
    Retry policy for GitLab requests.

    Connection errors and the statuses in retry_on are retried up to
    max_retries times. Waits grow as backoff_factor ** attempt, spread by
    +/- jitter (a fraction of the wait) and capped at max_backoff seconds. When
    respect_retry_after is set, a numeric Retry-After header wins.
    """

    max_retries: int = 3
    backoff_factor: float = 2.0
    # GitLab answers 502/504 while a Puma worker restarts
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 60.0
    jitter: float = 0.1


class PrivateTokenAuth(httpx.Auth):
    """Authenticates with a GitLab personal, project or group access token."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["PRIVATE-TOKEN"] = self._token
        yield request


class BearerTokenAuth(httpx.Auth):
    """Authenticates with an OAuth2 access token."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


def build_transport_chain(
    pre_chain_hook: TransportHook | None = None,
    post_chain_hook: TransportHook | None = None,
) -> httpx.BaseTransport:
    """
    Build the transport chain used by the HTTP client.

    The chain looks like::

        GitLab API <-> post-chain hook <-> authentication <-> pre-chain hook <-> httpx.Client

    The post-chain hook is called with None and must return the innermost
    transport; without it the default httpx transport is used. The pre-chain
    hook wraps whatever is below it.

    Raises:
        ConfigurationError: If a hook returns None
    """
    if post_chain_hook is not None:
        transport = post_chain_hook(None)
        if transport is None:
            raise ConfigurationError("the return value of the post-chain transport hook must not be None")
    else:
        transport = httpx.HTTPTransport()

    if pre_chain_hook is not None:
        wrapped = pre_chain_hook(transport)
        if wrapped is None:
            raise ConfigurationError("the return value of the pre-chain transport hook must not be None")
        transport = wrapped

    return transport


class HTTPTransport:
    """
    HTTP transport layer with retry logic and error normalization.

    Handles:
    - Authentication through an httpx.Auth
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - GitLab pagination through the X-Next-Page header
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        auth: httpx.Auth | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        pre_chain_hook: TransportHook | None = None,
        post_chain_hook: TransportHook | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://gitlab.com/api/v4")
            auth: Authentication applied to every request
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            pre_chain_hook: Wraps the transport chain (caching, logging, instrumentation)
            post_chain_hook: Provides the innermost transport
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            auth=auth,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=build_transport_chain(pre_chain_hook, post_chain_hook),
        )

    @property
    def client(self) -> httpx.Client:
        """The underlying httpx.Client."""
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path relative to the base URL (e.g., "/projects/42")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            GitProviderError: On API errors
        """
        response = self._execute_with_retry(method, path, params, body)
        return self._decode(response)

    def request_page(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[list[Any], int | None]:
        """
        Fetch a single page of a list endpoint.

        Returns:
            Tuple of (items, next page number or None if this was the last page)
        """
        response = self._execute_with_retry("GET", path, params, None)
        items = self._decode(response) or []
        next_page = response.headers.get("X-Next-Page", "").strip()
        return items, int(next_page) if next_page else None

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[Any]:
        """
        Fetch every page of a list endpoint, in vendor order.

        Pages are requested one after the other; an error on any page aborts
        the whole listing.
        """
        page_params = dict(params or {})
        page_params["per_page"] = per_page
        page: int | None = 1
        items: list[Any] = []
        while page is not None:
            page_params["page"] = page
            page_items, page = self.request_page(path, page_params)
            items.extend(page_items)
        return items

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        return response.json()

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        body: dict[str, Any] | None,
    ) -> httpx.Response:
        """
        Send a request, retrying per retry_config.

        The last failure is raised once the retries are used up: the typed
        error for an HTTP status, HTTPError("CONNECTION_ERROR") for a network
        failure.
        """
        attempt = 0
        while True:
            log_http_request(method, f"{self.base_url}{path}", body=body)
            started = time.monotonic()
            try:
                response = self._client.request(method, path, params=params, json=body)
            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise HTTPError("CONNECTION_ERROR", str(e)) from e
                time.sleep(self._get_backoff_time(attempt, None))
                attempt += 1
                continue

            log_http_response(
                method,
                str(response.request.url),
                response.status_code,
                (time.monotonic() - started) * 1000,
            )
            if response.status_code < 400:
                return response

            error = self._parse_error_response(response)
            if not self._should_retry(response.status_code, attempt):
                raise error
            time.sleep(self._get_backoff_time(attempt, response.headers.get("Retry-After")))
            attempt += 1

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """Whether attempt (0-indexed) failing with status_code gets another try."""
        return attempt < self.retry_config.max_retries and status_code in self.retry_config.retry_on

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Seconds to wait before retrying after attempt (0-indexed).

        A numeric Retry-After header is used as is; otherwise the wait is
        backoff_factor ** attempt with jitter, capped at max_backoff.
        """
        config = self.retry_config
        if retry_after and config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        wait = config.backoff_factor**attempt
        wait += random.uniform(-1.0, 1.0) * wait * config.jitter
        return min(wait, config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> GitProviderError:
        """Map a GitLab error response onto the exception hierarchy."""
        status_code = response.status_code
        try:
            message = _error_message(response.json())
        except ValueError:
            message = ""
        message = message or f"HTTP {status_code}"

        if status_code in (401, 403):
            return InvalidCredentialsError("INVALID_CREDENTIALS", message, status_code)
        if status_code == 404:
            return NotFoundError(message, status_code)
        if status_code == 429:
            retry_after = response.headers.get("Retry-After", "")
            return RateLimitedError(
                "RATE_LIMITED", message, int(retry_after) if retry_after.isdigit() else 60, status_code
            )
        if any(fragment in message for fragment in _ALREADY_EXISTS_MESSAGES):
            return AlreadyExistsError(message, status_code)
        return HTTPError(f"HTTP_{status_code}", message, status_code)


def _error_message(data: Any) -> str:
    """
    Flatten a GitLab error body into a single line.

    GitLab returns either {"message": "..."}, {"message": {"field": ["..."]}}
    or {"error": "..."}.
    """
    if not isinstance(data, dict):
        return ""
    message = data.get("message", data.get("error", ""))
    if isinstance(message, dict):
        parts = []
        for key, value in message.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            parts.append(f"{key}: [{value}]")
        return "; ".join(parts)
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    return str(message)
