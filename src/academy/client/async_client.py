"""Asynchronous HTTP client with retry, error mapping, and dry-run.

This module provides :class:`AsyncClient`, the transport used by
:class:`~academy.api.ApiService`. It wraps :class:`httpx.AsyncClient` and
layers on:

- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...). Retries belong here and never in
  the response cache.
- **Error mapping** -- non-2xx responses raise typed
  :class:`~academy.exceptions.AcademyError` subclasses carrying the
  server's ``message``.
- **Slow-call warnings** -- calls slower than
  :attr:`~academy.models.RequestConfig.slow_call_seconds` are reported on
  stderr.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Optional

import httpx

from academy.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    ServerError,
    ValidationError,
)
from academy.models import ApiSettings
from academy.output import get_output


class AsyncClient:
    """Asynchronous HTTP client for the institute's API.

    Must be used as an async context manager so that the underlying
    transport is opened and closed properly.

    Args:
        settings: Base URL and request settings (timeout, retries, SSL
            verification, slow-call threshold).
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        transport: Optional custom :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with AsyncClient(ApiSettings(base_url="http://localhost:5000")) as client:
            response = await client.get("/api/courses")
    """

    def __init__(
        self,
        settings: ApiSettings,
        dry_run: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        config = self._settings.request
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> httpx.Response:
        """Make an HTTP request with retry and error mapping.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: URL path appended to the configured ``base_url``.
            params: Query parameters. ``None`` values are dropped.
            json_body: JSON-serialisable request body.

        Returns:
            The :class:`httpx.Response` from the server (always 2xx/3xx).

        Raises:
            ValidationError: On 400 / 422.
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On 5xx after all retries, or any other 4xx.
            ConnectionError_: On network / timeout errors after all retries.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        url = f"{self._settings.base_url}{path}"

        if self._dry_run:
            return self._print_dry_run(method, url, query, json_body)

        started = time.monotonic()
        response = await self._execute_with_retry(method, path, query, json_body)
        elapsed = time.monotonic() - started

        output = get_output()
        output.debug(f"{method} {path} -> {response.status_code} ({elapsed * 1000:.0f}ms)")
        if elapsed > self._settings.request.slow_call_seconds:
            output.warning(f"Slow API call: {path} took {elapsed * 1000:.0f}ms")

        self._map_response_error(response)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any],
        json_body: Any,
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times using :func:`asyncio.sleep` between attempts.
        The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        max_retries = self._settings.request.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {"method": method, "url": path, "params": params}
                if json_body is not None:
                    kwargs["json"] = json_body

                response = await self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Server error {response.status_code}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection to {self._settings.base_url} failed after "
                    f"{max_retries + 1} attempts: {exc}"
                ) from exc

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        errors: Any = None
        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
                errors = detail.get("errors")
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (400, 422):
            raise ValidationError(full_msg, errors=errors)
        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        # 5xx and any other 4xx
        raise ServerError(full_msg)

    def _print_dry_run(
        self,
        method: str,
        url: str,
        params: dict[str, Any],
        json_body: Any,
    ) -> httpx.Response:
        """Print request details to stderr and return a synthetic 200 response."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")
        for key, value in params.items():
            output.info(f"  Param: {key}={value}")
        if json_body is not None:
            output.info(f"  Body (JSON): {json.dumps(json_body, indent=2, default=str)}")

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=httpx.Request(method=method, url=url),
        )
