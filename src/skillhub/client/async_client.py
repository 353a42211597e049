"""Asynchronous HTTP client -- mirrors :class:`~skillhub.client.sync_client.SyncClient` API.

This module provides :class:`AsyncClient`, the non-blocking counterpart to
:class:`~skillhub.client.sync_client.SyncClient`. It wraps
:class:`httpx.AsyncClient` and offers the same feature set -- explicit
configuration, dry-run mode and error mapping -- for use inside an event
loop, where the :class:`~skillhub.navigation.Navigator` runs.

A request awaiting its response is an ordinary coroutine: cancelling the
task that awaits it (``task.cancel()``) aborts the request and raises
:class:`asyncio.CancelledError` into the caller.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from skillhub.client.response import clean_params, dry_run_response, raise_for_status
from skillhub.exceptions import ConnectionError_
from skillhub.models import ClientConfig
from skillhub.output import get_output


class AsyncClient:
    """Asynchronous HTTP client for backend calls.

    Must be used as an async context manager.

    Args:
        config: Backend origin and request settings.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        transport: Optional :class:`httpx.AsyncBaseTransport` replacing the
            network (``httpx.MockTransport`` in tests).

    Example::

        async with AsyncClient(config) as client:
            response = await client.get("/api/v1/skills/pdf")
    """

    def __init__(
        self,
        config: ClientConfig,
        dry_run: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        """The configuration this client was built from."""
        return self._config

    @property
    def dry_run(self) -> bool:
        """Whether requests are printed instead of sent."""
        return self._dry_run

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        request = self._config.request
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
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
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send one HTTP request without blocking the event loop.

        Behaves identically to
        :meth:`~skillhub.client.sync_client.SyncClient.request`.

        Raises:
            NotFoundError: On 404.
            ClientError: On any other 4xx.
            ServerError: On 5xx.
            ConnectionError_: On network / timeout errors.
        """
        merged_headers: dict[str, str] = {"Accept": "application/json"}
        merged_headers.update(headers or {})
        merged_params = clean_params(params)
        url = f"{self._config.base_url.rstrip('/')}{path}"

        if self._dry_run:
            return dry_run_response(method, url, merged_headers, merged_params)

        assert self._client is not None, "Client not initialised -- use as async context manager"

        get_output().debug(f"{method} {url} params={merged_params}")
        try:
            response = await self._client.request(
                method, path, headers=merged_headers, params=merged_params
            )
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Cannot reach {self._config.base_url}: {exc}") from exc

        raise_for_status(response)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send an async GET request.

        Args:
            path: Path appended to the configured ``base_url``.
            **kwargs: Forwarded to :meth:`request`.
        """
        return await self.request("GET", path, **kwargs)
