"""Synchronous HTTP client for the registry backend.

This module provides :class:`SyncClient`, the blocking client used by the
CLI commands. It wraps :class:`httpx.Client` and layers on:

- **Explicit configuration** -- the backend origin and request settings
  come from a :class:`~skillhub.models.ClientConfig` handed to the
  constructor; there is no process-wide client instance.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.
- **Error mapping** -- transport failures become
  :class:`~skillhub.exceptions.ConnectionError_`, 4xx/5xx responses become
  :class:`~skillhub.exceptions.HTTPError` subclasses carrying the status.

Every call is a single attempt: there is no retry and no caching.

See Also:
    :class:`~skillhub.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from skillhub.client.response import clean_params, dry_run_response, raise_for_status
from skillhub.exceptions import ConnectionError_
from skillhub.models import ClientConfig
from skillhub.output import get_output


class SyncClient:
    """Synchronous HTTP client for backend calls.

    Must be used as a context manager so that the underlying connection
    pool is opened and closed.

    Args:
        config: Backend origin and request settings.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        transport: Optional :class:`httpx.BaseTransport` replacing the
            network (``httpx.MockTransport`` in tests).

    Example::

        with SyncClient(ClientConfig(base_url="http://localhost:8080")) as client:
            response = client.get("/api/v1/skills", params={"q": "pdf"})
    """

    def __init__(
        self,
        config: ClientConfig,
        dry_run: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def config(self) -> ClientConfig:
        """The configuration this client was built from."""
        return self._config

    @property
    def dry_run(self) -> bool:
        """Whether requests are printed instead of sent."""
        return self._dry_run

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        request = self._config.request
        self._client = httpx.Client(
            base_url=self._config.base_url,
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send one HTTP request and map failures to typed exceptions.

        Args:
            method: HTTP method.
            path: Path appended to the configured ``base_url``. It is sent
                as given; callers encode path segments themselves.
            params: Query parameters. ``None`` values are dropped.
            headers: Extra request headers.

        Returns:
            The :class:`httpx.Response` (always 2xx or 3xx).

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

        assert self._client is not None, "Client not initialised -- use as context manager"

        get_output().debug(f"{method} {url} params={merged_params}")
        try:
            response = self._client.request(
                method, path, headers=merged_headers, params=merged_params
            )
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Cannot reach {self._config.base_url}: {exc}") from exc

        raise_for_status(response)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request.

        Args:
            path: Path appended to the configured ``base_url``.
            **kwargs: Forwarded to :meth:`request`.
        """
        return self.request("GET", path, **kwargs)
