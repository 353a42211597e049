"""HTTP client module for skillhub.

Provides synchronous and asynchronous HTTP clients that wrap :mod:`httpx`
with explicit configuration, dry-run mode, and typed error mapping.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.

Both clients are context managers and take the same parameters: a
:class:`~skillhub.models.ClientConfig`, a ``dry_run`` flag, and an
optional ``transport`` for substituting the network.

Example::

    from skillhub.client import SyncClient

    with SyncClient(config.client) as client:
        resp = client.get("/api/v1/skills")
"""

from skillhub.client.async_client import AsyncClient
from skillhub.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient"]
