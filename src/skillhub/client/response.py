"""Response helpers shared by the sync and async clients.

Both :class:`~skillhub.client.sync_client.SyncClient` and
:class:`~skillhub.client.async_client.AsyncClient` route every response
through :func:`raise_for_status`, so a 404 is a
:class:`~skillhub.exceptions.NotFoundError` regardless of which client made
the call, and every HTTP failure carries its status code.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from skillhub.exceptions import ClientError, HTTPError, NotFoundError, ServerError
from skillhub.output import get_output


def clean_params(params: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Drop query parameters whose value is ``None``.

    An empty string is kept: ``q=""`` and "no q" are different requests.
    """
    return {k: v for k, v in (params or {}).items() if v is not None}


def error_message(response: httpx.Response) -> str:
    """Extract the backend's error text, e.g. ``{"error": "Skill not found"}``."""
    try:
        detail = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text[:200].strip()
    if isinstance(detail, dict):
        return str(detail.get("error") or detail.get("message") or detail.get("detail") or "")
    return str(detail)


def raise_for_status(response: httpx.Response) -> None:
    """Raise a typed :class:`~skillhub.exceptions.HTTPError` for 4xx / 5xx responses."""
    status = response.status_code
    if status < 400:
        return

    msg = error_message(response)
    full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"
    try:
        url: Optional[str] = str(response.request.url)
    except RuntimeError:
        url = None

    exc_type: type[HTTPError]
    if status == 404:
        exc_type = NotFoundError
    elif status >= 500:
        exc_type = ServerError
    else:
        exc_type = ClientError
    raise exc_type(full_msg, status_code=status, url=url)


def dry_run_response(
    method: str,
    url: str,
    headers: dict[str, str],
    params: dict[str, Any],
) -> httpx.Response:
    """Print request details to stderr and return a synthetic 200 response."""
    output = get_output()
    output.info(f"[dry-run] {method} {url}")
    for key, value in headers.items():
        output.info(f"  Header: {key}: {value}")
    for key, value in params.items():
        output.info(f"  Param: {key}={value}")

    return httpx.Response(
        status_code=200,
        headers={"content-type": "application/json"},
        json={"dry_run": True, "message": "Request was not sent"},
        request=httpx.Request(method=method, url=url, params=params),
    )
