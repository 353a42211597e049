"""Skills API operations on top of the HTTP clients.

The registry backend publishes two families of endpoints:

* the JSON API under the configured prefix (``/api/v1`` by default)::

      GET  {prefix}/skills?q=...       -> {"skills": [SkillSummary, ...]}
      GET  {prefix}/skills/{name}      -> SkillDetail   (404 if unknown)
      GET  {prefix}/download/{name}    -> zip archive of the skill directory

* Markdown representations at the origin root, meant for automated
  readers such as LLM agents::

      GET  /skill.md                   -> registry guide listing every skill
      GET  /skill/{name}.md            -> one skill as a single document

:class:`SkillsAPI` and :class:`AsyncSkillsAPI` expose the same operations
over :class:`~skillhub.client.SyncClient` and
:class:`~skillhub.client.AsyncClient`. Responses are decoded into
:class:`~skillhub.models.SkillSummary` / :class:`~skillhub.models.SkillDetail`
without reordering or dropping fields; failures propagate unchanged from the
client.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from skillhub.client import AsyncClient, SyncClient
from skillhub.exceptions import SkillhubError
from skillhub.models import DEFAULT_API_PREFIX, SkillDetail, SkillSummary


def encode_segment(value: str) -> str:
    """Percent-encode *value* for use as exactly one URL path segment.

    ``/`` is encoded too, so a name can never address a different
    endpoint. URL-safe names (``[A-Za-z0-9._~-]``) come back unchanged.
    """
    return quote(value, safe="")


def skill_path(prefix: str, *segments: str) -> str:
    """Join *prefix* and encoded *segments* into a request path."""
    base = prefix.rstrip("/")
    return base + "".join("/" + encode_segment(s) for s in segments)


def markdown_path(name: str) -> str:
    """Path of the Markdown representation of skill *name*."""
    return f"/skill/{encode_segment(name)}.md"


GUIDE_PATH = "/skill.md"


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise SkillhubError(
            f"Expected JSON from {response.request.url}, got "
            f"{response.headers.get('content-type', 'unknown content')}"
        ) from exc


def decode_skill_list(payload: Any) -> list[SkillSummary]:
    """Decode a skill listing.

    Accepts the ``{"skills": [...]}`` envelope the backend sends as well as
    a bare list. A ``null`` list (an empty registry) decodes to ``[]``.
    """
    if isinstance(payload, dict) and "skills" in payload:
        payload = payload["skills"]
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise SkillhubError(f"Unexpected skill listing payload: {type(payload).__name__}")
    try:
        return [SkillSummary.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise SkillhubError(f"Malformed skill listing: {exc}") from exc


def decode_skill_detail(payload: Any) -> SkillDetail:
    """Decode one skill's detail document."""
    try:
        return SkillDetail.model_validate(payload)
    except ValidationError as exc:
        raise SkillhubError(f"Malformed skill detail: {exc}") from exc


class SkillsAPI:
    """Blocking access to the registry backend.

    Args:
        client: An entered :class:`~skillhub.client.SyncClient`.
        api_prefix: Path prefix of the JSON API. Defaults to the client's
            configured prefix.

    Example::

        with SyncClient(config.client) as client:
            api = SkillsAPI(client)
            for skill in api.list_skills("pdf"):
                print(skill.name)
    """

    def __init__(self, client: SyncClient, api_prefix: Optional[str] = None) -> None:
        self._client = client
        self._prefix = api_prefix if api_prefix is not None else client.config.api_prefix

    @property
    def api_prefix(self) -> str:
        return self._prefix

    def list_skills(self, query: Optional[str] = None) -> list[SkillSummary]:
        """List skills, optionally filtered by *query*.

        ``q`` is sent iff *query* is not ``None``. The backend matches it
        case-insensitively against names and descriptions.
        """
        params = {"q": query} if query is not None else None
        response = self._client.get(skill_path(self._prefix, "skills"), params=params)
        if self._client.dry_run:
            return []
        return decode_skill_list(_json(response))

    def get_skill_detail(self, name: str) -> SkillDetail:
        """Fetch one skill's detail.

        Raises:
            NotFoundError: If the backend knows no skill called *name*.
        """
        response = self._client.get(skill_path(self._prefix, "skills", name))
        if self._client.dry_run:
            return SkillDetail(name=name)
        return decode_skill_detail(_json(response))

    def get_skill_markdown(self, name: str) -> str:
        """Fetch the Markdown representation of skill *name*."""
        response = self._client.get(markdown_path(name), headers={"Accept": "text/markdown, text/plain"})
        return "" if self._client.dry_run else response.text

    def get_guide_markdown(self) -> str:
        """Fetch the registry guide (installation notes plus every skill)."""
        response = self._client.get(GUIDE_PATH, headers={"Accept": "text/markdown, text/plain"})
        return "" if self._client.dry_run else response.text

    def download_skill(self, name: str) -> bytes:
        """Fetch skill *name* as a zip archive."""
        response = self._client.get(
            skill_path(self._prefix, "download", name), headers={"Accept": "application/zip"}
        )
        return b"" if self._client.dry_run else response.content

    def download_skill_to(self, name: str, dest_dir: Path) -> Path:
        """Download skill *name* and write it to ``dest_dir/{name}.zip``."""
        data = self.download_skill(name)
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / f"{Path(name).name}.zip"
        target.write_bytes(data)
        return target


class AsyncSkillsAPI:
    """Non-blocking counterpart of :class:`SkillsAPI` used by the navigator."""

    def __init__(self, client: AsyncClient, api_prefix: Optional[str] = None) -> None:
        self._client = client
        self._prefix = api_prefix if api_prefix is not None else client.config.api_prefix

    @property
    def api_prefix(self) -> str:
        return self._prefix

    async def list_skills(self, query: Optional[str] = None) -> list[SkillSummary]:
        params = {"q": query} if query is not None else None
        response = await self._client.get(skill_path(self._prefix, "skills"), params=params)
        if self._client.dry_run:
            return []
        return decode_skill_list(_json(response))

    async def get_skill_detail(self, name: str) -> SkillDetail:
        response = await self._client.get(skill_path(self._prefix, "skills", name))
        if self._client.dry_run:
            return SkillDetail(name=name)
        return decode_skill_detail(_json(response))

    async def get_skill_markdown(self, name: str) -> str:
        response = await self._client.get(
            markdown_path(name), headers={"Accept": "text/markdown, text/plain"}
        )
        return "" if self._client.dry_run else response.text

    async def get_guide_markdown(self) -> str:
        response = await self._client.get(GUIDE_PATH, headers={"Accept": "text/markdown, text/plain"})
        return "" if self._client.dry_run else response.text


__all__ = [
    "AsyncSkillsAPI",
    "DEFAULT_API_PREFIX",
    "GUIDE_PATH",
    "SkillsAPI",
    "decode_skill_detail",
    "decode_skill_list",
    "encode_segment",
    "markdown_path",
    "skill_path",
]
