"""Canonical Pydantic models shared across all skillhub modules.

The models fall into two groups:

**Payload models** -- what the registry backend returns. Only ``name`` is
interpreted by this package; every other field is passed through to the
view layer as-is:
    :class:`SkillSummary` and :class:`SkillDetail`.

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig`, :class:`ClientConfig`, :class:`ProxyRule`,
    :class:`DevServerConfig`, :class:`BuildConfig`, :class:`OutputConfig`
    and :class:`GlobalConfig`.

All models use Pydantic v2. Payload models use ``extra="allow"`` so that
fields the backend adds later survive in ``model_extra``.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_BACKEND = "http://localhost:8080"
DEFAULT_API_PREFIX = "/api/v1"


# --- Payloads ---


class SkillSummary(BaseModel):
    """One catalog entry as listed by ``GET /api/v1/skills``.

    ``name`` is the routing and query key; it is unique within a registry.
    The remaining fields mirror the ``SKILL.md`` frontmatter the backend
    indexes and are optional because older backends omit them.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    author: Optional[str] = None
    version: Optional[str] = None
    path: Optional[str] = Field(
        default=None, description="Skill directory relative to the registry root"
    )
    updated_at: Optional[datetime] = None


class SkillDetail(SkillSummary):
    """Full skill as returned by ``GET /api/v1/skills/{name}``."""

    readme: str = Field(default="", description="Raw SKILL.md content")
    file_tree: str = Field(default="", description="Indented text tree of the skill directory")


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every call made by the API clients."""

    timeout: Optional[float] = Field(
        default=30.0, description="Request timeout in seconds (null disables)"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ClientConfig(BaseModel):
    """Where the registry backend lives.

    ``base_url`` is the backend origin. JSON calls go under ``api_prefix``;
    the Markdown representations live at the origin root.
    """

    base_url: str = Field(default=DEFAULT_BACKEND, description="Backend origin")
    api_prefix: str = Field(
        default=DEFAULT_API_PREFIX, description="Path prefix of the JSON API"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


class ProxyRule(BaseModel):
    """A development-time forwarding rule.

    A ``pattern`` starting with ``^`` is a regular expression searched in
    the request path; anything else is a plain path prefix.

    Example::

        ProxyRule(pattern="^/skill/[^/]+\\.md$", target="http://localhost:8080")
    """

    pattern: str
    target: str = DEFAULT_BACKEND
    change_origin: bool = Field(
        default=True, description="Rewrite the Host header to the target's host"
    )

    def matches(self, path: str) -> bool:
        """Return ``True`` if *path* (without query string) is forwarded by this rule."""
        if self.pattern.startswith("^"):
            return re.search(self.pattern, path) is not None
        return path.startswith(self.pattern)

    @property
    def target_host(self) -> str:
        """The ``host[:port]`` part of :attr:`target`."""
        return urlsplit(self.target).netloc


def _default_proxy_rules() -> list[ProxyRule]:
    return [
        ProxyRule(pattern=r"^/api(/|$)"),
        ProxyRule(pattern=r"^/skill\.md$"),
        ProxyRule(pattern=r"^/skill/[^/]+\.md$"),
    ]


class DevServerConfig(BaseModel):
    """Local development server settings."""

    host: str = "127.0.0.1"
    port: int = 5173
    proxy: list[ProxyRule] = Field(default_factory=_default_proxy_rules)


class BuildConfig(BaseModel):
    """Where ``skillhub build`` emits the static assets."""

    out_dir: str = Field(
        default="web_dist", description="Directory the backend embeds and serves"
    )
    empty_out_dir: bool = Field(
        default=True, description="Remove existing contents of out_dir first"
    )


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: Literal["auto", "json", "plain", "rich"] = "auto"


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/skillhub/config.json``.

    Loaded and saved by :func:`~skillhub.config.load_global_config` and
    :func:`~skillhub.config.save_global_config`. See
    :func:`~skillhub.config.resolve_config` for the precedence chain.
    """

    client: ClientConfig = Field(default_factory=ClientConfig)
    dev: DevServerConfig = Field(default_factory=DevServerConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
