"""URL path to view resolution.

The web client has exactly two views, and this module is the single place
that knows their URLs::

    /               -> "home"          listing, no parameters
    /skill/:name    -> "skill-detail"  one skill, ``name`` from the path

Resolution is a pure function of the path: no guards, no redirects, no
asynchronous loading (that is the :class:`~skillhub.navigation.Navigator`'s
job). Query strings and fragments are ignored, a single trailing slash is
tolerated, and captured parameters are percent-decoded.

Unmatched paths are an error: :meth:`Router.resolve` raises
:class:`~skillhub.exceptions.RouteNotFoundError`, while :meth:`Router.match`
returns ``None`` for callers that want to probe.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

from skillhub.exceptions import InvalidUsageError, RouteNotFoundError

HOME = "home"
SKILL_DETAIL = "skill-detail"

_PARAM_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class Route:
    """A named URL pattern. ``:param`` segments capture one path segment each."""

    name: str
    pattern: str
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    param_names: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern.startswith("/"):
            raise ValueError(f"Route pattern must start with '/': {self.pattern!r}")

        parts: list[str] = []
        last = 0
        for m in _PARAM_RE.finditer(self.pattern):
            parts.append(re.escape(self.pattern[last:m.start()]))
            parts.append(f"(?P<{m.group(1)}>[^/]+)")
            last = m.end()
        parts.append(re.escape(self.pattern[last:]))
        body = "".join(parts).rstrip("/")

        object.__setattr__(self, "regex", re.compile(f"^{body}/?$"))
        object.__setattr__(
            self, "param_names", tuple(m.group(1) for m in _PARAM_RE.finditer(self.pattern))
        )

    def match(self, path: str) -> Optional[dict[str, str]]:
        """Return decoded params if *path* matches this route, else ``None``."""
        m = self.regex.match(path)
        if m is None:
            return None
        return {k: unquote(v) for k, v in m.groupdict().items()}

    def build(self, params: dict[str, str]) -> str:
        """Fill the pattern with *params*, encoding each value as one segment."""
        missing = [p for p in self.param_names if p not in params]
        if missing:
            raise InvalidUsageError(
                f"Route '{self.name}' needs parameter(s): {', '.join(missing)}"
            )

        def _sub(m: re.Match[str]) -> str:
            return quote(str(params[m.group(1)]), safe="")

        return _PARAM_RE.sub(_sub, self.pattern)


@dataclass(frozen=True)
class RouteMatch:
    """The outcome of resolving a path: which view, with which parameters."""

    route: Route
    params: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.route.name


DEFAULT_ROUTES: tuple[Route, ...] = (
    Route(HOME, "/"),
    Route(SKILL_DETAIL, "/skill/:name"),
)


class Router:
    """Ordered route table; the first matching route wins.

    Args:
        routes: Routes to register. Defaults to :data:`DEFAULT_ROUTES`.

    Example::

        router = Router()
        router.resolve("/skill/pdf").params   # {"name": "pdf"}
        router.url_for("skill-detail", name="pdf")   # "/skill/pdf"
    """

    def __init__(self, routes: Optional[tuple[Route, ...] | list[Route]] = None) -> None:
        self._routes: tuple[Route, ...] = tuple(routes if routes is not None else DEFAULT_ROUTES)
        names = [r.name for r in self._routes]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate route names in {names}")

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def match(self, url: str) -> Optional[RouteMatch]:
        """Resolve *url* (a path, optionally with query or fragment) or return ``None``."""
        path = urlsplit(url).path or "/"
        for route in self._routes:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    def resolve(self, url: str) -> RouteMatch:
        """Resolve *url* to a :class:`RouteMatch`.

        Raises:
            RouteNotFoundError: If no route matches.
        """
        result = self.match(url)
        if result is None:
            raise RouteNotFoundError(urlsplit(url).path or url)
        return result

    def url_for(self, name: str, /, **params: str) -> str:
        """Build the client URL of route *name*.

        Raises:
            InvalidUsageError: For an unknown route or a missing parameter.
        """
        for route in self._routes:
            if route.name == name:
                return route.build(params)
        raise InvalidUsageError(f"Unknown route: {name}")
