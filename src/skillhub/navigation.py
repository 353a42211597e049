"""Async navigator -- turns a client URL into a loaded view.

A navigation resolves the URL through the :class:`~skillhub.router.Router`
and then loads the data the matched view needs:

* ``home`` -> :meth:`~skillhub.api.AsyncSkillsAPI.list_skills`
* ``skill-detail`` -> :meth:`~skillhub.api.AsyncSkillsAPI.get_skill_detail`

Only one load is in flight per navigator. Starting a new navigation
cancels the previous one's request; the superseded caller receives
:class:`~skillhub.exceptions.NavigationCancelled` instead of a stale
page. Cancelling the awaiting task itself propagates
:class:`asyncio.CancelledError` as usual.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from skillhub.api import AsyncSkillsAPI
from skillhub.exceptions import NavigationCancelled
from skillhub.router import HOME, SKILL_DETAIL, RouteMatch, Router

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """A resolved and loaded view.

    ``data`` is a ``list[SkillSummary]`` for ``home`` and a
    :class:`~skillhub.models.SkillDetail` for ``skill-detail``.
    """

    route_name: str
    params: dict[str, str] = field(default_factory=dict)
    data: Any = None


class Navigator:
    """Resolve client URLs and load their views.

    Args:
        api: Async Skills API used to load view data.
        router: Route table. Defaults to :class:`~skillhub.router.Router`.
    """

    def __init__(self, api: AsyncSkillsAPI, router: Optional[Router] = None) -> None:
        self._api = api
        self._router = router or Router()
        self._inflight: Optional[asyncio.Task[Any]] = None

    @property
    def router(self) -> Router:
        return self._router

    @property
    def busy(self) -> bool:
        """Whether a navigation is currently loading."""
        return self._inflight is not None and not self._inflight.done()

    async def navigate(self, url: str, query: Optional[str] = None) -> Page:
        """Resolve *url* and load its view.

        Args:
            url: Client URL, e.g. ``/`` or ``/skill/pdf``.
            query: Search text for the listing view. Ignored by the detail view.

        Returns:
            The loaded :class:`Page`.

        Raises:
            RouteNotFoundError: If *url* matches no route (nothing is cancelled).
            NavigationCancelled: If a newer navigation superseded this one.
            SkillhubError: Whatever the API call raised.
        """
        match = self._router.resolve(url)
        self.cancel()

        task = asyncio.ensure_future(self._load(match, query))
        self._inflight = task
        logger.debug("navigate %s -> %s %s", url, match.name, match.params)
        try:
            data = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise NavigationCancelled(f"Navigation to {url} was superseded") from None
        finally:
            if self._inflight is task:
                self._inflight = None

        return Page(route_name=match.name, params=dict(match.params), data=data)

    def cancel(self) -> bool:
        """Cancel the in-flight load, if any. Returns ``True`` if one was cancelled."""
        task = self._inflight
        self._inflight = None
        if task is None or task.done():
            return False
        logger.debug("cancelling in-flight navigation")
        task.cancel()
        return True

    async def _load(self, match: RouteMatch, query: Optional[str]) -> Any:
        if match.name == HOME:
            return await self._api.list_skills(query)
        if match.name == SKILL_DETAIL:
            return await self._api.get_skill_detail(match.params["name"])
        # Custom routes registered on the router have no loader.
        return None
