"""Tests for the async navigator."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from skillhub.api import AsyncSkillsAPI
from skillhub.client import AsyncClient
from skillhub.exceptions import NavigationCancelled, NotFoundError, RouteNotFoundError
from skillhub.models import SkillDetail
from skillhub.navigation import Navigator
from skillhub.router import HOME, SKILL_DETAIL, Route, Router


def _backend(skill_list_payload, skill_detail_payload):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/skills":
            return httpx.Response(200, json=skill_list_payload)
        if request.url.path == "/api/v1/skills/pdf":
            return httpx.Response(200, json=skill_detail_payload)
        return httpx.Response(404, json={"error": "Skill not found"})

    return handler


class TestNavigate:
    @pytest.mark.asyncio
    async def test_home_loads_listing(
        self, client_config, recording_transport, skill_list_payload, skill_detail_payload
    ) -> None:
        transport = recording_transport(_backend(skill_list_payload, skill_detail_payload))
        async with AsyncClient(client_config, transport=transport) as client:
            page = await Navigator(AsyncSkillsAPI(client)).navigate("/", query="python")

        assert page.route_name == HOME
        assert page.params == {}
        assert [s.name for s in page.data] == ["python", "python-asyncio"]
        assert transport.requests[0].url.params["q"] == "python"

    @pytest.mark.asyncio
    async def test_detail_loads_skill(
        self, client_config, skill_list_payload, skill_detail_payload
    ) -> None:
        transport = httpx.MockTransport(_backend(skill_list_payload, skill_detail_payload))
        async with AsyncClient(client_config, transport=transport) as client:
            page = await Navigator(AsyncSkillsAPI(client)).navigate("/skill/pdf")

        assert page.route_name == SKILL_DETAIL
        assert page.params == {"name": "pdf"}
        assert isinstance(page.data, SkillDetail)
        assert page.data.name == "pdf"

    @pytest.mark.asyncio
    async def test_detail_ignores_query(
        self, client_config, recording_transport, skill_list_payload, skill_detail_payload
    ) -> None:
        transport = recording_transport(_backend(skill_list_payload, skill_detail_payload))
        async with AsyncClient(client_config, transport=transport) as client:
            await Navigator(AsyncSkillsAPI(client)).navigate("/skill/pdf", query="ignored")

        assert "q" not in transport.requests[0].url.params

    @pytest.mark.asyncio
    async def test_unknown_skill(self, client_config, skill_list_payload, skill_detail_payload) -> None:
        transport = httpx.MockTransport(_backend(skill_list_payload, skill_detail_payload))
        async with AsyncClient(client_config, transport=transport) as client:
            navigator = Navigator(AsyncSkillsAPI(client))
            with pytest.raises(NotFoundError):
                await navigator.navigate("/skill/ghost")
            assert not navigator.busy

    @pytest.mark.asyncio
    async def test_unknown_route_sends_nothing(self, client_config, recording_transport) -> None:
        transport = recording_transport(lambda r: httpx.Response(200, json=[]))
        async with AsyncClient(client_config, transport=transport) as client:
            with pytest.raises(RouteNotFoundError):
                await Navigator(AsyncSkillsAPI(client)).navigate("/settings")

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_custom_route_without_loader(self, client_config, recording_transport) -> None:
        transport = recording_transport(lambda r: httpx.Response(200, json=[]))
        router = Router([Route("about", "/about")])
        async with AsyncClient(client_config, transport=transport) as client:
            page = await Navigator(AsyncSkillsAPI(client), router=router).navigate("/about")

        assert page.route_name == "about"
        assert page.data is None
        assert transport.requests == []


class TestCancellation:
    @pytest.mark.asyncio
    async def test_newer_navigation_supersedes(
        self, client_config, skill_list_payload, skill_detail_payload
    ) -> None:
        slow_started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/v1/skills":
                slow_started.set()
                await asyncio.sleep(10)
                return httpx.Response(200, json=skill_list_payload)
            return httpx.Response(200, json=skill_detail_payload)

        async with AsyncClient(client_config, transport=httpx.MockTransport(handler)) as client:
            navigator = Navigator(AsyncSkillsAPI(client))
            first = asyncio.create_task(navigator.navigate("/"))
            await slow_started.wait()
            assert navigator.busy

            page = await navigator.navigate("/skill/pdf")

            with pytest.raises(NavigationCancelled):
                await first

        assert page.route_name == SKILL_DETAIL
        assert not navigator.busy

    @pytest.mark.asyncio
    async def test_explicit_cancel(self, client_config) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json=[])

        async with AsyncClient(client_config, transport=httpx.MockTransport(handler)) as client:
            navigator = Navigator(AsyncSkillsAPI(client))
            pending = asyncio.create_task(navigator.navigate("/"))
            await started.wait()

            assert navigator.cancel() is True
            with pytest.raises(NavigationCancelled):
                await pending
            assert navigator.cancel() is False

    @pytest.mark.asyncio
    async def test_cancelling_caller_propagates(self, client_config) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json=[])

        async with AsyncClient(client_config, transport=httpx.MockTransport(handler)) as client:
            navigator = Navigator(AsyncSkillsAPI(client))
            caller = asyncio.create_task(navigator.navigate("/"))
            await started.wait()
            caller.cancel()

            with pytest.raises(asyncio.CancelledError):
                await caller
            assert not navigator.busy

    def test_cancel_when_idle(self) -> None:
        navigator = Navigator(api=None)  # type: ignore[arg-type]
        assert navigator.cancel() is False
        assert not navigator.busy
