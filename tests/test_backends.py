import dataclasses
import json
import os

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

os.environ.setdefault("BACKEND_MODE", "memory")

import todo_api.main as main_module  # noqa: E402
from todo_api.backends import Backends, build_backends  # noqa: E402
from todo_api.cache import InMemoryTitleCache, RedisTitleCache  # noqa: E402
from todo_api.generate_openapi import generate_openapi  # noqa: E402
from todo_api.search import ElasticsearchTodoIndex, InMemoryTodoIndex  # noqa: E402
from todo_api.settings import get_settings  # noqa: E402
from todo_api.store import InMemoryTodoStore, PostgresTodoStore  # noqa: E402


def settings_for(mode: str):
    return dataclasses.replace(get_settings(), backend_mode=mode)


class TestBuildBackends:
    def test_memory_backends(self):
        backends = build_backends(settings_for("memory"))
        assert isinstance(backends.store, InMemoryTodoStore)
        assert isinstance(backends.cache, InMemoryTitleCache)
        assert isinstance(backends.index, InMemoryTodoIndex)

    @pytest.mark.asyncio
    async def test_live_backends(self):
        settings = dataclasses.replace(
            settings_for("live"),
            redis_reconnect_interval=2.5,
            elastic_host="search",
            elastic_port=9201,
        )
        backends = build_backends(settings)
        try:
            assert isinstance(backends.store, PostgresTodoStore)
            assert isinstance(backends.cache, RedisTitleCache)
            assert isinstance(backends.index, ElasticsearchTodoIndex)
            assert backends.cache.reconnect_interval == 2.5
            assert backends.index.url == "http://search:9201"
        finally:
            await backends.cache.client.aclose()
            await backends.index.client.close()

    @pytest.mark.asyncio
    async def test_memory_service_round_trip(self):
        backends = build_backends(settings_for("memory"))
        await backends.start()
        service = backends.service()

        await service.create_todo("buy milk", {"title": "buy milk"})

        assert await service.list_todos() == [{"title": "buy milk"}]
        hits = await service.search_todos("milk")
        assert hits[0]["_source"]["todotext"] == "buy milk"
        await backends.stop()

    @pytest.mark.asyncio
    async def test_failed_start_stops_started_backends(self):
        store, cache, index = AsyncMock(), AsyncMock(), AsyncMock()
        index.start.side_effect = RuntimeError("index mapping rejected")
        backends = Backends(store=store, cache=cache, index=index)

        with pytest.raises(RuntimeError):
            await backends.start()

        cache.stop.assert_awaited_once()
        store.stop.assert_awaited_once()
        index.stop.assert_not_awaited()


class TestLifespan:
    def test_startup_builds_shared_service(self, monkeypatch):
        monkeypatch.setattr(main_module, "_settings", settings_for("memory"))
        main_module.app.dependency_overrides.clear()

        with TestClient(main_module.app) as client:
            service = main_module.app.state.todo_service
            assert client.post("/api/v1/todos", json={"title": "buy milk"}).status_code == 201
            assert client.get("/api/v1/todos").json() == [{"title": "buy milk"}]
            assert main_module.app.state.todo_service is service


class TestGenerateOpenapi:
    def test_writes_schema(self, tmp_path):
        out = tmp_path / "interfaces" / "openapi.json"

        path = generate_openapi(str(out))

        assert path == str(out)
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert "/api/v1/todos" in schema["paths"]
        assert "/api/v1/search" in schema["paths"]
        assert [t["name"] for t in schema["tags"]][:3] == ["health", "todos", "search"]
