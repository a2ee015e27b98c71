"""
Unit tests for TodoService.
"""

import pytest
from unittest.mock import AsyncMock

from todo_api.errors import CacheUnavailableError, DuplicateTodoError
from todo_api.service import TodoService


class TestTodoService:
    """Test cases for TodoService."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def store(self, calls):
        store = AsyncMock()
        store.insert_todo.side_effect = lambda title: calls.append("store") or {"id": 1, "title": title}
        store.list_titles.return_value = ["from store"]
        return store

    @pytest.fixture
    def cache(self, calls):
        cache = AsyncMock()
        cache.add_title.side_effect = lambda title: calls.append("cache")
        cache.list_titles.return_value = set()
        return cache

    @pytest.fixture
    def index(self, calls):
        index = AsyncMock()
        index.index_document.side_effect = lambda text: calls.append("index") or True
        index.search.return_value = []
        return index

    @pytest.fixture
    def service(self, store, cache, index):
        return TodoService(store, cache, index)

    @pytest.mark.asyncio
    async def test_create_writes_store_cache_index_in_order(self, service, calls, store, cache, index):
        body = {"title": "buy milk"}

        result = await service.create_todo("buy milk", body)

        assert result == body
        assert calls == ["store", "cache", "index"]
        store.insert_todo.assert_awaited_once_with("buy milk")
        cache.add_title.assert_awaited_once_with("buy milk")
        index.index_document.assert_awaited_once_with("buy milk")

    @pytest.mark.asyncio
    async def test_create_duplicate_stops_before_cache(self, service, store, cache, index):
        store.insert_todo.side_effect = DuplicateTodoError("buy milk")

        with pytest.raises(DuplicateTodoError):
            await service.create_todo("buy milk", {"title": "buy milk"})

        cache.add_title.assert_not_awaited()
        index.index_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_cache_failure_propagates(self, service, calls, cache, index):
        cache.add_title.side_effect = CacheUnavailableError()

        with pytest.raises(CacheUnavailableError):
            await service.create_todo("buy milk", {"title": "buy milk"})

        assert calls == ["store"]
        index.index_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_index_failure_is_not_fatal(self, service, index):
        index.index_document.side_effect = None
        index.index_document.return_value = False

        result = await service.create_todo("buy milk", {"title": "buy milk"})

        assert result == {"title": "buy milk"}

    @pytest.mark.asyncio
    async def test_list_returns_cache_members_when_cached(self, service, store, cache):
        cache.list_titles.return_value = {"b", "a"}

        todos = await service.list_todos()

        assert todos == [{"title": "a"}, {"title": "b"}]
        store.list_titles.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_falls_back_to_store(self, service, store):
        todos = await service.list_todos()

        assert todos == [{"title": "from store"}]
        store.list_titles.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_propagates_store_failure(self, service, store):
        store.list_titles.side_effect = OSError("connection refused")

        with pytest.raises(OSError):
            await service.list_todos()

    @pytest.mark.asyncio
    async def test_search_returns_hits_verbatim(self, service, index):
        hit = {"_index": "todos", "_id": "1", "_score": 0.28, "_source": {"todotext": "buy milk"}}
        index.search.return_value = [hit]

        assert await service.search_todos("milk") == [hit]
        index.search.assert_awaited_once_with("milk")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("search_text", [None, 5, ["milk"]])
    async def test_search_non_string_text_returns_empty(self, service, index, search_text):
        assert await service.search_todos(search_text) == []
        index.search.assert_not_awaited()
