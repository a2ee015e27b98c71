"""
Todo orchestration: fan-out writes and a cache-aside read path.

No step is transactional across backends. A durable insert that succeeds is
never rolled back if a later step fails, so the three stores can diverge.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .cache import TitleCache
from .log import get_logger
from .models import SearchHit
from .search import SearchIndex
from .store import TodoStore

logger = get_logger("todo_api.service")


# PUBLIC_INTERFACE
class TodoService:
    """Sequences calls to the durable store, the title cache and the search index."""

    def __init__(self, store: TodoStore, cache: TitleCache, index: SearchIndex) -> None:
        self.store = store
        self.cache = cache
        self.index = index

    async def list_todos(self) -> List[Dict[str, str]]:
        """
        Return all todos as `{"title": ...}` objects.

        The cache is read first; an empty cache falls back to the durable
        store. Errors from either backend propagate.
        """
        cached = await self.cache.list_titles()
        if cached:
            todos = [{"title": t} for t in sorted(cached)]
            logger.info("Got todos from cache", count=len(todos))
            return todos

        todos = [{"title": t} for t in await self.store.list_titles()]
        logger.info("Got todos from database", count=len(todos))
        return todos

    async def create_todo(self, title: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write a todo to the store, then the cache, then the search index.

        A store failure (including DuplicateTodoError) aborts before the other
        writes. A cache failure is logged and re-raised even though the durable
        row is already committed. An indexing failure is only logged. The two
        failure policies differ on purpose and must stay that way.

        Returns the submitted body unchanged.
        """
        record = await self.store.insert_todo(title)
        logger.info("Added todo to database", title=title, id=record["id"])

        try:
            await self.cache.add_title(title)
        except Exception as e:
            logger.error("Error adding todo to cache", title=title, error=str(e))
            raise
        logger.info("Added todo to cache", title=title)

        if await self.index.index_document(title):
            logger.info("Added todo to search index", title=title)
        else:
            logger.warning("Todo missing from search index", title=title)

        return body

    async def search_todos(self, search_text: Optional[Any]) -> List[SearchHit]:
        """Return the raw hit list for `search_text`; [] when search is unavailable or the text is not a string."""
        if not isinstance(search_text, str):
            logger.warning("Search text is not a string", search_text=repr(search_text))
            return []
        hits = await self.index.search(search_text)
        logger.info("Search matched", search_text=search_text, count=len(hits))
        return hits
