from __future__ import annotations

from dataclasses import dataclass

from .cache import InMemoryTitleCache, RedisTitleCache, TitleCache
from .log import get_logger
from .search import ElasticsearchTodoIndex, InMemoryTodoIndex, SearchIndex
from .service import TodoService
from .settings import Settings
from .store import InMemoryTodoStore, PostgresTodoStore, TodoStore

logger = get_logger("todo_api.backends")


@dataclass
class Backends:
    """
    The three backend clients owned by one process.

    Started once at application startup and stopped at shutdown; every request
    shares the same instances.
    """

    store: TodoStore
    cache: TitleCache
    index: SearchIndex

    async def start(self) -> None:
        """Start store, cache and index in order; on failure stop the ones already started."""
        started = []
        try:
            for backend in (self.store, self.cache, self.index):
                await backend.start()
                started.append(backend)
        except BaseException:
            logger.error("Backend startup failed", started=[type(b).__name__ for b in started])
            for backend in reversed(started):
                await backend.stop()
            raise
        logger.info("Backends started")

    async def stop(self) -> None:
        await self.index.stop()
        await self.cache.stop()
        await self.store.stop()
        logger.info("Backends stopped")

    def service(self) -> TodoService:
        return TodoService(self.store, self.cache, self.index)


# PUBLIC_INTERFACE
def build_backends(settings: Settings) -> Backends:
    """
    Factory to return the configured backends based on settings.
    - memory: in-process store, cache and index
    - live: Postgres, Redis and Elasticsearch clients
    """
    if settings.backend_mode == "memory":
        return Backends(
            store=InMemoryTodoStore(),
            cache=InMemoryTitleCache(),
            index=InMemoryTodoIndex(),
        )
    return Backends(
        store=PostgresTodoStore(
            host=settings.postgres_host,
            port=settings.postgres_port,
            database=settings.postgres_database,
            user=settings.postgres_user,
            password=settings.postgres_password,
        ),
        cache=RedisTitleCache(
            host=settings.redis_host,
            port=settings.redis_port,
            reconnect_interval=settings.redis_reconnect_interval,
        ),
        index=ElasticsearchTodoIndex(
            url=settings.elastic_url,
            ping_timeout=settings.elastic_ping_timeout,
            refresh=settings.elastic_refresh,
        ),
    )
