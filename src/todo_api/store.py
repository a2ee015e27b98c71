"""
Durable store for todos: the `todo` table is the source of truth.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import asyncpg

from .errors import DuplicateTodoError, StoreUnavailableError
from .log import get_logger
from .models import TodoRecord

CREATE_TODO_TABLE = "CREATE TABLE IF NOT EXISTS todo (id SERIAL PRIMARY KEY, title TEXT UNIQUE NOT NULL)"
INSERT_TODO = "INSERT INTO todo(title) VALUES($1) RETURNING id, title"
SELECT_TITLES = "SELECT title FROM todo ORDER BY id"


# PUBLIC_INTERFACE
class TodoStore(ABC):
    """Abstract contract for the durable todo store."""

    async def start(self) -> None:
        """Open connections and make sure the schema exists."""
        await self.ensure_schema()

    async def stop(self) -> None:
        """Release connections."""

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the todo table if it does not exist. Failures are logged, not raised."""

    @abstractmethod
    async def insert_todo(self, title: str) -> TodoRecord:
        """Insert a todo. Raise DuplicateTodoError if the title already exists."""

    @abstractmethod
    async def list_titles(self) -> List[str]:
        """Return all stored titles."""


class PostgresTodoStore(TodoStore):
    """
    asyncpg-backed store.

    One pool is shared by all requests; asyncpg hands out a connection per
    query so concurrent handlers never share a connection.
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        min_size: int = 0,
        max_size: int = 10,
    ) -> None:
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.min_size = min_size
        self.max_size = max_size
        self.logger = get_logger("todo_api.store.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self) -> None:
        self.pool = await asyncpg.create_pool(
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=30,
        )
        self.logger.info("Postgres pool created", host=self.host, database=self.database)
        await self.ensure_schema()

    async def stop(self) -> None:
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("Postgres client closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise StoreUnavailableError("Postgres pool is not started")
        return self.pool

    async def ensure_schema(self) -> None:
        try:
            await self._require_pool().execute(CREATE_TODO_TABLE)
            self.logger.info("Todo table ready")
        except (
            asyncpg.PostgresError,
            asyncpg.InterfaceError,
            OSError,
            asyncio.TimeoutError,
            StoreUnavailableError,
        ) as e:
            self.logger.error("Could not create todo table", error=str(e))

    async def insert_todo(self, title: str) -> TodoRecord:
        pool = self._require_pool()
        try:
            row = await pool.fetchrow(INSERT_TODO, title)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateTodoError(title) from e
        return {"id": int(row["id"]), "title": str(row["title"])}

    async def list_titles(self) -> List[str]:
        rows = await self._require_pool().fetch(SELECT_TITLES)
        return [str(r["title"]) for r in rows]


class InMemoryTodoStore(TodoStore):
    """
    In-process store suitable for tests and local runs without Postgres.
    Enforces the same unique-title constraint.
    """

    def __init__(self) -> None:
        self._items: Dict[str, TodoRecord] = {}
        self._next_id = 1

    async def ensure_schema(self) -> None:
        return None

    async def insert_todo(self, title: str) -> TodoRecord:
        if title in self._items:
            raise DuplicateTodoError(title)
        record: TodoRecord = {"id": self._next_id, "title": title}
        self._next_id += 1
        self._items[title] = record
        return record.copy()

    async def list_titles(self) -> List[str]:
        return [r["title"] for r in sorted(self._items.values(), key=lambda r: r["id"])]
