"""
Read-through cache holding the set of todo titles.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional, Set

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .errors import CacheUnavailableError
from .log import get_logger

TODOS_KEY = "todos"


# PUBLIC_INTERFACE
class TitleCache(ABC):
    """Abstract contract for the title cache."""

    async def start(self) -> None:
        """Connect to the cache backend."""

    async def stop(self) -> None:
        """Disconnect from the cache backend."""

    @abstractmethod
    async def add_title(self, title: str) -> None:
        """Add a title to the set. Adding an existing title is a no-op."""

    @abstractmethod
    async def list_titles(self) -> Set[str]:
        """Return all cached titles. An empty set means nothing is cached."""


class RedisTitleCache(TitleCache):
    """
    Redis set of titles under a fixed key.

    Commands never retry or queue while disconnected: each call either runs on
    a live connection or raises CacheUnavailableError. Reconnection is owned by
    a background task that pings every `reconnect_interval` seconds for the
    life of the process.
    """

    def __init__(
        self,
        host: str,
        port: int,
        key: str = TODOS_KEY,
        reconnect_interval: float = 1.0,
        client: Optional[redis.Redis] = None,
    ) -> None:
        self.key = key
        self.reconnect_interval = reconnect_interval
        self.logger = get_logger("todo_api.cache.redis")
        self.client = client or redis.Redis(
            host=host,
            port=port,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry=Retry(NoBackoff(), 0),
            retry_on_timeout=False,
        )
        self.connected = False
        self._reconnect_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        try:
            await self.connect()
        except CacheUnavailableError:
            self.logger.warning(
                "Redis unavailable at startup, retrying in background",
                interval=self.reconnect_interval,
            )
        self._reconnect_task = asyncio.create_task(self._reconnect_loop())

    async def stop(self) -> None:
        if self._reconnect_task:
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
            self._reconnect_task = None
        await self.client.aclose()
        self.connected = False
        self.logger.info("Redis client closed")

    async def connect(self) -> None:
        """Ping the server, marking the client connected on success."""
        try:
            await self.client.ping()
        except RedisError as e:
            self._mark_disconnected(e)
            raise CacheUnavailableError(f"Redis connection failed: {e}") from e
        if not self.connected:
            self.logger.info("Redis client connected")
        self.connected = True

    async def _ensure_connected(self) -> None:
        if not self.connected:
            await self.connect()

    def _mark_disconnected(self, error: Exception) -> None:
        if self.connected:
            self.logger.error("Redis connection lost", error=str(error))
        else:
            self.logger.error("Something went wrong with Redis", error=str(error))
        self.connected = False

    def _command_failed(self, command: str, error: RedisError) -> CacheUnavailableError:
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            self._mark_disconnected(error)
        else:
            self.logger.error("Redis command failed", command=command, error=str(error))
        return CacheUnavailableError(f"Redis {command} failed: {error}")

    async def _reconnect_loop(self) -> None:
        while True:
            await asyncio.sleep(self.reconnect_interval)
            if self.connected:
                continue
            try:
                await self.connect()
            except CacheUnavailableError:
                continue

    async def add_title(self, title: str) -> None:
        await self._ensure_connected()
        try:
            await self.client.sadd(self.key, title)
        except RedisError as e:
            raise self._command_failed("SADD", e) from e

    async def list_titles(self) -> Set[str]:
        await self._ensure_connected()
        try:
            members = await self.client.smembers(self.key)
        except RedisError as e:
            raise self._command_failed("SMEMBERS", e) from e
        return set(members)


class InMemoryTitleCache(TitleCache):
    """In-process title set for tests and local runs without Redis."""

    def __init__(self) -> None:
        self._titles: Set[str] = set()

    async def add_title(self, title: str) -> None:
        self._titles.add(title)

    async def list_titles(self) -> Set[str]:
        return set(self._titles)
