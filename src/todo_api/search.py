"""
Full-text search index over todo titles.

Documents have a single field, `todotext`. Indexing and searching are best
effort: failures are logged and never raised to the caller.
"""

from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from .log import get_logger
from .models import SearchHit

TODOS_INDEX = "todos"
TEXT_FIELD = "todotext"

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


# PUBLIC_INTERFACE
class SearchIndex(ABC):
    """Abstract contract for the todo search index."""

    async def start(self) -> None:
        """Check the backend and create the index if needed."""
        await self.ensure_index()

    async def stop(self) -> None:
        """Release the backend client."""

    @abstractmethod
    async def ensure_index(self) -> None:
        """Create the index if it does not exist. Safe to call repeatedly."""

    @abstractmethod
    async def index_document(self, text: str) -> bool:
        """Index `{todotext: text}`. Return False instead of raising on failure."""

    @abstractmethod
    async def search(self, query: str) -> List[SearchHit]:
        """Return ranked hits for a match query on `todotext`; [] on failure."""


def _refresh_param(refresh: str) -> Union[bool, str]:
    if refresh == "true":
        return True
    if refresh == "false":
        return False
    return refresh


class ElasticsearchTodoIndex(SearchIndex):
    """Elasticsearch-backed index using the async client."""

    def __init__(
        self,
        url: str,
        index_name: str = TODOS_INDEX,
        ping_timeout: float = 30.0,
        refresh: str = "wait_for",
        client: Optional[AsyncElasticsearch] = None,
    ) -> None:
        self.url = url
        self.index_name = index_name
        self.ping_timeout = ping_timeout
        self.refresh = _refresh_param(refresh)
        self.logger = get_logger("todo_api.search.elasticsearch")
        self.client = client or AsyncElasticsearch(hosts=[url])

    async def start(self) -> None:
        await self.ping()
        await self.ensure_index()

    async def stop(self) -> None:
        await self.client.close()
        self.logger.info("Elasticsearch client closed")

    async def ping(self) -> bool:
        """One-off health check bounded by `ping_timeout`."""
        # the client reports transport and API errors as False
        ok = await self.client.options(request_timeout=self.ping_timeout).ping()
        if ok:
            self.logger.info("Elasticsearch client connected", url=self.url)
        else:
            self.logger.error("Something went wrong with Elasticsearch", url=self.url, error="ping failed")
        return bool(ok)

    async def ensure_index(self) -> None:
        try:
            exists = await self.client.indices.exists(index=self.index_name)
            if not exists:
                await self.client.indices.create(index=self.index_name)
                self.logger.info("Created a new Elastic index", index=self.index_name)
            else:
                self.logger.info("Index already exists", index=self.index_name)
        except (ApiError, TransportError) as e:
            self.logger.error("Error checking or creating index", index=self.index_name, error=str(e))

    async def index_document(self, text: str) -> bool:
        try:
            await self.client.index(
                index=self.index_name,
                document={TEXT_FIELD: text},
                refresh=self.refresh,
            )
        except (ApiError, TransportError) as e:
            self.logger.warning("Could not index todo", title=text, error=str(e))
            return False
        return True

    async def search(self, query: str) -> List[SearchHit]:
        try:
            resp = await self.client.search(
                index=self.index_name,
                query={"match": {TEXT_FIELD: query}},
            )
        except (ApiError, TransportError) as e:
            self.logger.warning("Search failed", search_text=query, error=str(e))
            return []
        return [dict(hit) for hit in resp["hits"]["hits"]]  # type: ignore[misc]


class InMemoryTodoIndex(SearchIndex):
    """
    In-process index for tests and local runs without Elasticsearch.

    A document matches when it shares at least one lowercase word token with
    the query; the score is the number of shared tokens. Hits use the same
    layout as Elasticsearch hits.
    """

    def __init__(self, index_name: str = TODOS_INDEX) -> None:
        self.index_name = index_name
        self._docs: Dict[str, str] = {}

    async def ensure_index(self) -> None:
        return None

    async def index_document(self, text: str) -> bool:
        self._docs[uuid.uuid4().hex] = text
        return True

    async def search(self, query: str) -> List[SearchHit]:
        terms = {t.lower() for t in _TOKEN_RE.findall(query)}
        if not terms:
            return []
        hits: List[SearchHit] = []
        for doc_id, text in self._docs.items():
            score = len(terms & {t.lower() for t in _TOKEN_RE.findall(text)})
            if score:
                hits.append(
                    {
                        "_index": self.index_name,
                        "_id": doc_id,
                        "_score": float(score),
                        "_source": {TEXT_FIELD: text},
                    }
                )
        return sorted(hits, key=lambda h: h["_score"], reverse=True)
