from __future__ import annotations

from typing import Any, Dict, TypedDict


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    A row of the durable `todo` table.

    Fields:
    - id: Integer identifier assigned by the store
    - title: Unique title of the todo
    """

    id: int
    title: str


# PUBLIC_INTERFACE
class SearchHit(TypedDict, total=False):
    """
    A single ranked match as returned by the search index.

    Mirrors the Elasticsearch hit layout so that in-memory and live indexes
    produce the same shape: `_source` carries the indexed `todotext`.
    """

    _index: str
    _id: str
    _score: float
    _source: Dict[str, Any]
