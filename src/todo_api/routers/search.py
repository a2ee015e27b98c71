from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..dependencies import get_todo_service
from ..log import get_logger
from ..schemas import SearchRequest
from ..service import TodoService

router = APIRouter(
    prefix="/api/v1/search",
    tags=["search"],
)

logger = get_logger("todo_api.routers.search")


# PUBLIC_INTERFACE
@router.post(
    "",
    summary="Search Todos",
    description=(
        "Full-text match of `searchText` against todo titles. Returns the raw "
        "search hits. An unavailable search backend yields an empty list, not an error."
    ),
    responses={200: {"description": "Hits (possibly empty)"}},
)
@router.post("/", include_in_schema=False)
async def search_todos(
    payload: SearchRequest,
    service: TodoService = Depends(get_todo_service),
) -> List[Dict[str, Any]]:
    """
    Search todos by text.
    """
    logger.info("CALLED POST api/v1/search", search_text=payload.search_text)
    return await service.search_todos(payload.search_text)
