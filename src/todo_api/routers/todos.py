from __future__ import annotations

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from ..dependencies import get_todo_service
from ..errors import ErrorResponse
from ..log import get_logger
from ..schemas import TodoCreate, TodoOut
from ..service import TodoService

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)

logger = get_logger("todo_api.routers.todos")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List all todo titles.\n\n"
        "Titles come from the cache when it holds any; otherwise they are read "
        "from the database. Any backend failure yields a plain-text 500."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Backend failure", "content": {"text/plain": {}}},
    },
)
@router.get("/", response_model=List[TodoOut], include_in_schema=False)
async def list_todos(
    service: TodoService = Depends(get_todo_service),
) -> Union[List[Dict[str, str]], PlainTextResponse]:
    """
    List todos, cache first.
    """
    logger.info("CALLED GET api/v1/todos")
    try:
        return await service.list_todos()
    except Exception as e:
        logger.error("Error fetching todos", error=str(e))
        return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Store a todo in the database, then add it to the cache and the search index. "
        "Echoes the submitted body."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        409: {"model": ErrorResponse, "description": "A todo with this title already exists"},
        500: {"model": ErrorResponse, "description": "Database or cache failure"},
    },
)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_todo(
    payload: TodoCreate,
    service: TodoService = Depends(get_todo_service),
) -> Dict[str, Any]:
    """
    Create a new Todo.
    """
    logger.info("CALLED POST api/v1/todos", title=payload.title)
    return await service.create_todo(payload.title, payload.model_dump())
