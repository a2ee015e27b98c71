from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .backends import build_backends
from .errors import DuplicateTodoError, TodoApiError
from .log import configure_logging, get_logger
from .routers import search as search_router
from .routers import todos as todos_router
from .settings import get_settings

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Create and list todos, written to the database, cache and search index.",
    },
    {"name": "search", "description": "Full-text search over todo titles."},
]

_settings = get_settings()

configure_logging("todo-api", _settings.log_level)
logger = get_logger("todo_api.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build and start the backend clients once for the whole process."""
    backends = build_backends(_settings)
    await backends.start()
    app.state.backends = backends
    app.state.todo_service = backends.service()
    logger.info("Todo API Server started", backend=_settings.backend_mode, port=_settings.port)
    try:
        yield
    finally:
        await backends.stop()


app = FastAPI(
    title="Todo API",
    description="Todo service backed by Postgres, a Redis title cache and an Elasticsearch index.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


@app.exception_handler(TodoApiError)
async def todo_api_exception_handler(request: Request, exc: TodoApiError) -> JSONResponse:
    """Map domain errors to JSON: 409 for duplicate titles, 500 for everything else."""
    status_code = 409 if isinstance(exc, DuplicateTodoError) else 500
    logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_response().model_dump())


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.backend_mode}


# Include routers
app.include_router(todos_router.router)
app.include_router(search_router.router)
