"""
Error types shared by the backend clients and the HTTP layer.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """JSON body returned for domain errors."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class TodoApiError(Exception):
    """Base exception for the Todo API."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class DuplicateTodoError(TodoApiError):
    """A todo with the same title already exists in the durable store."""

    def __init__(self, title: str):
        super().__init__("DUPLICATE_TODO", f"Todo already exists: {title}", {"title": title})


class StoreUnavailableError(TodoApiError):
    def __init__(self, message: str = "Durable store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class CacheUnavailableError(TodoApiError):
    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)
