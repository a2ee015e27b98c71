from __future__ import annotations

from fastapi import Request

from .service import TodoService


# PUBLIC_INTERFACE
def get_todo_service(request: Request) -> TodoService:
    """
    Return the process-wide TodoService built at startup.

    Tests replace this dependency through `app.dependency_overrides`.
    """
    return request.app.state.todo_service
