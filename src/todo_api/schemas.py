from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Unknown fields are kept so the created response can echo the submitted
    body verbatim.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {"title": "buy milk"}},
    )

    title: str = Field(..., description="Unique title of the todo item", min_length=1)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the list endpoint for a Todo item.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "buy milk"}})

    title: str = Field(..., description="Title of the todo item")


# PUBLIC_INTERFACE
class SearchRequest(BaseModel):
    """
    Schema for a full-text search over todo titles.

    `searchText` is not validated: a missing or non-string value yields an
    empty hit list rather than a validation error.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"searchText": "milk"}},
    )

    search_text: Optional[Any] = Field(
        default=None, alias="searchText", description="Free text matched against todo titles"
    )
