from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class SortOrder(str, Enum):
    """Direction for sorting by creation date."""

    ascending = "ascending"
    descending = "descending"


# PUBLIC_INTERFACE
class TodoPayload(BaseModel):
    """
    Mutable fields of a to-do, used for both create and update.

    Emptiness of title/body is checked by the store, not here, so that the
    store reports it as a ValidationError with a fixed message.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "body": "Milk, eggs, bread",
                "tag": "errands",
            }
        }
    )

    title: str = Field(..., description="Title of the todo item; must not be empty")
    body: str = Field(..., description="Body text of the todo item; must not be empty")
    tag: str = Field(..., description="Tag used for filtering; may be empty")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f0b8f5e-1c55-4a0e-9d3e-52a1f0c0a9b1",
                "title": "Buy groceries",
                "body": "Milk, eggs, bread",
                "tag": "errands",
                "completed": False,
                "created_at": 1737800130123456789,
                "updated_at": None,
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    body: str = Field(..., description="Body text of the todo item")
    tag: str = Field(..., description="Tag of the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: int = Field(..., description="Creation timestamp (nanoseconds)")
    updated_at: Optional[int] = Field(
        default=None, description="Last update timestamp (nanoseconds); null until first update"
    )


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Body of every error response produced by a store operation."""

    error: str = Field(..., description="Error kind, e.g. NotFound or RangeTooLarge")
    message: str = Field(..., description="Human-readable error message")
