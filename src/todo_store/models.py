from __future__ import annotations

from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A to-do record as held by the ordered storage backends.

    Fields:
    - id: Unique string identifier, also the storage key
    - title: Non-empty title
    - body: Non-empty body text
    - tag: Free-form tag used for filtering
    - completed: Completion flag, False at creation
    - created_at: Creation timestamp in nanoseconds
    - updated_at: Last mutation timestamp in nanoseconds, None until first mutation
    """

    id: str
    title: str
    body: str
    tag: str
    completed: bool
    created_at: int
    updated_at: Optional[int]
