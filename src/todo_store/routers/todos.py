from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status

from ..repositories import ToDoStore, get_store
from ..schemas import ErrorOut, SortOrder, TodoOut, TodoPayload

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)

# Largest value of an unsigned 64-bit index.
_U64_MAX = 2**64 - 1

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Todo not found"}}
_INVALID = {422: {"model": ErrorOut, "description": "Empty title or body"}}


def _get_store(store: ToDoStore = Depends(get_store)) -> ToDoStore:
    """
    Dependency wrapper for the store to keep signatures clean.
    """
    return store


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo in storage order.",
)
def list_todos(store: ToDoStore = Depends(_get_store)) -> List[TodoOut]:
    return [TodoOut(**t) for t in store.list_all()]


# PUBLIC_INTERFACE
@router.get(
    "/by-tag",
    response_model=List[TodoOut],
    summary="List Todos By Tag",
    description=(
        "Scan storage positions [start_index, end_index) and return the todos whose tag "
        "matches. At most two positions may be scanned per call.\n\n"
        "Indexes address positions in the whole store, not in the filtered result, so a "
        "page may hold zero, one or two matches."
    ),
    responses={400: {"model": ErrorOut, "description": "Indexes out of bounds or window too large"}},
)
def list_todos_by_tag(
    tag: str = Query(..., description="Tag to match exactly"),
    start_index: int = Query(..., ge=0, le=_U64_MAX, description="First storage position (inclusive)"),
    end_index: int = Query(..., ge=0, le=_U64_MAX, description="Last storage position (exclusive)"),
    store: ToDoStore = Depends(_get_store),
) -> List[TodoOut]:
    todos = store.list_by_tag(tag, start_index, end_index).unwrap()
    return [TodoOut(**t) for t in todos]


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=List[TodoOut],
    summary="Search Todos",
    description="Case-insensitive substring search over title and body. An empty query matches everything.",
)
def search_todos(
    q: str = Query("", description="Search text for title/body"),
    store: ToDoStore = Depends(_get_store),
) -> List[TodoOut]:
    return [TodoOut(**t) for t in store.search(q)]


# PUBLIC_INTERFACE
@router.get(
    "/sorted",
    response_model=List[TodoOut],
    summary="Sort Todos By Date",
    description="Return every todo ordered by creation time.",
)
def sort_todos_by_date(
    order: SortOrder = Query(SortOrder.ascending, description="'ascending' or 'descending'"),
    store: ToDoStore = Depends(_get_store),
) -> List[TodoOut]:
    return [TodoOut(**t) for t in store.sort_by_date(order)]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses=_NOT_FOUND,
)
def get_todo(todo_id: str, store: ToDoStore = Depends(_get_store)) -> TodoOut:
    return TodoOut(**store.get(todo_id).unwrap())


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses=_INVALID,
)
def create_todo(payload: TodoPayload, store: ToDoStore = Depends(_get_store)) -> TodoOut:
    return TodoOut(**store.add(payload).unwrap())


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Replace title, body and tag of an existing Todo item. "
        "The id, creation time and completion flag are kept."
    ),
    responses={**_NOT_FOUND, **_INVALID},
)
def update_todo(todo_id: str, payload: TodoPayload, store: ToDoStore = Depends(_get_store)) -> TodoOut:
    return TodoOut(**store.update(todo_id, payload).unwrap())


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID and return the removed item.",
    responses=_NOT_FOUND,
)
def delete_todo(todo_id: str, store: ToDoStore = Depends(_get_store)) -> TodoOut:
    return TodoOut(**store.delete(todo_id).unwrap())


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/complete",
    response_model=TodoOut,
    summary="Complete Todo",
    description="Mark a Todo item as completed. A todo can only be completed once.",
    responses={**_NOT_FOUND, 409: {"model": ErrorOut, "description": "Todo already completed"}},
)
def complete_todo(todo_id: str, store: ToDoStore = Depends(_get_store)) -> TodoOut:
    return TodoOut(**store.complete(todo_id).unwrap())
