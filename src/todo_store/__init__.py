"""
Todo Store package.

Persistent to-do list service: an ordered key-value store of todo records
(todo_store.repositories) served over HTTP by the FastAPI app in
todo_store.main.
"""
