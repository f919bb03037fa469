from todo_store.db import SQLiteStorage
from todo_store.repositories import ToDoStore
from todo_store.results import ErrorKind
from todo_store.schemas import SortOrder, TodoPayload

from .fakes import FakeClock, sequential_ids


def make_store(path):
    return ToDoStore(SQLiteStorage(str(path)), clock=FakeClock(), id_factory=sequential_ids())


def payload(title="A", body="B", tag="x"):
    return TodoPayload(title=title, body=body, tag=tag)


class TestSQLiteStorage:
    def test_insert_get_remove(self, tmp_path):
        storage = SQLiteStorage(str(tmp_path / "todos.db"))
        todo = {
            "id": "k1",
            "title": "t",
            "body": "b",
            "tag": "",
            "completed": False,
            "created_at": 1_700_000_000_000_000_000,
            "updated_at": None,
        }
        storage.insert("k1", todo)
        assert len(storage) == 1
        assert storage.get("k1") == todo
        assert storage.get("missing") is None
        assert storage.remove("k1") == todo
        assert storage.remove("k1") is None
        assert len(storage) == 0

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "todos.db"
        SQLiteStorage(str(path))
        assert path.exists()

    def test_replace_keeps_position(self, tmp_path):
        store = make_store(tmp_path / "todos.db")
        first = store.add(payload("one")).unwrap()
        second = store.add(payload("two")).unwrap()
        store.update(first["id"], payload("one again"))
        store.complete(first["id"])

        assert [t["id"] for t in store.list_all()] == [first["id"], second["id"]]
        assert store.list_all()[0]["title"] == "one again"
        assert store.list_all()[0]["completed"] is True


class TestSQLiteBackedStore:
    def test_records_survive_reopen(self, tmp_path):
        path = tmp_path / "todos.db"
        store = make_store(path)
        created = store.add(payload("persist", "me", "keep")).unwrap()
        done = store.complete(created["id"]).unwrap()

        reopened = ToDoStore(SQLiteStorage(str(path)))
        assert reopened.get(created["id"]).unwrap() == done

    def test_queries(self, tmp_path):
        store = make_store(tmp_path / "todos.db")
        a = store.add(payload("Alpha", "first body", "x")).unwrap()
        b = store.add(payload("Beta", "second BODY", "y")).unwrap()
        c = store.add(payload("Gamma", "third", "x")).unwrap()

        assert store.list_by_tag("x", 0, 2).unwrap() == [a]
        assert store.list_by_tag("x", 1, 3).unwrap() == [c]
        assert store.list_by_tag("x", 0, 3).error.kind is ErrorKind.RANGE_TOO_LARGE
        assert store.search("body") == [a, b]
        assert store.sort_by_date(SortOrder.descending) == [c, b, a]

    def test_delete(self, tmp_path):
        store = make_store(tmp_path / "todos.db")
        created = store.add(payload()).unwrap()
        assert store.delete(created["id"]).unwrap() == created
        assert store.get(created["id"]).error.kind is ErrorKind.NOT_FOUND
        assert store.list_all() == []
