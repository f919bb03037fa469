import json

from todo_store.generate_openapi import generate_openapi


def test_generate_openapi_writes_schema(tmp_path):
    out = tmp_path / "interfaces" / "openapi.json"
    path = generate_openapi(str(out))
    assert path == str(out)

    schema = json.loads(out.read_text(encoding="utf-8"))
    assert {t["name"] for t in schema["tags"]} >= {"health", "todos"}
    paths = schema["paths"]
    for p in [
        "/api/v1/todos/",
        "/api/v1/todos/by-tag",
        "/api/v1/todos/search",
        "/api/v1/todos/sorted",
        "/api/v1/todos/{todo_id}",
        "/api/v1/todos/{todo_id}/complete",
    ]:
        assert p in paths
