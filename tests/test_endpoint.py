import json

import pytest

from tracker.api.endpoint import ActivityEndpoint


FAST = {"id": "1", "date": "2024-03-10", "name": "Fast", "completed": False, "time": "", "notes": ""}


@pytest.fixture
def endpoint(store):
    return ActivityEndpoint(store)


def test_read_all_on_empty_store(endpoint):
    result = endpoint.dispatch("GET")
    assert result.status_code == 200
    assert result.content_type == "application/json"
    assert result.json() == []


def test_replace_all_then_read(endpoint):
    result = endpoint.dispatch("POST", json.dumps([FAST]))
    assert result.status_code == 200
    assert result.json() == {"success": True, "message": "Activities saved successfully"}
    assert endpoint.dispatch("get").json() == [FAST]


def test_replace_all_accepts_bytes(endpoint):
    assert endpoint.replace_all(json.dumps([FAST]).encode("utf-8")).status_code == 200
    assert endpoint.read_all().json() == [FAST]


def test_any_array_is_stored_verbatim(endpoint):
    odd = [{"whatever": 1}, "text", 3]
    assert endpoint.replace_all(json.dumps(odd)).status_code == 200
    assert endpoint.read_all().json() == odd


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "",
        None,
        '{"id": "1"}',
        b"\xff\xfe",
        '[{"id": "1", "x": NaN}]',
        "[Infinity]",
        "[-Infinity]",
        pytest.param("[" * 100000, id="deeply-nested"),
    ],
)
def test_bad_body_keeps_store(endpoint, body):
    endpoint.replace_all(json.dumps([FAST]))
    result = endpoint.dispatch("POST", body)
    assert result.status_code == 500
    assert result.json() == {"error": "Failed to save activities"}
    assert endpoint.read_all().json() == [FAST]


def test_read_failure_is_generic(endpoint, data_file):
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("[{broken", encoding="utf-8")
    result = endpoint.read_all()
    assert result.status_code == 500
    assert result.json() == {"error": "Failed to read activities"}


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", ""])
def test_other_methods_not_allowed(endpoint, method):
    result = endpoint.dispatch(method, "[]")
    assert result.status_code == 405
    assert result.body == "Method Not Allowed"
    assert result.content_type == "text/plain"
