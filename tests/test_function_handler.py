"""The serverless adapter answers exactly like the HTTP server."""
import base64
import json

import pytest

from tracker.api import function


FAST = {"id": "1", "date": "2024-03-10", "name": "Fast", "completed": False, "time": "", "notes": ""}


@pytest.fixture(autouse=True)
def function_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACKER_FUNCTION_DATA_DIR", str(tmp_path / "fn-data"))
    function.reset_endpoint()
    yield tmp_path / "fn-data"
    function.reset_endpoint()


def test_cold_start_creates_empty_document(function_dir):
    response = function.handler({"httpMethod": "GET"})
    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "application/json"
    assert json.loads(response["body"]) == []
    assert (function_dir / "activities.json").exists()


def test_post_then_get():
    response = function.handler({"httpMethod": "POST", "body": json.dumps([FAST])})
    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"success": True, "message": "Activities saved successfully"}

    response = function.handler({"httpMethod": "GET"})
    assert json.loads(response["body"]) == [FAST]


def test_base64_body():
    body = base64.b64encode(json.dumps([FAST]).encode("utf-8")).decode("ascii")
    response = function.handler({"httpMethod": "POST", "body": body, "isBase64Encoded": True})
    assert response["statusCode"] == 200
    assert json.loads(function.handler({"httpMethod": "GET"})["body"]) == [FAST]


def test_malformed_body():
    function.handler({"httpMethod": "POST", "body": json.dumps([FAST])})
    response = function.handler({"httpMethod": "POST", "body": "{oops"})
    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Failed to save activities"}
    assert json.loads(function.handler({"httpMethod": "GET"})["body"]) == [FAST]


def test_undecodable_base64_body():
    response = function.handler({"httpMethod": "POST", "body": "%%%", "isBase64Encoded": True})
    assert response["statusCode"] == 500


def test_other_method():
    response = function.handler({"httpMethod": "DELETE"})
    assert response["statusCode"] == 405
    assert response["body"] == "Method Not Allowed"
