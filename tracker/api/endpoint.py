"""
tracker/api/endpoint.py
Hosting-neutral read-all / replace-all handler.

Both the FastAPI server and the serverless function adapt this one class, so
the status codes and bodies are identical whichever way it is hosted.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

from tracker.api.schemas import ErrorResponse, SaveResponse
from tracker.errors import IOFailure
from tracker.store.document import DocumentStore, strict_loads

logger = logging.getLogger(__name__)

READ_FAILED = "Failed to read activities"
SAVE_FAILED = "Failed to save activities"
METHOD_NOT_ALLOWED = "Method Not Allowed"

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"


@dataclass
class EndpointResponse:
    status_code: int
    body: str
    content_type: str = JSON_CONTENT_TYPE

    def json(self):
        return json.loads(self.body)


def _json_response(status_code: int, payload) -> EndpointResponse:
    return EndpointResponse(status_code=status_code, body=json.dumps(payload, ensure_ascii=False))


class ActivityEndpoint:
    def __init__(self, store: DocumentStore):
        self.store = store

    def read_all(self) -> EndpointResponse:
        try:
            activities = self.store.read()
        except IOFailure as exc:
            logger.error(f"Read-all failed: {exc}")
            return _json_response(500, ErrorResponse(error=READ_FAILED).model_dump())
        return _json_response(200, activities)

    def replace_all(self, raw_body: Optional[Union[str, bytes]]) -> EndpointResponse:
        try:
            if raw_body is None:
                raise ValueError("empty request body")
            activities = strict_loads(raw_body)
            if not isinstance(activities, list):
                raise ValueError("request body is not a JSON array")
            self.store.replace(activities)
        except (ValueError, RecursionError, IOFailure) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.error(f"Replace-all failed: {exc}")
            return _json_response(500, ErrorResponse(error=SAVE_FAILED).model_dump())
        logger.info(f"Saved {len(activities)} activities")
        return _json_response(200, SaveResponse().model_dump())

    def method_not_allowed(self) -> EndpointResponse:
        return EndpointResponse(status_code=405, body=METHOD_NOT_ALLOWED, content_type=TEXT_CONTENT_TYPE)

    def dispatch(self, method: str, raw_body: Optional[Union[str, bytes]] = None) -> EndpointResponse:
        method = (method or "").upper()
        if method == "GET":
            return self.read_all()
        if method == "POST":
            return self.replace_all(raw_body)
        return self.method_not_allowed()
