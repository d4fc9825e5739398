"""
tracker/api/function.py
On-demand (serverless) hosting of the activities endpoint.

The handler takes a Netlify/Lambda style event and returns the matching
{"statusCode", "body", "headers"} dict. The store lives under
TRACKER_FUNCTION_DATA_DIR, which defaults to /tmp/data.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

from tracker.api.endpoint import ActivityEndpoint
from tracker.config import get_function_data_file
from tracker.store.document import DocumentStore

logger = logging.getLogger(__name__)

_endpoint: Optional[ActivityEndpoint] = None


def get_endpoint() -> ActivityEndpoint:
    global _endpoint
    if _endpoint is None:
        store = DocumentStore(get_function_data_file())
        store.ensure()
        _endpoint = ActivityEndpoint(store)
    return _endpoint


def reset_endpoint() -> None:
    """Forget the cached endpoint so the next call re-reads configuration."""
    global _endpoint
    _endpoint = None


def _event_body(event: Dict[str, Any]) -> Optional[str]:
    body = event.get("body")
    if body is None:
        return None
    if event.get("isBase64Encoded"):
        return base64.b64decode(body).decode("utf-8")
    return body


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    method = event.get("httpMethod", "")
    try:
        body = _event_body(event)
    except ValueError as exc:
        logger.error(f"Undecodable request body: {exc}")
        body = None
    result = get_endpoint().dispatch(method, body)
    return {
        "statusCode": result.status_code,
        "body": result.body,
        "headers": {"Content-Type": result.content_type},
    }
