"""
tracker/api/routes/activities.py
Read-all / replace-all over HTTP. Mounted at /activities and at the legacy
/api/activities path.
"""
from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.api.endpoint import ActivityEndpoint, EndpointResponse

router = APIRouter()

ACTIVITY_PATHS = ("/activities", "/api/activities")


def _endpoint(request: Request) -> ActivityEndpoint:
    return request.app.state.endpoint


def _to_response(result: EndpointResponse) -> Response:
    return Response(content=result.body, status_code=result.status_code, media_type=result.content_type)


def get_activities(request: Request):
    return _to_response(_endpoint(request).read_all())


async def save_activities(request: Request):
    raw_body = await request.body()
    return _to_response(_endpoint(request).replace_all(raw_body))


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text 405 for any unsupported verb on the activity paths."""
    if exc.status_code == 405 and request.url.path in ACTIVITY_PATHS:
        return _to_response(_endpoint(request).method_not_allowed())
    return await http_exception_handler(request, exc)


for _path in ACTIVITY_PATHS:
    router.add_api_route(_path, get_activities, methods=["GET"])
    router.add_api_route(_path, save_activities, methods=["POST"])
