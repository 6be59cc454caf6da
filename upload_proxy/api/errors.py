"""HTTP-level errors and their responses."""

import logging

from fastapi import Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Every method is routed so unsupported ones get a 405 from the handler
# instead of falling through to another route.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


class RequestMethodError(Exception):
    """Raised when a route receives a method it does not support."""

    def __init__(self, method: str) -> None:
        super().__init__(f"method {method} not allowed")
        self.method = method


def _method_not_allowed(request: Request) -> PlainTextResponse:
    logger.debug(
        "Rejected request method",
        extra={"path": request.url.path, "method": request.method}
    )
    return PlainTextResponse("method not allowed", status_code=status.HTTP_405_METHOD_NOT_ALLOWED)


async def request_method_error_handler(request: Request, exc: RequestMethodError) -> PlainTextResponse:
    return _method_not_allowed(request)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Router-level HTTP errors.

    Methods outside ALL_METHODS (TRACE, PROPFIND, ...) never reach a route;
    the router's 405 gets the same plain-text body as RequestMethodError.
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return _method_not_allowed(request)
    return await http_exception_handler(request, exc)
