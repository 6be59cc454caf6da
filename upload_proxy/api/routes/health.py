"""
Health check endpoint.

Liveness only: answers GET with an empty 200 and checks no dependencies,
so a slow object store never fails the load balancer probe. The path is
configurable, which is why the router is built at app creation.
"""

from fastapi import APIRouter, Request, Response, status

from ..errors import ALL_METHODS, RequestMethodError


async def health_check(request: Request) -> Response:
    """200 on GET; anything else is a 405."""
    if request.method != "GET":
        raise RequestMethodError(request.method)
    return Response(status_code=status.HTTP_200_OK)


def create_router(path: str) -> APIRouter:
    router = APIRouter()
    router.add_api_route(
        path,
        health_check,
        methods=ALL_METHODS,
        include_in_schema=False,
    )
    return router
