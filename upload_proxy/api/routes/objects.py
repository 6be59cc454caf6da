"""
Object upload and delete endpoints.

Every path not claimed by another route is an object key:

    POST /videos/intro.mp4    -> upload body to videos/intro.mp4
    PUT  /videos/intro.mp4    -> same as POST
    DELETE /videos/intro.mp4  -> delete videos/intro.mp4

Responses are plain text: "OK" on success, the storage error message with
a 500 on failure. A failed call is reported once and never retried.
"""

import logging
import tempfile
import time
from typing import Any, Callable

import anyio
from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from ...core.objects import content_type_for, object_key
from ...infrastructure.storage.client import (
    CANCELLED_MESSAGE,
    Cancellation,
    DeleteRequest,
    StorageError,
    UploadError,
    UploadRequest,
)
from ..dependencies import CacheControlRulesDep, ObjectStoreDep, SettingsDep
from ..errors import ALL_METHODS, RequestMethodError

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_METHODS = ("POST", "PUT")

# Bodies up to this size stay in memory; larger ones spill to a temp file.
SPOOL_MAX_BYTES = 8 * 1024 * 1024


async def _cancel_on_disconnect(request: Request, cancellation: Cancellation) -> None:
    """Trip the cancellation token once the client goes away."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            cancellation.cancel()
            return


async def _call_store(
    request: Request,
    cancellation: Cancellation,
    operation: Callable[[Any], None],
    payload: Any,
) -> None:
    """
    Run a blocking store operation in the thread pool.

    While it runs, a watcher task listens for the client disconnecting and
    cancels the operation through its token.
    """
    error = None
    async with anyio.create_task_group() as tg:
        tg.start_soon(_cancel_on_disconnect, request, cancellation)
        try:
            await run_in_threadpool(operation, payload)
        except StorageError as e:
            error = e
        finally:
            tg.cancel_scope.cancel()

    if error is not None:
        raise error


@router.api_route("/{key:path}", methods=ALL_METHODS, include_in_schema=False)
async def handle_object(
    request: Request,
    settings: SettingsDep,
    store: ObjectStoreDep,
    rules: CacheControlRulesDep,
) -> PlainTextResponse:
    """Upload (POST/PUT) or delete (DELETE) the object named by the path."""
    if request.method not in UPLOAD_METHODS and request.method != "DELETE":
        raise RequestMethodError(request.method)

    start = time.perf_counter()
    key = object_key(request.url.path)
    content_type = content_type_for(key)
    log_fields = {
        "bucket": settings.bucket_name,
        "object_key": key,
        "content_type": content_type,
    }
    cancellation = Cancellation()

    try:
        if request.method in UPLOAD_METHODS:
            with tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_BYTES) as body:
                try:
                    async for chunk in request.stream():
                        body.write(chunk)
                except ClientDisconnect as e:
                    raise UploadError(CANCELLED_MESSAGE) from e
                body.seek(0)

                upload = UploadRequest(
                    bucket=settings.bucket_name,
                    path=key,
                    body=body,
                    content_type=content_type,
                    cache_control=rules.header_value(key),
                    cancellation=cancellation,
                )
                await _call_store(request, cancellation, store.upload, upload)
            action = "Finished upload"
        else:
            delete = DeleteRequest(
                bucket=settings.bucket_name,
                path=key,
                cancellation=cancellation,
            )
            await _call_store(request, cancellation, store.delete, delete)
            action = "Deleted object"

    except StorageError as e:
        failure = "Failed to upload file" if request.method in UPLOAD_METHODS else "Failed to delete file"
        logger.error(failure, extra={**log_fields, "error": str(e)})
        return PlainTextResponse(str(e), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.debug(
        action,
        extra={**log_fields, "duration_ms": round((time.perf_counter() - start) * 1000, 3)}
    )
    return PlainTextResponse("OK")
