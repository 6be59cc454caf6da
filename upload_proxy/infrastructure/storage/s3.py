"""
S3-compatible object store.

Works against AWS S3 with ambient credentials, or against any
S3-compatible endpoint (MinIO, s3rver, localstack) with static keys.
Custom endpoints are treated as local stores: plain HTTP and path-style
addressing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from .client import (
    CANCELLED_MESSAGE,
    BackendConstructionError,
    DeleteError,
    DeleteRequest,
    OperationCancelled,
    UploadError,
    UploadRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class S3Config:
    """
    Configuration for the S3 client.

    Defaults use the AWS endpoint and credential chain. A local config
    (explicit credentials) always talks plain HTTP with path-style
    addressing, with or without a custom endpoint_url.
    """
    region: str
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    is_local: bool = False


class S3ObjectStore:
    """
    Object store backed by boto3's S3 client.

    Uploads go through the managed transfer (upload_fileobj), which
    switches to multipart for large bodies. The boto3 client is shared by
    all requests; boto3 clients are thread-safe.
    """

    def __init__(self, config: S3Config, client: Any = None) -> None:
        self._config = config

        if client is None:
            client = self._build_client(config)
        self._s3_client = client

        logger.info(
            "Initialized S3 object store",
            extra={
                "region": config.region,
                "endpoint": config.endpoint_url or "default",
            }
        )

    @staticmethod
    def _build_client(config: S3Config) -> Any:
        kwargs: dict[str, Any] = {"region_name": config.region}

        if config.endpoint_url:
            kwargs["endpoint_url"] = config.endpoint_url
        if config.is_local:
            kwargs.update(
                use_ssl=False,
                config=Config(s3={"addressing_style": "path"}),
            )
        if config.access_key_id or config.secret_access_key:
            kwargs.update(
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
            )

        try:
            return boto3.client("s3", **kwargs)
        except (BotoCoreError, ValueError) as e:
            raise BackendConstructionError(f"failed to create S3 client: {e}") from e

    def upload(self, request: UploadRequest) -> None:
        """
        Upload the request body.

        Cancellation is checked before starting and on every progress
        callback, so a disconnect aborts a multipart upload midway.
        """
        extra_args = {}
        if request.content_type is not None:
            extra_args["ContentType"] = request.content_type
        if request.cache_control is not None:
            extra_args["CacheControl"] = request.cache_control

        def on_progress(_bytes_transferred: int) -> None:
            request.cancellation.raise_if_cancelled()

        try:
            request.cancellation.raise_if_cancelled()
            self._s3_client.upload_fileobj(
                request.body,
                request.bucket,
                request.path,
                ExtraArgs=extra_args or None,
                Callback=on_progress,
            )
        except OperationCancelled as e:
            raise UploadError(CANCELLED_MESSAGE) from e
        except Exception as e:
            if request.cancellation.cancelled:
                raise UploadError(CANCELLED_MESSAGE) from e
            raise UploadError(str(e)) from e

    def delete(self, request: DeleteRequest) -> None:
        try:
            request.cancellation.raise_if_cancelled()
            self._s3_client.delete_object(
                Bucket=request.bucket,
                Key=request.path,
            )
        except OperationCancelled as e:
            raise DeleteError(CANCELLED_MESSAGE) from e
        except Exception as e:
            raise DeleteError(str(e)) from e
