"""
AWS Elemental MediaStore object store.

The configured bucket is a MediaStore container name. Each container has
its own data endpoint, looked up once with DescribeContainer and reused
for the life of the process.
"""

import logging
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError

from .client import (
    CANCELLED_MESSAGE,
    BackendConstructionError,
    DeleteError,
    DeleteRequest,
    OperationCancelled,
    StorageError,
    UploadError,
    UploadRequest,
)

logger = logging.getLogger(__name__)


class MediaStoreObjectStore:
    """Object store backed by the mediastore and mediastore-data APIs."""

    def __init__(
        self,
        region: str,
        control_client: Any = None,
        data_client_factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._region = region

        try:
            self._control_client = control_client or boto3.client("mediastore", region_name=region)
        except (BotoCoreError, ValueError) as e:
            raise BackendConstructionError(f"failed to create MediaStore client: {e}") from e

        self._data_client_factory = data_client_factory or self._default_data_client
        # container name -> data-plane client
        self._data_clients: dict[str, Any] = {}

        logger.info("Initialized MediaStore object store", extra={"region": region})

    def _default_data_client(self, endpoint: str) -> Any:
        return boto3.client("mediastore-data", endpoint_url=endpoint, region_name=self._region)

    def _data_client(self, container: str) -> Any:
        """
        Data-plane client for ``container``, created on first use.

        Concurrent first requests may both resolve the endpoint; the
        first client stored wins. Failed lookups are not cached.
        """
        client = self._data_clients.get(container)
        if client is not None:
            return client

        try:
            response = self._control_client.describe_container(ContainerName=container)
            endpoint = response["Container"]["Endpoint"]
        except Exception as e:
            raise StorageError(f"failed to resolve endpoint for container {container!r}: {e}") from e

        logger.debug(
            "Resolved MediaStore container endpoint",
            extra={"container": container, "endpoint": endpoint}
        )
        return self._data_clients.setdefault(container, self._data_client_factory(endpoint))

    def upload(self, request: UploadRequest) -> None:
        extra_args = {}
        if request.content_type is not None:
            extra_args["ContentType"] = request.content_type
        if request.cache_control is not None:
            extra_args["CacheControl"] = request.cache_control

        try:
            request.cancellation.raise_if_cancelled()
            self._data_client(request.bucket).put_object(
                Body=request.body,
                Path=request.path,
                **extra_args,
            )
        except OperationCancelled as e:
            raise UploadError(CANCELLED_MESSAGE) from e
        except Exception as e:
            raise UploadError(str(e)) from e

    def delete(self, request: DeleteRequest) -> None:
        try:
            request.cancellation.raise_if_cancelled()
            self._data_client(request.bucket).delete_object(Path=request.path)
        except OperationCancelled as e:
            raise DeleteError(CANCELLED_MESSAGE) from e
        except Exception as e:
            raise DeleteError(str(e)) from e
