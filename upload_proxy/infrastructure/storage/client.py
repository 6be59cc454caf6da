"""
Object storage contract shared by every backend.

The HTTP layer only knows the ObjectStore protocol; the concrete backend
(S3-compatible or MediaStore) is chosen once at startup from settings.
Backends never retry: a failed call surfaces as a StorageError and the
request is reported as failed.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Optional, Protocol

if TYPE_CHECKING:
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "operation cancelled"


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class UploadError(StorageError):
    """Raised when an object could not be uploaded."""
    pass


class DeleteError(StorageError):
    """Raised when an object could not be deleted."""
    pass


class BackendConstructionError(Exception):
    """Raised when the configured backend cannot be created."""
    pass


class OperationCancelled(Exception):
    """Raised inside a backend when the request was cancelled."""
    pass


class Cancellation:
    """
    Request-scoped cancellation token.

    Set by the HTTP layer when the client goes away; checked by backends
    from their worker thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled(CANCELLED_MESSAGE)


@dataclass
class UploadRequest:
    """One object to store. Optional headers are omitted when None."""
    bucket: str
    path: str
    body: BinaryIO
    content_type: Optional[str] = None
    cache_control: Optional[str] = None
    cancellation: Cancellation = field(default_factory=Cancellation)


@dataclass
class DeleteRequest:
    """One object to remove."""
    bucket: str
    path: str
    cancellation: Cancellation = field(default_factory=Cancellation)


class ObjectStore(Protocol):
    """
    Protocol for object storage backends.

    Methods are synchronous (boto3 is); the HTTP layer runs them in a
    worker thread.
    """

    def upload(self, request: UploadRequest) -> None:
        """Store the request body under bucket/path. Raises UploadError."""
        ...

    def delete(self, request: DeleteRequest) -> None:
        """Remove bucket/path. Raises DeleteError."""
        ...


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_object_store(settings: "Settings") -> ObjectStore:
    """
    Create the object store selected by settings.upload_driver.

    Raises:
        BackendConstructionError: unknown driver or client setup failure
    """
    driver = settings.upload_driver

    if driver == "s3":
        from .s3 import S3Config, S3ObjectStore

        if settings.uses_custom_endpoint:
            config = S3Config(
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint or None,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=settings.s3_secret_access_key,
                is_local=True,
            )
        else:
            config = S3Config(region=settings.s3_region)
        return S3ObjectStore(config)

    if driver == "mediastore":
        from .mediastore import MediaStoreObjectStore

        return MediaStoreObjectStore(region=settings.s3_region)

    raise BackendConstructionError(f"invalid upload driver {driver!r}")
