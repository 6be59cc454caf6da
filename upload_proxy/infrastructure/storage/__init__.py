"""
Object storage backends.

Supports S3-compatible stores and AWS Elemental MediaStore behind a
single ObjectStore protocol.
"""

from .client import (
    BackendConstructionError,
    Cancellation,
    DeleteError,
    DeleteRequest,
    ObjectStore,
    StorageError,
    UploadError,
    UploadRequest,
    create_object_store,
)

__all__ = [
    "BackendConstructionError",
    "Cancellation",
    "DeleteError",
    "DeleteRequest",
    "ObjectStore",
    "StorageError",
    "UploadError",
    "UploadRequest",
    "create_object_store",
]
