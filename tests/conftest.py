"""
Shared test fixtures.

The environment is scrubbed of every configuration variable so a
developer's shell or .env never leaks into settings tests.
"""

import pytest

from upload_proxy.config.settings import Settings, get_settings
from upload_proxy.infrastructure.storage.client import (
    DeleteError,
    DeleteRequest,
    UploadError,
    UploadRequest,
)

CONFIG_VARIABLES = [
    "BUCKET_NAME",
    "S3_REGION",
    "S3_IS_IMPLICIT_AUTH",
    "S3_ENDPOINT",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "UPLOAD_DRIVER",
    "HEALTHCHECK_PATH",
    "HTTP_PORT",
    "LOG_LEVEL",
    "CACHE_CONTROL_RULES",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in CONFIG_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeObjectStore:
    """
    In-memory object store recording every call.

    Pass ``error`` to make every operation fail with that message.
    """

    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.uploads: list[UploadRequest] = []
        self.deletes: list[DeleteRequest] = []
        self.objects: dict[str, bytes] = {}

    def upload(self, request: UploadRequest) -> None:
        self.uploads.append(request)
        if self.error:
            raise UploadError(self.error)
        self.objects[request.path] = request.body.read()

    def delete(self, request: DeleteRequest) -> None:
        self.deletes.append(request)
        if self.error:
            raise DeleteError(self.error)
        self.objects.pop(request.path, None)


@pytest.fixture
def fake_store():
    return FakeObjectStore()


@pytest.fixture
def failing_store():
    return FakeObjectStore(error="Access Denied")


@pytest.fixture
def settings():
    return Settings(
        bucket_name="uploads",
        s3_region="us-east-1",
        cache_control_rules='[{"ext":".mp4","maxAge":123456},{"ext":".html","maxAge":60}]',
        _env_file=None,
    )
