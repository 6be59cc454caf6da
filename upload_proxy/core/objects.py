"""Object key and content type derivation from request paths."""

import mimetypes
from typing import Optional

from .cache_control import path_extension

mimetypes.init()


def object_key(url_path: str) -> str:
    """Storage key for a request path: the path without leading slashes."""
    return url_path.lstrip("/")


def content_type_for(key: str) -> Optional[str]:
    """
    Guess the MIME type of ``key`` from its extension.

    Exact-case lookup first, then lowercase. Text types are labelled as
    UTF-8. Returns None for unknown or missing extensions.
    """
    extension = path_extension(key)
    if not extension:
        return None

    content_type = mimetypes.types_map.get(extension) or mimetypes.types_map.get(extension.lower())
    if content_type is None:
        return None

    if content_type.startswith("text/") and "charset=" not in content_type:
        content_type = f"{content_type}; charset=utf-8"
    return content_type
