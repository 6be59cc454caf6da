"""
FastAPI dependency injection.

Settings and the object store are built once at startup and stored on
app.state; these dependencies hand them to route handlers. Tests build
the app with their own settings and a fake store.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.cache_control import CacheControlRules
from ..infrastructure.storage.client import ObjectStore


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    """Backend shared by all requests."""
    return request.app.state.object_store


def get_cache_control_rules(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CacheControlRules:
    return settings.cache_control_rules


# ---------------------------------------------------------------------------
# Type Aliases for Cleaner Route Signatures
# ---------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]
CacheControlRulesDep = Annotated[CacheControlRules, Depends(get_cache_control_rules)]
