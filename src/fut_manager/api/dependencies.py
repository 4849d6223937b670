"""
Dependency injection for API endpoints.

The database pool, repositories and cache are built once by the application
lifespan (or passed to create_app by tests) and stored on app.state.
Handlers receive them through these dependencies instead of reaching for
module-level globals.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..core.config import Settings
from ..repositories import RepositorySet
from .cache import HybridCache


def get_repositories(request: Request) -> RepositorySet:
    """Dependency that provides the repository set."""
    return request.app.state.repositories


def get_cache(request: Request) -> HybridCache:
    """Dependency that provides the shared cache."""
    return request.app.state.cache


def get_app_settings(request: Request) -> Settings:
    """Dependency that provides the settings the app was built with."""
    return request.app.state.settings


ReposDependency = Annotated[RepositorySet, Depends(get_repositories)]
CacheDependency = Annotated[HybridCache, Depends(get_cache)]
SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
