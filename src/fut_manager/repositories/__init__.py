"""
Repository abstraction layer.

Provides database-agnostic interfaces for document persistence.

Usage:
    from fut_manager.repositories import get_repositories

    repos = get_repositories(db)
    manager = repos.managers.get(manager_id)
    repos.seasons.append_result(season_id, result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    Criterion,
    InvalidFilterError,
    ManagerRepository,
    PlayerQuery,
    PlayerRepository,
    RepositorySet,
    ResultRepository,
    SeasonRepository,
)

if TYPE_CHECKING:
    from ..pg_connection import PostgresDB

__all__ = [
    "Criterion",
    "InvalidFilterError",
    "ManagerRepository",
    "PlayerQuery",
    "PlayerRepository",
    "RepositorySet",
    "ResultRepository",
    "SeasonRepository",
    "get_repositories",
]


def get_repositories(db: "PostgresDB") -> RepositorySet:
    """
    Get repository set for the given database connection.

    Args:
        db: Database connection

    Returns:
        RepositorySet with PostgreSQL implementations
    """
    from .postgres import (
        PostgresManagerRepository,
        PostgresPlayerRepository,
        PostgresResultRepository,
        PostgresSeasonRepository,
    )

    return RepositorySet(
        players=PostgresPlayerRepository(db),
        managers=PostgresManagerRepository(db),
        seasons=PostgresSeasonRepository(db),
        results=PostgresResultRepository(db),
    )
