"""
Base repository protocols.

Defines abstract interfaces for document persistence, so handlers and
services never depend on a concrete database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from ..core.models import Manager, Player, Result, Season, SeasonSummary


class InvalidFilterError(ValueError):
    """A text filter is not a valid pattern."""


@dataclass(frozen=True)
class Criterion:
    """
    One condition on a player catalog field.

    op:
        eq    - value equals `value`
        range - `value` <= field <= `upper` (inclusive)
        regex - case-insensitive pattern match on a text field
    """

    field: str
    op: Literal["eq", "range", "regex"]
    value: Any
    upper: Any = None


@dataclass
class PlayerQuery:
    """A player catalog query: all criteria must hold."""

    criteria: list[Criterion] = field(default_factory=list)
    limit: int = 0  # 0 means no limit
    order_by_overall: bool = True


class PlayerRepository(ABC):
    """Abstract interface for the player catalog."""

    @abstractmethod
    def get(self, player_id: str) -> Optional[Player]:
        """
        Find a player by ID.

        Returns:
            Player, or None if not found
        """
        ...

    @abstractmethod
    def search(self, query: PlayerQuery) -> list[Player]:
        """
        Find players matching every criterion of the query.

        Results are ordered by overall rating (best first) when
        query.order_by_overall is set, and capped at query.limit when non-zero.

        Raises:
            InvalidFilterError: If the store rejects a text pattern
        """
        ...

    @abstractmethod
    def upsert_many(self, players: list[Player]) -> int:
        """
        Insert or update catalog players by ID.

        Returns:
            Number of players written
        """
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class ManagerRepository(ABC):
    """Abstract interface for manager documents."""

    @abstractmethod
    def create(self, manager: Manager) -> str:
        """
        Insert a new manager document.

        Returns:
            Generated manager ID
        """
        ...

    @abstractmethod
    def list(self) -> list[Manager]:
        ...

    @abstractmethod
    def get(self, manager_id: str) -> Optional[Manager]:
        ...

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Optional[Manager]:
        """Find a manager by the external (auth provider) user ID."""
        ...

    @abstractmethod
    def replace(self, manager: Manager) -> int:
        """
        Replace a stored manager document with the given one.

        The embedded result list is left untouched; results only change
        through append_result.

        Returns:
            Number of documents modified (0 or 1)
        """
        ...

    @abstractmethod
    def append_result(self, manager_id: str, result: Result) -> int:
        """Append a result to the manager's embedded result list."""
        ...


class SeasonRepository(ABC):
    """Abstract interface for season documents."""

    @abstractmethod
    def create(self, season: Season) -> str:
        ...

    @abstractmethod
    def list(self) -> list[SeasonSummary]:
        ...

    @abstractmethod
    def get(self, season_id: str) -> Optional[Season]:
        ...

    @abstractmethod
    def append_result(self, season_id: str, result: Result) -> int:
        """Append a result to the season's embedded result list."""
        ...


class ResultRepository(ABC):
    """Abstract interface for the standalone result collection."""

    @abstractmethod
    def create(self, result: Result) -> str:
        ...

    @abstractmethod
    def list_for_season(self, season_id: str) -> list[Result]:
        ...


@dataclass
class RepositorySet:
    """
    Collection of all repositories.

    Provides convenient access to all repository implementations.
    """
    players: PlayerRepository
    managers: ManagerRepository
    seasons: SeasonRepository
    results: ResultRepository
