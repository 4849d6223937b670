"""
Pytest configuration for fut-manager tests.

API tests run against an app built with in-memory repositories and the
in-memory cache backend, so they need neither PostgreSQL nor Redis.
"""

import os
import re
import uuid
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from fut_manager.api.cache import HybridCache
from fut_manager.api.main import create_app
from fut_manager.core.config import Settings
from fut_manager.core.models import Manager, Player, Result, Season, SeasonSummary
from fut_manager.repositories import (
    ManagerRepository,
    PlayerQuery,
    PlayerRepository,
    RepositorySet,
    ResultRepository,
    SeasonRepository,
)


def pytest_configure(config):
    """Load DATABASE_URL from a local .env file if not already set."""
    env_file = os.path.join(os.path.dirname(__file__), "..", ".env")
    if os.path.exists(env_file):
        with open(env_file) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip().strip('"').strip("'")
                    if key not in os.environ:
                        os.environ[key] = value


# =============================================================================
# In-memory repositories
# =============================================================================


def _matches(player: Player, query: PlayerQuery) -> bool:
    for criterion in query.criteria:
        value = getattr(player, criterion.field)
        if value is None:
            return False
        if criterion.op == "regex":
            if not re.search(criterion.value, str(value), re.IGNORECASE):
                return False
        elif criterion.op == "range":
            if not criterion.value <= value <= criterion.upper:
                return False
        elif value != criterion.value:
            return False
    return True


class InMemoryPlayerRepository(PlayerRepository):
    def __init__(self):
        self.docs: dict[str, Player] = {}

    def get(self, player_id: str) -> Optional[Player]:
        player = self.docs.get(player_id)
        return player.model_copy(deep=True) if player else None

    def search(self, query: PlayerQuery) -> list[Player]:
        found = [p.model_copy(deep=True) for p in self.docs.values() if _matches(p, query)]
        if query.order_by_overall:
            found.sort(key=lambda p: (p.overall is None, -(p.overall or 0), p.id))
        if query.limit:
            found = found[: query.limit]
        return found

    def upsert_many(self, players: list[Player]) -> int:
        for player in players:
            self.docs[player.id] = player.model_copy(deep=True)
        return len(players)

    def count(self) -> int:
        return len(self.docs)


class InMemoryManagerRepository(ManagerRepository):
    def __init__(self):
        self.docs: dict[str, Manager] = {}

    def create(self, manager: Manager) -> str:
        manager_id = uuid.uuid4().hex
        self.docs[manager_id] = manager.model_copy(update={"id": manager_id}, deep=True)
        return manager_id

    def list(self) -> list[Manager]:
        return [m.model_copy(deep=True) for m in self.docs.values()]

    def get(self, manager_id: str) -> Optional[Manager]:
        manager = self.docs.get(manager_id)
        return manager.model_copy(deep=True) if manager else None

    def get_by_user_id(self, user_id: str) -> Optional[Manager]:
        for manager in self.docs.values():
            if manager.user_id == user_id:
                return manager.model_copy(deep=True)
        return None

    def replace(self, manager: Manager) -> int:
        stored = self.docs.get(manager.id)
        if stored is None:
            return 0
        self.docs[manager.id] = manager.model_copy(
            update={"results": stored.results}, deep=True
        )
        return 1

    def append_result(self, manager_id: str, result: Result) -> int:
        manager = self.docs.get(manager_id)
        if manager is None:
            return 0
        manager.results.append(result.model_copy(deep=True))
        return 1


class InMemorySeasonRepository(SeasonRepository):
    def __init__(self):
        self.docs: dict[str, Season] = {}

    def create(self, season: Season) -> str:
        season_id = uuid.uuid4().hex
        self.docs[season_id] = season.model_copy(update={"id": season_id}, deep=True)
        return season_id

    def list(self) -> list[SeasonSummary]:
        return [SeasonSummary(id=s.id, type=s.type, title=s.title) for s in self.docs.values()]

    def get(self, season_id: str) -> Optional[Season]:
        season = self.docs.get(season_id)
        return season.model_copy(deep=True) if season else None

    def append_result(self, season_id: str, result: Result) -> int:
        season = self.docs.get(season_id)
        if season is None:
            return 0
        season.results.append(result.model_copy(deep=True))
        return 1


class InMemoryResultRepository(ResultRepository):
    def __init__(self):
        self.docs: dict[str, Result] = {}

    def create(self, result: Result) -> str:
        result_id = uuid.uuid4().hex
        self.docs[result_id] = result.model_copy(update={"id": result_id}, deep=True)
        return result_id

    def list_for_season(self, season_id: str) -> list[Result]:
        return [r.model_copy(deep=True) for r in self.docs.values() if r.season == season_id]


# =============================================================================
# Fixtures
# =============================================================================


CATALOG: list[dict[str, Any]] = [
    {"id": "158023", "short_name": "L. Messi", "long_name": "Lionel Andrés Messi Cuccittini",
     "club_name": "Paris Saint-Germain", "league_name": "French Ligue 1",
     "nationality_name": "Argentina", "player_positions": "RW, ST, CF",
     "age": 34, "overall": 93, "potential": 93, "pace": 85,
     "player_face_url": "https://cdn.example.com/158023.png"},
    {"id": "231747", "short_name": "K. Mbappé", "long_name": "Kylian Mbappé Lottin",
     "club_name": "Paris Saint-Germain", "league_name": "French Ligue 1",
     "nationality_name": "France", "player_positions": "ST, LW",
     "age": 22, "overall": 91, "potential": 95, "pace": 97},
    {"id": "203376", "short_name": "V. van Dijk", "long_name": "Virgil van Dijk",
     "club_name": "Liverpool", "league_name": "English Premier League",
     "nationality_name": "Netherlands", "player_positions": "CB",
     "age": 29, "overall": 89, "potential": 89, "pace": 78},
    {"id": "202126", "short_name": "H. Kane", "long_name": "Harry Kane",
     "club_name": "Tottenham Hotspur", "league_name": "English Premier League",
     "nationality_name": "England", "player_positions": "ST",
     "age": 27, "overall": 90, "potential": 90, "pace": 70},
    {"id": "246669", "short_name": "B. Saka", "long_name": "Bukayo Saka",
     "club_name": "Arsenal", "league_name": "English Premier League",
     "nationality_name": "England", "player_positions": "LW, RW",
     "age": 19, "overall": 86, "potential": 88, "pace": 84},
    {"id": "212831", "short_name": "Alisson", "long_name": "Alisson Ramsés Becker",
     "club_name": "Liverpool", "league_name": "English Premier League",
     "nationality_name": "Brazil", "player_positions": "GK",
     "age": 28, "overall": 89, "potential": 90, "pace": None},
    {"id": "250001", "short_name": "J. Smith", "long_name": "Jack Smith",
     "club_name": "Luton Town", "league_name": "English League Championship",
     "nationality_name": "England", "player_positions": "CM",
     "age": 24, "overall": 67, "potential": 70},
    {"id": "250002", "short_name": "T. Müller", "long_name": "Tom Müller",
     "club_name": "Hansa Rostock", "league_name": "German 2. Bundesliga",
     "nationality_name": "Germany", "player_positions": "CB",
     "age": 26, "overall": 68, "potential": 69},
]


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def repos():
    repositories = RepositorySet(
        players=InMemoryPlayerRepository(),
        managers=InMemoryManagerRepository(),
        seasons=InMemorySeasonRepository(),
        results=InMemoryResultRepository(),
    )
    repositories.players.upsert_many([Player.model_validate(doc) for doc in CATALOG])
    return repositories


@pytest.fixture
def cache():
    return HybridCache(redis_url=None, default_ttl=60)


@pytest.fixture
def client(settings, repos, cache):
    app = create_app(settings=settings, repositories=repos, cache=cache)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api(settings):
    """API path prefix."""
    return settings.api_prefix


@pytest.fixture(scope="session")
def database_url():
    """Get the PostgreSQL URL for integration tests."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not set")
    return url
