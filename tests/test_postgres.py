"""
PostgreSQL integration tests for the document store.

These tests verify:
- Connection pooling and management
- Schema creation
- Repository round trips, including JSONB appends
- Catalog search operators (regex, range, equality)
"""

import os
import uuid
from unittest.mock import patch

import pytest

from fut_manager.core.models import Manager, Player, PlayerFilter, Result, Scorer, Season
from fut_manager.pg_connection import PostgresDB
from fut_manager.repositories import InvalidFilterError, PlayerQuery, get_repositories
from fut_manager.schema import get_table_counts, init_database
from fut_manager.services.players import build_query

# Skip all tests if DATABASE_URL is not set
pytestmark = pytest.mark.skipif(
    not os.getenv("DATABASE_URL"),
    reason="DATABASE_URL environment variable not set",
)


@pytest.fixture
def db(database_url):
    database = PostgresDB(database_url, min_pool_size=1, max_pool_size=2)
    init_database(database)
    yield database
    database.close()


@pytest.fixture
def repos(db):
    return get_repositories(db)


def unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class TestPostgresDBConnection:
    def test_connection_requires_url(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="DATABASE_URL"):
                PostgresDB(None)

    def test_ping(self, db):
        assert db.ping() is True

    def test_fetchone_returns_dict(self, db):
        row = db.fetchone("SELECT %s::int AS value", (42,))
        assert row == {"value": 42}

    def test_transaction_rolls_back(self, db):
        season_id = unique("rollback")
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                conn.execute(
                    "INSERT INTO seasons (id, title) VALUES (%s, %s)", (season_id, "Rolled back")
                )
                raise RuntimeError("abort")

        assert db.fetchone("SELECT id FROM seasons WHERE id = %s", (season_id,)) is None


class TestSchema:
    def test_init_is_idempotent(self, db):
        init_database(db)
        counts = get_table_counts(db)
        assert set(counts) == {"players", "managers", "seasons", "results"}


class TestPlayerRepository:
    def test_upsert_and_search(self, repos):
        club = unique("Club")
        players = [
            Player(id=unique("p"), short_name="A", long_name="Alpha Player", club_name=club, overall=71),
            Player(id=unique("p"), short_name="B", long_name="Beta Player", club_name=club, overall=73, pace=80),
            Player(id=unique("p"), short_name="G", long_name="Gamma Keeper", club_name=club, overall=72),
        ]
        assert repos.players.upsert_many(players) == 3

        found = repos.players.search(build_query(PlayerFilter(club=club.lower())))
        assert [p.short_name for p in found] == ["B", "G", "A"]
        assert found[0].pace == 80

        ranged = repos.players.search(build_query(PlayerFilter(club=club, overall=[71, 72])))
        assert {p.short_name for p in ranged} == {"A", "G"}

    def test_upsert_updates_existing(self, repos):
        player_id = unique("p")
        repos.players.upsert_many([Player(id=player_id, short_name="Old", overall=60)])
        repos.players.upsert_many([Player(id=player_id, short_name="New", overall=61)])

        player = repos.players.get(player_id)
        assert (player.short_name, player.overall) == ("New", 61)

    def test_limit(self, repos):
        assert len(repos.players.search(PlayerQuery(limit=1))) <= 1

    def test_pattern_rejected_by_database(self, repos):
        with pytest.raises(InvalidFilterError):
            repos.players.search(build_query(PlayerFilter(name="(?P<n>x)")))


class TestManagerRepository:
    def test_round_trip(self, repos):
        manager_id = repos.managers.create(Manager(name="Alpha", user_id=unique("user")))
        manager = repos.managers.get(manager_id)

        manager.points = 300
        manager.add_player(Player(id="1", short_name="X"))
        assert repos.managers.replace(manager) == 1

        stored = repos.managers.get(manager_id)
        assert stored.points == 300
        assert [p.id for p in stored.players] == ["1"]
        assert repos.managers.get_by_user_id(manager.user_id).id == manager_id

    def test_missing(self, repos):
        assert repos.managers.get("missing") is None
        assert repos.managers.replace(Manager(id="missing", name="Ghost")) == 0

    def test_append_result(self, repos):
        manager_id = repos.managers.create(Manager(name="Alpha"))
        for score in ([1, 0], [2, 2]):
            repos.managers.append_result(manager_id, Result(home_manager="Alpha", score=score))

        assert [r.score for r in repos.managers.get(manager_id).results] == [[1, 0], [2, 2]]

    def test_replace_keeps_appended_results(self, repos):
        manager_id = repos.managers.create(Manager(name="Alpha"))
        stale = repos.managers.get(manager_id)

        repos.managers.append_result(manager_id, Result(home_manager="Alpha", score=[1, 0]))
        stale.points = 50
        assert repos.managers.replace(stale) == 1

        stored = repos.managers.get(manager_id)
        assert stored.points == 50
        assert [r.score for r in stored.results] == [[1, 0]]


class TestSeasonAndResultRepositories:
    def test_season_results(self, repos):
        season_id = repos.seasons.create(Season(type="league", title=unique("Season")))
        result = Result(
            season=season_id,
            home_manager="A",
            away_manager="B",
            score=[3, 1],
            home_scorers=[Scorer(player=Player(id="1", short_name="X"), count=3)],
        )
        result.id = repos.results.create(result)
        repos.seasons.append_result(season_id, result)

        season = repos.seasons.get(season_id)
        assert len(season.results) == 1
        assert season.results[0].home_scorers[0].player.short_name == "X"

        stored = repos.results.list_for_season(season_id)
        assert [r.id for r in stored] == [result.id]

        assert season_id in {s.id for s in repos.seasons.list()}
