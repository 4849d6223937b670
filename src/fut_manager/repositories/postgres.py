"""
PostgreSQL repository implementations.

Stores each collection in its own table. Embedded document arrays are
JSONB columns; appends use the JSONB concatenation operator so concurrent
result recordings do not overwrite each other, and manager replaces
never write the result list.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any, Optional

from psycopg import errors, sql
from psycopg.types.json import Jsonb

from ..core.models import Manager, Player, Result, Season, SeasonSummary
from ..core.types import MANAGERS, PLAYERS, RESULTS, SEASONS
from .base import (
    InvalidFilterError,
    ManagerRepository,
    PlayerQuery,
    PlayerRepository,
    ResultRepository,
    SeasonRepository,
)

if TYPE_CHECKING:
    from ..pg_connection import PostgresDB

logger = logging.getLogger(__name__)

PLAYER_COLUMNS: list[str] = list(Player.model_fields)
PLAYER_JSONB_COLUMNS = {"pace", "passing", "physic", "shooting", "dribbling", "defending"}


def new_id() -> str:
    """Generate a document ID."""
    return uuid.uuid4().hex


def _dump(model: Any) -> Any:
    return Jsonb(model.model_dump(mode="json"))


def _dump_list(models: list[Any]) -> Jsonb:
    return Jsonb([m.model_dump(mode="json") for m in models])


class PostgresPlayerRepository(PlayerRepository):
    """PostgreSQL implementation for the player catalog."""

    def __init__(self, db: "PostgresDB"):
        self.db = db

    def get(self, player_id: str) -> Optional[Player]:
        row = self.db.fetchone(f"SELECT * FROM {PLAYERS} WHERE id = %s", (player_id,))
        return Player.model_validate(row) if row else None

    def _build_where(self, query: PlayerQuery) -> tuple[sql.Composable, list[Any]]:
        clauses: list[sql.Composable] = []
        params: list[Any] = []

        for criterion in query.criteria:
            if criterion.field not in PLAYER_COLUMNS:
                raise ValueError(f"Unknown player field: {criterion.field}")
            col = sql.Identifier(criterion.field)

            if criterion.op == "eq":
                clauses.append(sql.SQL("{} = %s").format(col))
                params.append(criterion.value)
            elif criterion.op == "range":
                clauses.append(sql.SQL("{} BETWEEN %s AND %s").format(col))
                params.extend([criterion.value, criterion.upper])
            elif criterion.op == "regex":
                clauses.append(sql.SQL("{} ~* %s").format(col))
                params.append(criterion.value)
            else:
                raise ValueError(f"Unknown criterion operator: {criterion.op}")

        if not clauses:
            return sql.SQL(""), params
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    def search(self, query: PlayerQuery) -> list[Player]:
        where, params = self._build_where(query)
        stmt = sql.SQL("SELECT * FROM {}").format(sql.Identifier(PLAYERS)) + where

        if query.order_by_overall:
            stmt += sql.SQL(" ORDER BY overall DESC NULLS LAST, id")
        if query.limit > 0:
            stmt += sql.SQL(" LIMIT %s")
            params.append(query.limit)

        try:
            rows = self.db.fetchall(stmt, tuple(params))
        except errors.InvalidRegularExpression as e:
            raise InvalidFilterError(f"Invalid pattern: {e}") from e
        return [Player.model_validate(row) for row in rows]

    def upsert_many(self, players: list[Player]) -> int:
        if not players:
            return 0

        columns = sql.SQL(", ").join(sql.Identifier(c) for c in PLAYER_COLUMNS)
        placeholders = sql.SQL(", ").join(sql.Placeholder() for _ in PLAYER_COLUMNS)
        updates = sql.SQL(", ").join(
            sql.SQL("{0} = excluded.{0}").format(sql.Identifier(c))
            for c in PLAYER_COLUMNS
            if c != "id"
        )
        stmt = sql.SQL(
            "INSERT INTO {} ({}) VALUES ({}) ON CONFLICT (id) DO UPDATE SET {}"
        ).format(sql.Identifier(PLAYERS), columns, placeholders, updates)

        params_list = []
        for player in players:
            data = player.model_dump()
            params_list.append(tuple(
                Jsonb(data[c]) if c in PLAYER_JSONB_COLUMNS and data[c] is not None else data[c]
                for c in PLAYER_COLUMNS
            ))

        self.db.executemany(stmt, params_list)
        logger.info("Upserted %d catalog players", len(params_list))
        return len(params_list)

    def count(self) -> int:
        row = self.db.fetchone(f"SELECT COUNT(*) AS count FROM {PLAYERS}")
        return row["count"] if row else 0


class PostgresManagerRepository(ManagerRepository):
    """PostgreSQL implementation for manager documents."""

    def __init__(self, db: "PostgresDB"):
        self.db = db

    def create(self, manager: Manager) -> str:
        manager_id = new_id()
        self.db.execute(
            f"""
            INSERT INTO {MANAGERS} (id, name, user_id, email, points, players, results)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (
                manager_id,
                manager.name,
                manager.user_id,
                manager.email,
                manager.points,
                _dump_list(manager.players),
                _dump_list(manager.results),
            ),
        )
        return manager_id

    def list(self) -> list[Manager]:
        rows = self.db.fetchall(f"SELECT * FROM {MANAGERS} ORDER BY created_at, id")
        return [Manager.model_validate(row) for row in rows]

    def get(self, manager_id: str) -> Optional[Manager]:
        row = self.db.fetchone(f"SELECT * FROM {MANAGERS} WHERE id = %s", (manager_id,))
        return Manager.model_validate(row) if row else None

    def get_by_user_id(self, user_id: str) -> Optional[Manager]:
        row = self.db.fetchone(
            f"SELECT * FROM {MANAGERS} WHERE user_id = %s ORDER BY created_at LIMIT 1",
            (user_id,),
        )
        return Manager.model_validate(row) if row else None

    def replace(self, manager: Manager) -> int:
        return self.db.execute(
            f"""
            UPDATE {MANAGERS}
            SET name = %s, user_id = %s, email = %s, points = %s, players = %s
            WHERE id = %s
            """,
            (
                manager.name,
                manager.user_id,
                manager.email,
                manager.points,
                _dump_list(manager.players),
                manager.id,
            ),
        )

    def append_result(self, manager_id: str, result: Result) -> int:
        return self.db.execute(
            f"UPDATE {MANAGERS} SET results = results || %s WHERE id = %s",
            (_dump_list([result]), manager_id),
        )


class PostgresSeasonRepository(SeasonRepository):
    """PostgreSQL implementation for season documents."""

    def __init__(self, db: "PostgresDB"):
        self.db = db

    def create(self, season: Season) -> str:
        season_id = new_id()
        self.db.execute(
            f"INSERT INTO {SEASONS} (id, type, title, results) VALUES (%s, %s, %s, %s)",
            (season_id, season.type, season.title, _dump_list(season.results)),
        )
        return season_id

    def list(self) -> list[SeasonSummary]:
        rows = self.db.fetchall(
            f"SELECT id, type, title FROM {SEASONS} ORDER BY created_at, id"
        )
        return [SeasonSummary.model_validate(row) for row in rows]

    def get(self, season_id: str) -> Optional[Season]:
        row = self.db.fetchone(f"SELECT * FROM {SEASONS} WHERE id = %s", (season_id,))
        return Season.model_validate(row) if row else None

    def append_result(self, season_id: str, result: Result) -> int:
        return self.db.execute(
            f"UPDATE {SEASONS} SET results = results || %s WHERE id = %s",
            (_dump_list([result]), season_id),
        )


class PostgresResultRepository(ResultRepository):
    """PostgreSQL implementation for the result collection."""

    def __init__(self, db: "PostgresDB"):
        self.db = db

    def create(self, result: Result) -> str:
        result_id = new_id()
        stored = result.model_copy(update={"id": result_id})
        self.db.execute(
            f"INSERT INTO {RESULTS} (id, season, doc) VALUES (%s, %s, %s)",
            (result_id, result.season, _dump(stored)),
        )
        return result_id

    def list_for_season(self, season_id: str) -> list[Result]:
        rows = self.db.fetchall(
            f"SELECT doc FROM {RESULTS} WHERE season = %s ORDER BY created_at, id",
            (season_id,),
        )
        return [Result.model_validate(row["doc"]) for row in rows]
