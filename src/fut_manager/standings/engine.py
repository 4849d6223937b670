"""
Standings and top-scorer aggregation for a season.

The season's result history is the source of truth: both tables are rebuilt
from scratch on every call by replaying the results in order.

Features:
- League table per manager (played, W/D/L, goals, points, form)
- Top-scorer list per player
- Pure functions over the input list (no I/O, no shared state)

Ranking:
- Standings are ordered by points, scorers by goal count, both descending.
- Ties keep first-seen order (stable sort over an insertion-ordered dict).

Rows are keyed by manager/player display name, so two managers sharing a
name are merged into one row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ..core.models import Result

POINTS_WIN = 3
POINTS_DRAW = 1

WIN = "W"
DRAW = "D"
LOSS = "L"


class MalformedResultError(ValueError):
    """A result whose score is not exactly [home_goals, away_goals]."""

    def __init__(self, result: Result, index: int):
        self.result = result
        self.index = index
        super().__init__(
            f"Result {result.id or index} has malformed score {result.score!r}: "
            "expected exactly two values"
        )


@dataclass
class StandingRow:
    """A manager's accumulated season record."""

    manager: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    form: list[str] = field(default_factory=list)

    @classmethod
    def from_match(cls, manager: str, scored: int, conceded: int) -> "StandingRow":
        """Build the row contribution of a single match from one side's perspective."""
        if scored > conceded:
            outcome, won, drawn, lost, points = WIN, 1, 0, 0, POINTS_WIN
        elif scored < conceded:
            outcome, won, drawn, lost, points = LOSS, 0, 0, 1, 0
        else:
            outcome, won, drawn, lost, points = DRAW, 0, 1, 0, POINTS_DRAW

        return cls(
            manager=manager,
            played=1,
            won=won,
            drawn=drawn,
            lost=lost,
            goals_for=scored,
            goals_against=conceded,
            goal_difference=scored - conceded,
            points=points,
            form=[outcome],
        )

    def merge(self, other: "StandingRow") -> None:
        """Add another row's counters into this one and append its form."""
        self.played += other.played
        self.won += other.won
        self.drawn += other.drawn
        self.lost += other.lost
        self.goals_for += other.goals_for
        self.goals_against += other.goals_against
        self.goal_difference += other.goal_difference
        self.points += other.points
        self.form.extend(other.form)

    def to_dict(self) -> dict[str, Any]:
        return {
            "manager": self.manager,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
            "form": list(self.form),
        }


@dataclass
class ScorerRow:
    """A player's accumulated goal tally."""

    player: str
    manager: str
    face_image_url: str | None = None
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "player": self.player,
            "manager": self.manager,
            "face_image_url": self.face_image_url,
            "count": self.count,
        }


def _check_score(result: Result, index: int) -> tuple[int, int]:
    if result.score is None or len(result.score) != 2:
        raise MalformedResultError(result, index)
    return result.score[0], result.score[1]


def _accumulate(table: dict[str, StandingRow], row: StandingRow) -> None:
    existing = table.get(row.manager)
    if existing is None:
        table[row.manager] = row
    else:
        existing.merge(row)


def compute_standings(results: Iterable[Result]) -> list[StandingRow]:
    """
    Build the league table for a list of results.

    Args:
        results: Results in the order they were recorded

    Returns:
        Standing rows sorted by points, descending

    Raises:
        MalformedResultError: If any result's score does not have two values.
            No partial table is returned.
    """
    table: dict[str, StandingRow] = {}

    for index, result in enumerate(results):
        home_goals, away_goals = _check_score(result, index)
        _accumulate(table, StandingRow.from_match(result.home_manager, home_goals, away_goals))
        _accumulate(table, StandingRow.from_match(result.away_manager, away_goals, home_goals))

    return sorted(table.values(), key=lambda row: row.points, reverse=True)


def compute_scorers(results: Iterable[Result]) -> list[ScorerRow]:
    """
    Build the top-scorer list for a list of results.

    Home scorers are processed before away scorers. A player's manager and
    face image come from the first entry seen for that player.

    Args:
        results: Results in the order they were recorded

    Returns:
        Scorer rows sorted by goal count, descending
    """
    tally: dict[str, ScorerRow] = {}

    for result in results:
        sides = (
            (result.home_manager, result.home_scorers),
            (result.away_manager, result.away_scorers),
        )
        for manager, scorers in sides:
            for scorer in scorers:
                name = scorer.player.short_name or scorer.player.long_name or scorer.player.id
                row = tally.get(name)
                if row is not None:
                    row.count += scorer.count
                else:
                    tally[name] = ScorerRow(
                        player=name,
                        manager=manager,
                        face_image_url=scorer.player.player_face_url,
                        count=scorer.count,
                    )

    return sorted(tally.values(), key=lambda row: row.count, reverse=True)


def compute_statistics(results: list[Result]) -> dict[str, list[dict[str, Any]]]:
    """
    Build the statistics payload for a season.

    Standings are computed first so a malformed result aborts the whole
    response.
    """
    standing = compute_standings(results)
    stats = compute_scorers(results)
    return {
        "standing": [row.to_dict() for row in standing],
        "stats": [row.to_dict() for row in stats],
    }
