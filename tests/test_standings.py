"""
Tests for the standings and top-scorer aggregation engine.
"""

import pytest

from fut_manager.core.models import Player, Result, Scorer, Season
from fut_manager.standings import (
    MalformedResultError,
    compute_scorers,
    compute_standings,
    compute_statistics,
)


def make_result(home, away, score, home_scorers=(), away_scorers=()):
    return Result(
        home_manager=home,
        away_manager=away,
        score=list(score),
        home_scorers=[Scorer(player=p, count=c) for p, c in home_scorers],
        away_scorers=[Scorer(player=p, count=c) for p, c in away_scorers],
    )


def make_player(player_id, short_name, face=None):
    return Player(id=player_id, short_name=short_name, player_face_url=face)


def rows_by_manager(rows):
    return {row.manager: row for row in rows}


class TestComputeStandings:
    def test_empty_input(self):
        assert compute_standings([]) == []
        assert compute_scorers([]) == []

    def test_clear_win(self):
        rows = rows_by_manager(compute_standings([make_result("A", "B", [3, 1])]))

        a = rows["A"]
        assert (a.played, a.won, a.drawn, a.lost, a.points) == (1, 1, 0, 0, 3)
        assert (a.goals_for, a.goals_against, a.goal_difference) == (3, 1, 2)
        assert a.form == ["W"]

        b = rows["B"]
        assert (b.played, b.won, b.drawn, b.lost, b.points) == (1, 0, 0, 1, 0)
        assert (b.goals_for, b.goals_against, b.goal_difference) == (1, 3, -2)
        assert b.form == ["L"]

    def test_draw(self):
        rows = rows_by_manager(compute_standings([make_result("A", "B", [2, 2])]))

        for name in ("A", "B"):
            row = rows[name]
            assert row.played == 1
            assert row.drawn == 1
            assert row.points == 1
            assert row.form == ["D"]

    def test_points_law(self):
        results = [
            make_result("A", "B", [3, 1]),
            make_result("B", "C", [0, 0]),
            make_result("C", "A", [2, 1]),
            make_result("A", "C", [4, 4]),
            make_result("B", "A", [1, 0]),
        ]
        for row in compute_standings(results):
            assert row.points == 3 * row.won + row.drawn
            assert row.played == row.won + row.drawn + row.lost
            assert row.goal_difference == row.goals_for - row.goals_against
            assert len(row.form) == row.played

    def test_form_follows_result_order(self):
        results = [
            make_result("A", "B", [1, 0]),
            make_result("B", "A", [2, 2]),
            make_result("A", "B", [0, 3]),
        ]
        rows = rows_by_manager(compute_standings(results))

        assert rows["A"].form == ["W", "D", "L"]
        assert rows["B"].form == ["L", "D", "W"]

    def test_ranking_order(self):
        results = [
            make_result("A", "B", [2, 0]),
            make_result("A", "C", [1, 0]),
            make_result("B", "C", [1, 0]),
            make_result("C", "B", [1, 0]),
        ]
        rows = compute_standings(results)

        assert rows[0].manager == "A"
        assert rows[0].points == 6
        rest = rows[1:]
        assert sorted(row.manager for row in rest) == ["B", "C"]
        assert all(row.points == 3 for row in rest)

    def test_ties_keep_first_seen_order(self):
        rows = compute_standings([make_result("A", "B", [1, 1]), make_result("C", "D", [0, 0])])

        assert [row.manager for row in rows] == ["A", "B", "C", "D"]

    def test_managers_grouped_by_name(self):
        rows = compute_standings([make_result("A", "B", [1, 0]), make_result("A", "B", [1, 0])])

        assert len(rows) == 2
        assert rows[0].manager == "A"
        assert rows[0].played == 2

    def test_malformed_score_rejected(self):
        results = [make_result("A", "B", [3, 1]), make_result("A", "C", [1])]

        with pytest.raises(MalformedResultError) as excinfo:
            compute_standings(results)
        assert excinfo.value.index == 1

    def test_empty_score_rejected(self):
        with pytest.raises(MalformedResultError):
            compute_standings([make_result("A", "B", [])])

    def test_missing_score_rejected(self):
        season = Season.model_validate({
            "id": "s1",
            "results": [{"home_manager": "A", "away_manager": "B", "score": None}],
        })

        with pytest.raises(MalformedResultError):
            compute_standings(season.results)


class TestComputeScorers:
    def test_aggregates_across_matches(self):
        x = make_player("1", "X", face="https://cdn.example.com/1.png")
        y = make_player("2", "Y")
        results = [
            make_result("A", "B", [2, 0], home_scorers=[(x, 2)]),
            make_result("B", "A", [1, 1], home_scorers=[(y, 1)], away_scorers=[(x, 1)]),
        ]
        rows = compute_scorers(results)

        assert [row.to_dict() for row in rows] == [
            {"player": "X", "manager": "A", "face_image_url": "https://cdn.example.com/1.png", "count": 3},
            {"player": "Y", "manager": "B", "face_image_url": None, "count": 1},
        ]

    def test_manager_comes_from_first_entry(self):
        x = make_player("1", "X")
        results = [
            make_result("A", "B", [1, 0], home_scorers=[(x, 1)]),
            make_result("C", "D", [0, 2], away_scorers=[(x, 2)]),
        ]
        rows = compute_scorers(results)

        assert len(rows) == 1
        assert rows[0].manager == "A"
        assert rows[0].count == 3

    def test_home_scorers_seen_before_away(self):
        x = make_player("1", "X")
        y = make_player("2", "Y")
        rows = compute_scorers([make_result("A", "B", [1, 1], home_scorers=[(x, 1)], away_scorers=[(y, 1)])])

        assert [row.player for row in rows] == ["X", "Y"]

    def test_name_falls_back_to_long_name(self):
        player = Player(id="9", long_name="Long Name Only")
        rows = compute_scorers([make_result("A", "B", [1, 0], home_scorers=[(player, 1)])])

        assert rows[0].player == "Long Name Only"

    def test_scorers_ignore_score_shape(self):
        x = make_player("1", "X")
        rows = compute_scorers([make_result("A", "B", [1], home_scorers=[(x, 1)])])

        assert rows[0].count == 1


class TestComputeStatistics:
    def test_idempotent(self):
        x = make_player("1", "X")
        results = [
            make_result("A", "B", [2, 1], home_scorers=[(x, 2)]),
            make_result("B", "A", [0, 0]),
        ]

        first = compute_statistics(results)
        second = compute_statistics(results)

        assert first == second
        assert compute_standings(results) == compute_standings(results)
        assert compute_scorers(results) == compute_scorers(results)

    def test_payload_shape(self):
        x = make_player("1", "X")
        stats = compute_statistics([make_result("A", "B", [1, 0], home_scorers=[(x, 1)])])

        assert set(stats) == {"standing", "stats"}
        assert stats["standing"][0] == {
            "manager": "A",
            "played": 1,
            "won": 1,
            "drawn": 0,
            "lost": 0,
            "goals_for": 1,
            "goals_against": 0,
            "goal_difference": 1,
            "points": 3,
            "form": ["W"],
        }
        assert stats["stats"][0]["player"] == "X"

    def test_input_not_modified(self):
        results = [make_result("A", "B", [2, 1])]
        before = [r.model_dump() for r in results]

        compute_statistics(results)

        assert [r.model_dump() for r in results] == before

    def test_malformed_aborts_whole_payload(self):
        with pytest.raises(MalformedResultError):
            compute_statistics([make_result("A", "B", [1, 2, 3])])
