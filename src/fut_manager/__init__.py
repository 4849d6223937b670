"""
FUT Manager

Backend for a fantasy football manager game. Managers collect catalog
players (bought in packs or drawn at random), play fixtures against each
other within seasons, and follow a league table and top-scorer list that
are rebuilt from the recorded results on every request.

Usage:
    from fut_manager import compute_statistics
    from fut_manager.api.main import create_app

    app = create_app()
    stats = compute_statistics(season.results)
"""

from .core.models import Manager, Player, Result, Scorer, Season
from .standings import (
    MalformedResultError,
    ScorerRow,
    StandingRow,
    compute_scorers,
    compute_standings,
    compute_statistics,
)

__version__ = "1.0.0"

__all__ = [
    "MalformedResultError",
    "Manager",
    "Player",
    "Result",
    "Scorer",
    "ScorerRow",
    "Season",
    "StandingRow",
    "compute_scorers",
    "compute_standings",
    "compute_statistics",
]
