"""
Standings and scorer aggregation engine.
"""

from .engine import (
    MalformedResultError,
    ScorerRow,
    StandingRow,
    compute_scorers,
    compute_standings,
    compute_statistics,
)

__all__ = [
    "MalformedResultError",
    "ScorerRow",
    "StandingRow",
    "compute_scorers",
    "compute_standings",
    "compute_statistics",
]
