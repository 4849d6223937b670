"""
Service layer. Routers and CLI call these instead of touching storage directly.
"""

from .managers import InsufficientPointsError, change_points, change_roster, create_manager
from .packs import PackOpening, open_pack
from .players import (
    InvalidFilterError,
    PoolExhaustedError,
    draw_random_player,
    get_top_players,
    search_players,
)
from .results import MissingEntityError, record_result

__all__ = [
    "InsufficientPointsError",
    "InvalidFilterError",
    "MissingEntityError",
    "PackOpening",
    "PoolExhaustedError",
    "change_points",
    "change_roster",
    "create_manager",
    "draw_random_player",
    "get_top_players",
    "open_pack",
    "record_result",
    "search_players",
]
