"""
Shared types and constants.

Central registry for collection names, cache keys, error messages and the
pack catalogue. Update PACK_REGISTRY when pack prices or odds change.
"""

from dataclasses import dataclass
from enum import IntEnum

# Document collections (one table each)
PLAYERS = "players"
MANAGERS = "managers"
SEASONS = "seasons"
RESULTS = "results"

# Cache keys
TOP_PLAYERS = "topPlayers"

# Client-visible error messages
SEARCH_PLAYER_ERROR = "Search player error"
GET_MANAGER_ERROR = "Get manager error"
GET_PLAYER_ERROR = "Get player error"
GET_SEASON_ERROR = "Get season error"
BALANCE_ERROR = "Balance error"


class ManageType(IntEnum):
    """Direction of a roster or balance change. Anything non-zero adds."""
    remove = 0
    add = 1


class PackType(IntEnum):
    """Purchasable pack tiers."""
    SILVER = 0
    PREMIUM_SILVER = 1
    GOLD = 2
    PREMIUM_GOLD = 3
    ULTIMATE_GOLD = 4
    PRIME_GOLD = 5


@dataclass(frozen=True)
class PackConfig:
    """Price and overall range of a pack tier."""
    price: int
    min_overall: int
    max_overall: int


PACK_REGISTRY: dict[PackType, PackConfig] = {
    PackType.SILVER: PackConfig(price=500, min_overall=65, max_overall=69),
    PackType.PREMIUM_SILVER: PackConfig(price=750, min_overall=70, max_overall=74),
    PackType.GOLD: PackConfig(price=2000, min_overall=75, max_overall=79),
    PackType.PREMIUM_GOLD: PackConfig(price=5000, min_overall=77, max_overall=83),
    PackType.ULTIMATE_GOLD: PackConfig(price=10000, min_overall=81, max_overall=87),
    PackType.PRIME_GOLD: PackConfig(price=15000, min_overall=84, max_overall=99),
}


def get_pack_config(pack_type: PackType) -> PackConfig:
    """Get the configuration for a pack tier."""
    return PACK_REGISTRY[PackType(pack_type)]
