"""
Player catalog service: filter translation, top players and random draws.

Routers and CLI call this instead of building queries.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Any

from ..api.cache import TTL_FOREVER, HybridCache
from ..core.config import Settings
from ..core.models import Player, PlayerFilter
from ..core.types import TOP_PLAYERS
from ..repositories import Criterion, InvalidFilterError, PlayerQuery, PlayerRepository

logger = logging.getLogger(__name__)

# Filter text fields and the catalog column each one matches against
TEXT_FILTERS = {
    "name": "long_name",
    "club": "club_name",
    "nationality": "nationality_name",
    "league": "league_name",
    "position": "player_positions",
}

NUMERIC_FILTERS = ("age", "overall", "potential")


class PoolExhaustedError(LookupError):
    """No player matches the filter, so nothing can be drawn."""


def _numeric_criterion(field: str, values: list[int]) -> Criterion | None:
    if len(values) == 2:
        return Criterion(field=field, op="range", value=values[0], upper=values[1])
    if len(values) == 1:
        return Criterion(field=field, op="eq", value=values[0])
    return None


def build_query(player_filter: PlayerFilter, limit: int = 0) -> PlayerQuery:
    """
    Translate a search filter into a catalog query.

    Raises:
        InvalidFilterError: If a text field is not a valid pattern
    """
    criteria: list[Criterion] = []

    for attr, column in TEXT_FILTERS.items():
        pattern = getattr(player_filter, attr)
        if not pattern:
            continue
        try:
            re.compile(pattern)
        except re.error as e:
            raise InvalidFilterError(f"Invalid {attr} pattern {pattern!r}: {e}") from e
        criteria.append(Criterion(field=column, op="regex", value=pattern))

    for attr in NUMERIC_FILTERS:
        criterion = _numeric_criterion(attr, getattr(player_filter, attr))
        if criterion:
            criteria.append(criterion)

    return PlayerQuery(criteria=criteria, limit=limit)


def _format_list(values: list[int]) -> str:
    return "[" + " ".join(str(v) for v in values) + "]"


def filter_key(player_filter: PlayerFilter) -> str:
    """
    Build the cache key of a filter.

    Every field takes part, so the empty filter has its own fixed key
    (see ALL_PLAYERS_KEY).
    """
    parts = [
        player_filter.name,
        player_filter.club,
        player_filter.nationality,
        player_filter.league,
        player_filter.position,
        _format_list(player_filter.age),
        _format_list(player_filter.overall),
        _format_list(player_filter.potential),
    ]
    return "-".join(parts)


ALL_PLAYERS_KEY = filter_key(PlayerFilter())


def search_limit(player_filter: PlayerFilter, settings: Settings) -> int:
    """Unfiltered searches are capped; filtered ones are not."""
    return settings.all_players_limit if filter_key(player_filter) == ALL_PLAYERS_KEY else 0


def _dump(players: list[Player]) -> list[dict[str, Any]]:
    return [p.model_dump(mode="json") for p in players]


def search_players(
    players: PlayerRepository,
    player_filter: PlayerFilter,
    settings: Settings,
) -> list[Player]:
    """Search the catalog, best overall first."""
    query = build_query(player_filter, limit=search_limit(player_filter, settings))
    return players.search(query)


def get_top_players(
    players: PlayerRepository,
    cache: HybridCache,
    settings: Settings,
) -> tuple[list[Player], bool]:
    """
    Get the top-rated players, cached without expiry.

    Returns:
        Tuple of (players, cache_hit)
    """
    cached = cache.get(TOP_PLAYERS)
    if cached is not None:
        return [Player.model_validate(p) for p in cached], True

    top_filter = PlayerFilter(
        overall=[settings.top_players_min_overall, settings.top_players_max_overall]
    )
    result = players.search(build_query(top_filter))
    cache.set(_dump(result), TOP_PLAYERS, ttl=TTL_FOREVER)
    return result, False


def draw_random_player(
    players: PlayerRepository,
    cache: HybridCache,
    player_filter: PlayerFilter,
    settings: Settings,
    rng: random.Random | None = None,
) -> tuple[Player, int]:
    """
    Draw one player at random from the pool matching a filter.

    The pool lives in the cache under the filter key and shrinks with each
    draw, so repeated draws with the same filter do not repeat players until
    the pool expires or runs out. An exhausted pool is refilled from the catalog.

    Returns:
        Tuple of (drawn player, players left in the pool)

    Raises:
        PoolExhaustedError: If no catalog player matches the filter
    """
    rng = rng or random.SystemRandom()
    key = filter_key(player_filter)

    cached = cache.get(key)
    if cached:
        pool = [Player.model_validate(p) for p in cached]
    else:
        pool = search_players(players, player_filter, settings)

    if not pool:
        raise PoolExhaustedError(f"No players match filter {key!r}")

    drawn = pool.pop(rng.randrange(len(pool)))
    cache.set(_dump(pool), key, ttl=settings.random_pool_ttl)

    logger.info("Drew %s from pool %r, %d left", drawn.short_name, key, len(pool))
    return drawn, len(pool)
