"""
Players router - catalog search, top players and random draws.

Endpoints:
- GET /            - Top-rated players (cached without expiry)
- POST /search     - Filtered catalog search, best overall first
- POST /random     - Draw one player from a shrinking cached pool
"""

import logging

from fastapi import APIRouter, Response

from ..dependencies import CacheDependency, ReposDependency, SettingsDependency
from ..errors import NotFoundError, ValidationError
from ...core.models import PlayerFilter, PlayersResponse
from ...core.types import SEARCH_PLAYER_ERROR
from ...services import (
    InvalidFilterError,
    PoolExhaustedError,
    draw_random_player,
    get_top_players,
    search_players,
)
from ._utils import set_cache_headers

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=PlayersResponse)
def top_players(
    response: Response,
    repos: ReposDependency,
    cache: CacheDependency,
    settings: SettingsDependency,
) -> PlayersResponse:
    """Get the top-rated players of the catalog."""
    players, cache_hit = get_top_players(repos.players, cache, settings)
    set_cache_headers(response, cache_hit)
    return PlayersResponse(count=len(players), players=players)


@router.post("/search", response_model=PlayersResponse)
def search(
    player_filter: PlayerFilter,
    repos: ReposDependency,
    settings: SettingsDependency,
) -> PlayersResponse:
    """
    Search the catalog.

    Text filters are case-insensitive patterns; numeric filters take one
    value (exact) or two values (inclusive range).
    """
    try:
        players = search_players(repos.players, player_filter, settings)
    except InvalidFilterError as e:
        raise ValidationError(message=SEARCH_PLAYER_ERROR, detail=str(e))
    return PlayersResponse(count=len(players), players=players)


@router.post("/random", response_model=PlayersResponse)
def random_player(
    player_filter: PlayerFilter,
    repos: ReposDependency,
    cache: CacheDependency,
    settings: SettingsDependency,
) -> PlayersResponse:
    """
    Draw one random player matching the filter.

    `count` is the number of players left in the pool for this filter.
    """
    try:
        player, remaining = draw_random_player(repos.players, cache, player_filter, settings)
    except InvalidFilterError as e:
        raise ValidationError(message=SEARCH_PLAYER_ERROR, detail=str(e))
    except PoolExhaustedError as e:
        raise NotFoundError(resource="Player", message=SEARCH_PLAYER_ERROR, detail=str(e))
    return PlayersResponse(count=remaining, players=[player])
