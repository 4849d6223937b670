"""
Pack service: spend points on a pack and add a random player to the roster.

Each pack tier draws from an overall-rating band. The candidate pool size
is itself random (100 to 1000 players, in steps of 100) so the best players
of a band are not always in reach.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ..core.models import Manager, Player
from ..core.types import PackType, get_pack_config
from ..repositories import Criterion, PlayerQuery, RepositorySet
from .managers import InsufficientPointsError
from .players import PoolExhaustedError

logger = logging.getLogger(__name__)

POOL_STEP = 100
POOL_MAX_STEPS = 10


@dataclass
class PackOpening:
    """Outcome of opening a pack."""

    manager: Manager
    player: Player
    pool_size: int
    position: int

    @property
    def message(self) -> str:
        return (
            f"Drew player {self.position} of {self.pool_size}: "
            f"{self.player.short_name or self.player.long_name}"
        )


def build_pack_query(pack_type: PackType, rng: random.Random) -> PlayerQuery:
    """Build the candidate pool query for a pack tier."""
    config = get_pack_config(pack_type)
    limit = rng.randint(1, POOL_MAX_STEPS) * POOL_STEP
    return PlayerQuery(
        criteria=[
            Criterion(field="overall", op="range", value=config.min_overall, upper=config.max_overall)
        ],
        limit=limit,
        order_by_overall=False,
    )


def open_pack(
    repos: RepositorySet,
    manager: Manager,
    pack_type: PackType,
    rng: random.Random | None = None,
) -> PackOpening:
    """
    Charge the manager for a pack and add a random player from its band.

    Raises:
        InsufficientPointsError: If the manager cannot afford the pack
        PoolExhaustedError: If the catalog has no player in the band
    """
    rng = rng or random.SystemRandom()
    config = get_pack_config(pack_type)

    if manager.points < config.price:
        raise InsufficientPointsError(manager, config.price)

    pool = repos.players.search(build_pack_query(pack_type, rng))
    if not pool:
        raise PoolExhaustedError(f"No players for pack {PackType(pack_type).name}")

    index = rng.randrange(len(pool))
    player = pool[index]

    manager.points -= config.price
    manager.add_player(player)
    modified = repos.managers.replace(manager)

    logger.info(
        "Manager %s opened %s pack: %s (%d points left, modified=%d)",
        manager.id, PackType(pack_type).name, player.short_name, manager.points, modified,
    )
    return PackOpening(manager=manager, player=player, pool_size=len(pool), position=index)
