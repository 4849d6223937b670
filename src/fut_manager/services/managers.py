"""
Manager service: creation, roster changes and point balance.
"""

from __future__ import annotations

import logging

from ..core.models import CreateManagerRequest, Manager, Player
from ..core.types import ManageType
from ..repositories import ManagerRepository

logger = logging.getLogger(__name__)


class InsufficientPointsError(ValueError):
    """A manager tried to spend more points than they have."""

    def __init__(self, manager: Manager, required: int):
        self.manager = manager
        self.required = required
        super().__init__(
            f"Manager {manager.id} has {manager.points} points, {required} required"
        )


def create_manager(managers: ManagerRepository, request: CreateManagerRequest) -> Manager:
    """Create a manager with no players, no results and a zero balance."""
    manager = Manager(name=request.name, user_id=request.user_id, email=request.email)
    manager.id = managers.create(manager)
    logger.info("Created manager %s (%s)", manager.id, manager.name)
    return manager


def change_roster(
    managers: ManagerRepository,
    manager: Manager,
    player: Player,
    manage_type: int,
) -> Manager:
    """Remove the player when manage_type is 0, otherwise add it."""
    if manage_type == ManageType.remove:
        changed = manager.remove_player(player.id)
    else:
        changed = manager.add_player(player)

    modified = managers.replace(manager)
    logger.info(
        "Roster update for manager %s: player %s changed=%s, modified=%d",
        manager.id, player.id, changed, modified,
    )
    return manager


def change_points(
    managers: ManagerRepository,
    manager: Manager,
    point: int,
    manage_type: int,
) -> Manager:
    """
    Spend points when manage_type is 0, otherwise add them.

    Raises:
        InsufficientPointsError: If spending more than the balance
    """
    if manage_type == ManageType.remove and manager.points < point:
        raise InsufficientPointsError(manager, point)

    manager.manage_points(point, manage_type)
    modified = managers.replace(manager)
    logger.info(
        "Balance update for manager %s: now %d points, modified=%d",
        manager.id, manager.points, modified,
    )
    return manager
