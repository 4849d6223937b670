"""
Managers router - accounts, rosters and point balances.

Endpoints:
- POST /                 - Create a manager
- GET /                  - List managers
- GET /{manager_id}      - Get one manager
- GET /user/{user_id}    - Get a manager by external user ID
- POST /player           - Add (type != 0) or remove (type 0) a roster player
- POST /point            - Add (type != 0) or spend (type 0) points
"""

import logging

from fastapi import APIRouter, status

from ..dependencies import ReposDependency
from ..errors import BalanceError, NotFoundError
from ...core.models import (
    CreateManagerRequest,
    Manager,
    ManagePlayerRequest,
    ManagePointRequest,
)
from ...core.types import GET_MANAGER_ERROR, GET_PLAYER_ERROR
from ...repositories import RepositorySet
from ...services import InsufficientPointsError, change_points, change_roster, create_manager

logger = logging.getLogger(__name__)

router = APIRouter()


def load_manager(repos: RepositorySet, manager_id: str) -> Manager:
    """Get a manager or raise a 404."""
    manager = repos.managers.get(manager_id)
    if manager is None:
        raise NotFoundError(resource="Manager", identifier=manager_id, message=GET_MANAGER_ERROR)
    return manager


@router.post("", response_model=Manager, status_code=status.HTTP_201_CREATED)
def create(body: CreateManagerRequest, repos: ReposDependency) -> Manager:
    """Create a manager with an empty roster and a zero balance."""
    manager = create_manager(repos.managers, body)
    return load_manager(repos, manager.id)


@router.get("", response_model=list[Manager])
def list_managers(repos: ReposDependency) -> list[Manager]:
    return repos.managers.list()


@router.get("/user/{user_id}", response_model=Manager)
def get_by_user(user_id: str, repos: ReposDependency) -> Manager:
    manager = repos.managers.get_by_user_id(user_id)
    if manager is None:
        raise NotFoundError(resource="Manager", identifier=user_id, message=GET_MANAGER_ERROR)
    return manager


@router.get("/{manager_id}", response_model=Manager)
def get_manager(manager_id: str, repos: ReposDependency) -> Manager:
    return load_manager(repos, manager_id)


@router.post("/player", response_model=Manager)
def manage_players(body: ManagePlayerRequest, repos: ReposDependency) -> Manager:
    """Add or remove a catalog player on a manager's roster."""
    manager = load_manager(repos, body.manager)
    player = repos.players.get(body.player)
    if player is None:
        raise NotFoundError(resource="Player", identifier=body.player, message=GET_PLAYER_ERROR)
    return change_roster(repos.managers, manager, player, body.type)


@router.post("/point", response_model=Manager)
def manage_points(body: ManagePointRequest, repos: ReposDependency) -> Manager:
    """Add or spend points. Spending more than the balance is rejected."""
    manager = load_manager(repos, body.manager)
    try:
        return change_points(repos.managers, manager, body.point, body.type)
    except InsufficientPointsError as e:
        raise BalanceError(points=e.manager.points, required=e.required)
