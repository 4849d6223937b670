"""
Packs router - buy a pack and receive a random player.
"""

from fastapi import APIRouter

from ..dependencies import ReposDependency
from ..errors import BalanceError, NotFoundError
from ...core.models import PackRequest, PackResponse
from ...core.types import SEARCH_PLAYER_ERROR
from ...services import InsufficientPointsError, PoolExhaustedError, open_pack
from .managers import load_manager

router = APIRouter()


@router.post("", response_model=PackResponse)
def open_pack_endpoint(body: PackRequest, repos: ReposDependency) -> PackResponse:
    """Charge the pack price and add the drawn player to the manager's roster."""
    manager = load_manager(repos, body.manager)
    try:
        opening = open_pack(repos, manager, body.type)
    except InsufficientPointsError as e:
        raise BalanceError(points=e.manager.points, required=e.required)
    except PoolExhaustedError as e:
        raise NotFoundError(resource="Player", message=SEARCH_PLAYER_ERROR, detail=str(e))

    return PackResponse(
        player=opening.player,
        point=opening.manager.points,
        message=opening.message,
    )
