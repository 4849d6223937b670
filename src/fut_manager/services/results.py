"""
Result service: turns a result submission into a stored fixture.

A result is written to the result collection and appended to both
managers and the season, so each document carries its own history.
"""

from __future__ import annotations

import logging

from ..core.models import Manager, Result, ResultRequest, Scorer
from ..core.types import GET_MANAGER_ERROR, GET_SEASON_ERROR
from ..repositories import RepositorySet

logger = logging.getLogger(__name__)


class MissingEntityError(LookupError):
    """A manager or season referenced by a submission does not exist."""

    def __init__(self, resource: str, identifier: str, message: str):
        self.resource = resource
        self.identifier = identifier
        self.message = message
        super().__init__(f"{resource} {identifier} not found")


def resolve_scorers(
    request: ResultRequest,
    home: Manager,
    away: Manager,
) -> tuple[list[Scorer], list[Scorer]]:
    """
    Split submitted scorers into home and away lists.

    A scorer belongs to the home side when its manager is the home manager,
    otherwise to the away side. Players not on that side's roster are skipped.
    """
    home_scorers: list[Scorer] = []
    away_scorers: list[Scorer] = []

    for entry in request.scorers:
        if entry.manager == home.id:
            side, scorers = home, home_scorers
        else:
            side, scorers = away, away_scorers

        player = side.find_player(entry.player)
        if player is None:
            logger.warning(
                "Skipping scorer %s: not on roster of manager %s", entry.player, side.id
            )
            continue
        scorers.append(Scorer(player=player, count=entry.count))

    return home_scorers, away_scorers


def record_result(repos: RepositorySet, request: ResultRequest) -> Result:
    """
    Store a result and append it to both managers and the season.

    Raises:
        MissingEntityError: If either manager or the season is missing
    """
    home = repos.managers.get(request.home)
    if home is None:
        raise MissingEntityError("Manager", request.home, GET_MANAGER_ERROR)
    away = repos.managers.get(request.away)
    if away is None:
        raise MissingEntityError("Manager", request.away, GET_MANAGER_ERROR)
    season = repos.seasons.get(request.season)
    if season is None:
        raise MissingEntityError("Season", request.season, GET_SEASON_ERROR)

    home_scorers, away_scorers = resolve_scorers(request, home, away)

    result = Result(
        season=request.season,
        home=request.home,
        away=request.away,
        season_type=season.type,
        season_title=season.title,
        home_manager=home.name,
        away_manager=away.name,
        score=list(request.score),
        home_scorers=home_scorers,
        away_scorers=away_scorers,
    )
    result.id = repos.results.create(result)

    repos.managers.append_result(home.id, result)
    repos.managers.append_result(away.id, result)
    repos.seasons.append_result(season.id, result)

    logger.info(
        "Recorded result %s: %s %d-%d %s (season %s)",
        result.id, home.name, result.score[0], result.score[1], away.name, season.id,
    )
    return result
