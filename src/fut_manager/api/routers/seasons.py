"""
Seasons router - seasons and their statistics.

Endpoints:
- POST /season          - Create a season
- GET /season           - List seasons (without results)
- GET /season/{id}      - Get a season with its results
- POST /statistics      - League table and top scorers of a season

Statistics are recomputed from the season's full result history on every
request; nothing derived is stored.
"""

import logging
from typing import Any

from fastapi import APIRouter, status

from ..dependencies import ReposDependency
from ..errors import MalformedResultAPIError, NotFoundError
from ...core.models import CreateSeasonRequest, Season, SeasonSummary, StatisticRequest
from ...core.types import GET_SEASON_ERROR
from ...repositories import RepositorySet
from ...standings import MalformedResultError, compute_statistics

logger = logging.getLogger(__name__)

router = APIRouter()


def load_season(repos: RepositorySet, season_id: str) -> Season:
    season = repos.seasons.get(season_id)
    if season is None:
        raise NotFoundError(resource="Season", identifier=season_id, message=GET_SEASON_ERROR)
    return season


@router.post("/season", response_model=Season, status_code=status.HTTP_201_CREATED)
def create_season(body: CreateSeasonRequest, repos: ReposDependency) -> Season:
    season_id = repos.seasons.create(Season(type=body.type, title=body.title))
    logger.info("Created season %s (%s)", season_id, body.title)
    return load_season(repos, season_id)


@router.get("/season", response_model=list[SeasonSummary])
def list_seasons(repos: ReposDependency) -> list[SeasonSummary]:
    return repos.seasons.list()


@router.get("/season/{season_id}", response_model=Season)
def get_season(season_id: str, repos: ReposDependency) -> Season:
    return load_season(repos, season_id)


@router.post("/statistics")
def get_statistics(body: StatisticRequest, repos: ReposDependency) -> dict[str, Any]:
    """
    Get the league table (`standing`) and top scorers (`stats`) of a season.
    """
    season = load_season(repos, body.season)
    try:
        return compute_statistics(season.results)
    except MalformedResultError as e:
        logger.warning("Season %s has a malformed result: %s", season.id, e)
        raise MalformedResultAPIError(detail=str(e))
