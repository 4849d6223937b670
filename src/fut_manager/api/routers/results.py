"""
Results router - record a fixture between two managers.
"""

from fastapi import APIRouter

from ..dependencies import ReposDependency
from ..errors import NotFoundError
from ...core.models import Result, ResultRequest
from ...services import MissingEntityError, record_result

router = APIRouter()


@router.post("", response_model=Result)
def create_result(body: ResultRequest, repos: ReposDependency) -> Result:
    """
    Record a result.

    Scorers are matched against the roster of the side they scored for;
    unknown players are ignored.
    """
    try:
        return record_result(repos, body)
    except MissingEntityError as e:
        raise NotFoundError(resource=e.resource, identifier=e.identifier, message=e.message)
