"""
Contestant endpoints.
"""

from fastapi import APIRouter, Depends, status

from leaderboard.logging import get_logger
from leaderboard.repositories import ContestantRepository
from leaderboard.services import StandingsService

from ..auth.dependencies import get_current_application
from ..dependencies import get_contestant_repository, get_standings_service
from ..schemas import (
    BoardResult,
    ContestantCreateRequest,
    ContestantDetailResponse,
    ContestantResponse,
    ContestantUpdateRequest,
)
from ..services import contestant_service

logger = get_logger("contestants")

router = APIRouter(
    prefix="/contestants",
    tags=["contestants"],
    dependencies=[Depends(get_current_application)],
)


@router.post("", response_model=ContestantResponse, status_code=status.HTTP_201_CREATED)
def create_contestant(
    payload: ContestantCreateRequest,
    repo: ContestantRepository = Depends(get_contestant_repository),
):
    contestant = repo.create(name=payload.name)
    logger.info("contestant_created", contestant_id=contestant.id)
    return contestant


@router.get("", response_model=list[ContestantResponse])
def list_contestants(repo: ContestantRepository = Depends(get_contestant_repository)):
    return repo.get_all()


@router.get("/{contestant_id}", response_model=ContestantDetailResponse)
def get_contestant(
    contestant_id: int,
    repo: ContestantRepository = Depends(get_contestant_repository),
    standings: StandingsService = Depends(get_standings_service),
):
    """Contestant with its stored entries grouped by board."""
    contestant = repo.get_or_raise(contestant_id)
    return contestant_service.serialize_contestant_detail(standings, contestant)


@router.get("/{contestant_id}/scores", response_model=list[BoardResult])
def get_contestant_scores(
    contestant_id: int,
    repo: ContestantRepository = Depends(get_contestant_repository),
    standings: StandingsService = Depends(get_standings_service),
):
    contestant = repo.get_or_raise(contestant_id)
    return contestant_service.contestant_scores(standings, contestant)


@router.patch("/{contestant_id}", response_model=ContestantResponse)
def update_contestant(
    contestant_id: int,
    payload: ContestantUpdateRequest,
    repo: ContestantRepository = Depends(get_contestant_repository),
):
    return repo.update(contestant_id, name=payload.name)


@router.delete("/{contestant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contestant(
    contestant_id: int,
    repo: ContestantRepository = Depends(get_contestant_repository),
):
    repo.delete(contestant_id)
    logger.info("contestant_deleted", contestant_id=contestant_id)
