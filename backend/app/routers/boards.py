"""
Board and score endpoints.

Reading boards and submitting scores needs any valid token, creating,
renaming and deleting boards needs an administrator token.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from leaderboard.db import get_db
from leaderboard.logging import get_logger
from leaderboard.models import Application
from leaderboard.ranking import Resolution
from leaderboard.repositories import BoardRepository
from leaderboard.services import StandingsService, SubmissionService

from ..auth.dependencies import get_current_application, require_admin
from ..dependencies import get_board_repository, get_standings_service, get_submission_service
from ..schemas import (
    BoardCreateRequest,
    BoardDetailResponse,
    BoardResponse,
    BoardUpdateRequest,
    ScoreSubmissionRequest,
    ScoreSubmissionResponse,
    Standing,
)
from ..services import board_service

logger = get_logger("boards")

router = APIRouter(prefix="/boards", tags=["boards"])


@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
def create_board(
    payload: BoardCreateRequest,
    db: Session = Depends(get_db),
    current: Application = Depends(require_admin),
):
    board = board_service.create_board(db, payload)
    logger.info("board_created", board_id=board.id, fields=len(board.fields), created_by=current.key)
    return board_service.serialize_board(board)


@router.get("", response_model=list[BoardResponse])
def list_boards(
    repo: BoardRepository = Depends(get_board_repository),
    _: Application = Depends(get_current_application),
):
    return [board_service.serialize_board(board) for board in repo.get_all()]


@router.get("/{board_id}", response_model=BoardDetailResponse)
def get_board(
    board_id: int,
    standings: StandingsService = Depends(get_standings_service),
    _: Application = Depends(get_current_application),
):
    """Board with its fields and ranked standings, best first."""
    board = standings.entries.get_board_with_fields(board_id)
    return board_service.serialize_board_detail(standings, board)


@router.patch("/{board_id}", response_model=BoardResponse)
def update_board(
    board_id: int,
    payload: BoardUpdateRequest,
    repo: BoardRepository = Depends(get_board_repository),
    _: Application = Depends(require_admin),
):
    """Rename a board. Fields cannot change once scores may exist."""
    return board_service.serialize_board(repo.update(board_id, name=payload.name))


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_board(
    board_id: int,
    repo: BoardRepository = Depends(get_board_repository),
    current: Application = Depends(require_admin),
):
    repo.delete(board_id)
    logger.info("board_deleted", board_id=board_id, deleted_by=current.key)


# =============================================================================
# Scores
# =============================================================================


@router.get("/{board_id}/scores", response_model=list[Standing])
def get_board_scores(
    board_id: int,
    standings: StandingsService = Depends(get_standings_service),
    _: Application = Depends(get_current_application),
):
    return board_service.serialize_standings(standings.board_standings(board_id))


@router.post("/{board_id}/scores/{contestant_id}", response_model=ScoreSubmissionResponse)
def submit_score(
    board_id: int,
    contestant_id: int,
    payload: ScoreSubmissionRequest,
    response: Response,
    service: SubmissionService = Depends(get_submission_service),
    current: Application = Depends(get_current_application),
):
    """
    Submit a result set for a contestant.

    The stored entry is only replaced when the submission ranks strictly
    better. Returns 201 when a first entry was created and 200 otherwise.
    """
    outcome = service.submit(board_id, contestant_id, payload.values, payload.context)
    if outcome.resolution is Resolution.INSERTED:
        response.status_code = status.HTTP_201_CREATED

    logger.info(
        "score_submitted",
        board_id=board_id,
        contestant_id=contestant_id,
        outcome=outcome.resolution.value,
        submitted_by=current.key,
    )
    return board_service.serialize_submission(outcome)
