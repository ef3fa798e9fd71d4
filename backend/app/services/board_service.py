"""
Board service functions: creation and response shaping for boards and scores.
"""

from sqlalchemy.orm import Session

from leaderboard.models import Board, Field
from leaderboard.ranking import GroupedResult, ResolutionOutcome, group_by_contestant
from leaderboard.repositories import BoardRepository
from leaderboard.services import Standing, StandingsService

from ..schemas import (
    BoardCreateRequest,
    BoardDetailResponse,
    BoardResponse,
    ContestantEntry,
    FieldSpec,
    ScoreSubmissionResponse,
)
from ..schemas import Standing as StandingSchema


def create_board(db: Session, payload: BoardCreateRequest) -> Board:
    """Create a board with the requested fields."""
    return BoardRepository(db).create_with_fields(
        payload.name,
        [
            {"name": name, "sort_order": spec.sort_order, "sort_descending": spec.sort_descending}
            for name, spec in payload.fields.items()
        ],
    )


def _field_specs(fields: list[Field]) -> dict[str, FieldSpec]:
    return {
        f.name: FieldSpec(sort_order=f.sort_order, sort_descending=f.sort_descending)
        for f in fields
    }


def serialize_board(board: Board) -> BoardResponse:
    return BoardResponse(
        id=board.id,
        name=board.name,
        fields=_field_specs(board.ordered_fields),
        created_at=board.created_at,
        updated_at=board.updated_at,
    )


def _contestant_entry(result: GroupedResult) -> dict:
    return {
        "contestant_id": result.key_id,
        "contestant": result.name,
        "values": result.values,
        "context": result.context,
        "created_at": result.created_at,
        "updated_at": result.updated_at,
    }


def serialize_standings(standings: list[Standing]) -> list[StandingSchema]:
    return [StandingSchema(rank=s.rank, **_contestant_entry(s.result)) for s in standings]


def serialize_board_detail(
    standings_service: StandingsService, board: Board
) -> BoardDetailResponse:
    """Board with its fields and its ranked standings."""
    standings = standings_service.board_standings(board.id, board=board)
    return BoardDetailResponse(
        **serialize_board(board).model_dump(),
        scores=serialize_standings(standings),
    )


def serialize_submission(outcome: ResolutionOutcome) -> ScoreSubmissionResponse:
    """Shape a resolution outcome as the stored entry grouped under its contestant."""
    entry = outcome.entry
    fields = entry.board.fields
    (result,) = group_by_contestant([entry], [entry.contestant], fields)

    previous = None
    if outcome.previous_values is not None:
        names = {f.id: f.name for f in fields}
        previous = {names[field_id]: value for field_id, value in outcome.previous_values.items()}

    return ScoreSubmissionResponse(
        outcome=outcome.resolution.value,
        entry=ContestantEntry(**_contestant_entry(result)),
        previous_values=previous,
    )
