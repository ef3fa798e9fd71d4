"""
Contestant service functions.
"""

from leaderboard.models import Contestant
from leaderboard.services import StandingsService

from ..schemas import BoardResult, ContestantDetailResponse, ContestantResponse


def contestant_scores(
    standings_service: StandingsService, contestant: Contestant
) -> list[BoardResult]:
    """A contestant's stored entries, one per board, in board id order."""
    results = standings_service.contestant_results(contestant.id, contestant=contestant)
    return [
        BoardResult(
            board_id=r.key_id,
            board=r.name,
            values=r.values,
            context=r.context,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
        for r in results
    ]


def serialize_contestant_detail(
    standings_service: StandingsService, contestant: Contestant
) -> ContestantDetailResponse:
    return ContestantDetailResponse(
        **ContestantResponse.model_validate(contestant).model_dump(),
        scores=contestant_scores(standings_service, contestant),
    )
