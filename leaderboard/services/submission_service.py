"""
Score submission service.

Runs the read-compare-write of a submission as one atomic unit per
(board, contestant) pair:

- an in-process keyed lock serializes submissions for the same pair
- each attempt is one transaction that reads the stored entry FOR UPDATE
- the entry's version column turns a concurrent overwrite from another
  process into a ConflictError, the unique (board, contestant) constraint
  turns a concurrent first insert into a DuplicateKeyError

Both errors roll the transaction back and retry the whole attempt, a
bounded number of times, before surfacing a ConflictError.
"""

import time
from collections.abc import Mapping
from typing import Any, Optional

from sqlalchemy.orm import Session

from leaderboard.config import get_settings
from leaderboard.exceptions import ConflictError, DuplicateKeyError
from leaderboard.locks import KeyedLock
from leaderboard.logging import get_logger, log_context, timed
from leaderboard.ranking.resolver import ConflictResolver, ResolutionOutcome, validate_submission
from leaderboard.repositories import ContestantRepository, EntryRepository

logger = get_logger("services.submission")

# Shared by every SubmissionService in the process
submission_locks = KeyedLock()

MAX_BACKOFF_SECONDS = 1.0


class SubmissionService:
    """
    Submits scores for contestants on boards.

    Usage:
        with db.session() as session:
            service = SubmissionService(session)
            outcome = service.submit(board_id, contestant_id, {"score": 100, "time": 30})
    """

    def __init__(
        self,
        session: Session,
        locks: KeyedLock | None = None,
        max_retries: int | None = None,
        retry_backoff: float | None = None,
    ):
        settings = get_settings()
        self.session = session
        self.entries = EntryRepository(session)
        self.contestants = ContestantRepository(session)
        self.resolver = ConflictResolver(self.entries)
        self.locks = locks if locks is not None else submission_locks
        self.max_retries = max_retries if max_retries is not None else settings.submission_max_retries
        self.retry_backoff = (
            retry_backoff if retry_backoff is not None else settings.submission_retry_backoff
        )

    @timed("score_submission")
    def submit(
        self,
        board_id: int,
        contestant_id: int,
        values: Mapping[str, float],
        context: Optional[dict[str, Any]] = None,
    ) -> ResolutionOutcome:
        """
        Submit a result set and commit the resolver's decision.

        Raises:
            NotFoundError: Unknown board, contestant or field name.
            IncompleteSubmissionError: A field of the board has no value.
            ConflictError: Concurrent modifications persisted through every retry.
        """
        with log_context(board_id=board_id, contestant_id=contestant_id):
            with self.locks.hold((board_id, contestant_id)):
                for attempt in range(1, self.max_retries + 1):
                    try:
                        outcome = self._submit_attempt(board_id, contestant_id, values, context)
                        self.session.commit()
                    except (ConflictError, DuplicateKeyError) as exc:
                        self.session.rollback()
                        if attempt == self.max_retries:
                            logger.error(
                                "submission_failed",
                                attempts=attempt,
                                error_type=type(exc).__name__,
                            )
                            raise ConflictError(board_id, contestant_id, attempts=attempt) from exc
                        logger.warning(
                            "submission_retry",
                            attempt=attempt,
                            error_type=type(exc).__name__,
                        )
                        time.sleep(min(self.retry_backoff * (2 ** (attempt - 1)), MAX_BACKOFF_SECONDS))
                        continue
                    except Exception:
                        self.session.rollback()
                        raise

                    logger.info(
                        "submission_resolved",
                        outcome=outcome.resolution.value,
                        entry_id=outcome.entry.id,
                        attempt=attempt,
                    )
                    return outcome

        # Only reached when max_retries < 1
        raise ConflictError(board_id, contestant_id, attempts=self.max_retries)

    def _submit_attempt(
        self,
        board_id: int,
        contestant_id: int,
        values: Mapping[str, float],
        context: Optional[dict[str, Any]],
    ) -> ResolutionOutcome:
        """Single read-compare-write inside the current transaction."""
        board = self.entries.get_board_with_fields(board_id)
        contestant = self.contestants.get_or_raise(contestant_id)
        validate_submission(board, values)

        existing = self.entries.get_entry(board_id, contestant_id, for_update=True)
        return self.resolver.resolve(board, contestant, values, existing, context)
