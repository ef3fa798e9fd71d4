"""
Exceptions raised by the leaderboard core.

Every error carries the HTTP status it maps to and a message that is safe
to return to API clients.
"""


class LeaderboardError(Exception):
    """Base exception for leaderboard errors."""

    status_code = 500
    retryable = False

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class NotFoundError(LeaderboardError):
    """Raised when a referenced board, contestant, field or application does not exist."""

    status_code = 404

    def __init__(self, kind: str, identifier: object):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Could not find {kind} with identifier {identifier!r}")


class IncompleteSubmissionError(LeaderboardError):
    """Raised when submitted values omit a field of the board."""

    status_code = 400

    def __init__(self, field_name: str, board_id: object = None):
        self.field_name = field_name
        self.board_id = board_id
        super().__init__(f"Submission is missing a value for field {field_name!r}")


class InvalidComparisonError(LeaderboardError):
    """Raised when the comparator is asked to rank a missing value.

    This is a programming defect, so clients only get a generic message.
    """

    status_code = 500

    def __init__(self, reason: str):
        super().__init__(f"Invalid comparison: {reason}", "Internal server error")


class ConflictError(LeaderboardError):
    """Raised when an entry changed between being read and being written."""

    status_code = 503
    retryable = True

    def __init__(self, board_id: object, contestant_id: object, attempts: int | None = None):
        self.board_id = board_id
        self.contestant_id = contestant_id
        self.attempts = attempts
        if attempts:
            message = (
                f"Entry for board {board_id!r} and contestant {contestant_id!r} "
                f"was modified concurrently {attempts} times"
            )
        else:
            message = (
                f"Entry for board {board_id!r} and contestant {contestant_id!r} "
                "was modified concurrently"
            )
        super().__init__(message, "The score could not be saved right now, please try again.")


class DuplicateKeyError(LeaderboardError):
    """Raised when an entry already exists for the (board, contestant) pair on insert."""

    status_code = 409
    retryable = True

    def __init__(self, board_id: object, contestant_id: object):
        self.board_id = board_id
        self.contestant_id = contestant_id
        super().__init__(
            f"An entry already exists for board {board_id!r} and contestant {contestant_id!r}"
        )


__all__ = [
    "LeaderboardError",
    "NotFoundError",
    "IncompleteSubmissionError",
    "InvalidComparisonError",
    "ConflictError",
    "DuplicateKeyError",
]
