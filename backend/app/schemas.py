"""
Pydantic schemas for request and response validation.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

FiniteNumber = Annotated[float, Field(allow_inf_nan=False)]
Name = Annotated[str, Field(min_length=1, max_length=255)]


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# =============================================================================
# Applications
# =============================================================================


class ApplicationCreateRequest(BaseModel):
    name: Name
    admin: bool = False


class ApplicationUpdateRequest(BaseModel):
    name: Name | None = None
    admin: bool | None = None


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ApplicationCreatedResponse(ApplicationResponse):
    """Returned once on creation; the secret cannot be retrieved later."""

    secret: str


# =============================================================================
# Contestants
# =============================================================================


class ContestantCreateRequest(BaseModel):
    name: Name


class ContestantUpdateRequest(BaseModel):
    name: Name | None = None


class ContestantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BoardResult(BaseModel):
    """A contestant's stored entry on one board."""

    board_id: int
    board: str
    values: dict[str, float]
    context: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContestantDetailResponse(ContestantResponse):
    scores: list[BoardResult] = Field(default_factory=list)


# =============================================================================
# Boards
# =============================================================================


class FieldSpec(BaseModel):
    sort_order: int
    sort_descending: bool = Field(
        description="True when larger values rank better (points), false when smaller values do (time)"
    )


class BoardCreateRequest(BaseModel):
    name: Name
    fields: dict[Name, FieldSpec] = Field(min_length=1)


class BoardUpdateRequest(BaseModel):
    name: Name | None = None


class BoardResponse(BaseModel):
    id: int
    name: str
    fields: dict[str, FieldSpec]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContestantEntry(BaseModel):
    """A stored entry of one contestant on the board being viewed."""

    contestant_id: int
    contestant: str
    values: dict[str, float]
    context: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Standing(ContestantEntry):
    rank: int


class BoardDetailResponse(BoardResponse):
    scores: list[Standing] = Field(default_factory=list)


# =============================================================================
# Score submission
# =============================================================================


class ScoreSubmissionRequest(BaseModel):
    values: dict[str, FiniteNumber] = Field(description="Value for every field of the board, by field name")
    context: dict[str, Any] | None = Field(default=None, description="Free-form submission metadata")


class ScoreSubmissionResponse(BaseModel):
    outcome: Literal["inserted", "replaced", "unchanged"]
    entry: ContestantEntry
    previous_values: dict[str, float] | None = None
