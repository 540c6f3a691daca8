from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Literal
from quizpool.models.contest import MAX_AMOUNT

ContestStatus = Literal["uninitialized", "active", "closed"]

class InitializeRequest(BaseModel):
    entry_fee: int = Field(ge=0, le=MAX_AMOUNT, description="Minimum stake required to register")

class ContestState(BaseModel):
    """Ledger snapshot. An uninitialized contest reads as all zeros and inactive."""
    contest_id: str
    entry_fee: int = 0
    total_pool: int = 0
    is_active: bool = False
    participant_count: int = 0
    admin: str | None = None
    status: ContestStatus = "uninitialized"

class ParticipantPublic(BaseModel):
    contest_id: str
    identity: str
    score: int = 0
    entry_paid: bool = False
    stake: int = 0
    registration_seq: int | None = None

class RegisterRequest(BaseModel):
    identity: str = Field(min_length=1, max_length=64)
    payment_amount: int = Field(le=MAX_AMOUNT)

class RegisterResponse(BaseModel):
    success: bool
    participant: ParticipantPublic
    contest: ContestState

class ScoreUpdate(BaseModel):
    score: int = Field(ge=0, le=MAX_AMOUNT)

class DistributeRequest(BaseModel):
    # None => top three of the leaderboard
    winners: list[str] | None = None

class Award(BaseModel):
    place: int
    identity: str
    amount: int

class PayoutPlan(BaseModel):
    contest_id: str
    pool_before_close: int
    prizes: tuple[int, int, int]
    awards: list[Award]
    retained: int
