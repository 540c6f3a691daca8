from __future__ import annotations
from pydantic import BaseModel
from uuid import UUID
from datetime import datetime

class LedgerEntryPublic(BaseModel):
    id: UUID
    seq: int
    contest_id: str
    identity: str | None = None
    type: str
    amount: int
    place: int | None = None
    note: str | None = None
    created_at: datetime

class LedgerSnapshot(BaseModel):
    contest_id: str
    pool_tokens: int
    staked_total: int
    paid_out_total: int
    retained_total: int
    entries: list[LedgerEntryPublic]
