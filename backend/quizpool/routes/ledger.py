from __future__ import annotations
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.db import get_session
from quizpool.schemas.ledger import LedgerSnapshot
from quizpool.services.ledger import snapshot_for_contest

router = APIRouter(tags=["ledger"])

@router.get("/contests/{contest_id}/ledger", response_model=LedgerSnapshot)
async def get_ledger(
    contest_id: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
):
    """Accounting trail of a contest. Unknown contests return an empty trail."""
    return await snapshot_for_contest(session, contest_id)
