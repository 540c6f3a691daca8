from __future__ import annotations
from fastapi import APIRouter, Depends, Path, Query, Body
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.db import get_session
from quizpool.auth_deps import get_caller
from quizpool.schemas.contest import (
    ContestState, DistributeRequest, InitializeRequest, ParticipantPublic, PayoutPlan,
    RegisterRequest, RegisterResponse, ScoreUpdate,
)
from quizpool.services import contest as contest_service
from quizpool.services import registry
from quizpool.services.payout import close_and_distribute

router = APIRouter(prefix="/contests", tags=["contests"])

# ContestError raised below is rendered by the app-level handler; the session
# closes without commit so nothing from a failed call is persisted.

@router.post("/{contest_id}/initialize", response_model=ContestState, status_code=201)
async def initialize_contest(
    payload: InitializeRequest,
    contest_id: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
    caller: str = Depends(get_caller),
):
    state = await contest_service.initialize(session, contest_id, caller, payload.entry_fee)
    await session.commit()
    return state

@router.get("/{contest_id}", response_model=ContestState)
async def read_ledger_state(contest_id: str = Path(..., min_length=1, max_length=64), session: AsyncSession = Depends(get_session)):
    return await contest_service.read_state(session, contest_id)

@router.post("/{contest_id}/register", response_model=RegisterResponse, status_code=201)
async def register_participant(
    payload: RegisterRequest,
    contest_id: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
    caller: str = Depends(get_caller),
):
    ok = await registry.register(session, contest_id, caller, payload.identity, payload.payment_amount)
    await session.commit()
    return RegisterResponse(
        success=ok,
        participant=await registry.lookup(session, contest_id, payload.identity),
        contest=await contest_service.read_state(session, contest_id),
    )

@router.put("/{contest_id}/participants/{identity}/score", response_model=ParticipantPublic)
async def update_score(
    payload: ScoreUpdate,
    contest_id: str = Path(..., min_length=1, max_length=64),
    identity: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
    caller: str = Depends(get_caller),
):
    rec = await registry.update_score(session, contest_id, caller, identity, payload.score)
    await session.commit()
    return rec

@router.get("/{contest_id}/participants/{identity}", response_model=ParticipantPublic)
async def lookup_participant(
    contest_id: str = Path(..., min_length=1, max_length=64),
    identity: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
):
    return await registry.lookup(session, contest_id, identity)

@router.get("/{contest_id}/leaderboard", response_model=list[ParticipantPublic])
async def leaderboard(
    contest_id: str = Path(..., min_length=1, max_length=64),
    limit: int | None = Query(default=None, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
):
    return await registry.leaderboard(session, contest_id, limit)

@router.post("/{contest_id}/distribute", response_model=PayoutPlan)
async def distribute_prizes(
    payload: DistributeRequest | None = Body(default=None),
    contest_id: str = Path(..., min_length=1, max_length=64),
    session: AsyncSession = Depends(get_session),
    caller: str = Depends(get_caller),
):
    winners = payload.winners if payload else None
    plan = await close_and_distribute(session, contest_id, caller, winners)
    await session.commit()
    return plan
