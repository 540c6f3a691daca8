from __future__ import annotations
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.errors import (
    AlreadyRegistered, ContestNotActive, InsufficientPayment, InvalidAmount, NotRegistered, Unauthorized,
)
from quizpool.models.contest import Contest, ContestParticipant, MAX_AMOUNT
from quizpool.schemas.contest import ParticipantPublic
from quizpool.services.contest import get_contest
from quizpool.services.ledger import record_entry, STAKE
from quizpool.services.storage import extend_ttl

log = structlog.get_logger()

# ---------- helpers ----------

async def find_participant(session: AsyncSession, contest_id: str, identity: str) -> ContestParticipant | None:
    """Stored record or None. Callers at the public surface turn None into a default record."""
    return await session.get(ContestParticipant, (contest_id, identity))


def to_public(contest_id: str, identity: str, rec: ContestParticipant | None) -> ParticipantPublic:
    if rec is None:
        return ParticipantPublic(contest_id=contest_id, identity=identity)
    return ParticipantPublic(
        contest_id=rec.contest_id,
        identity=rec.identity,
        score=int(rec.score),
        entry_paid=bool(rec.entry_paid),
        stake=int(rec.stake),
        registration_seq=rec.registration_seq,
    )


async def _require_active(session: AsyncSession, contest_id: str) -> Contest:
    contest = await get_contest(session, contest_id, for_update=True)
    if contest is None or not contest.is_active:
        raise ContestNotActive(f"Contest {contest_id} is not active")
    return contest

# ---------- operations ----------

async def register(session: AsyncSession, contest_id: str, caller: str, identity: str, payment_amount: int) -> bool:
    """
    Register `identity` and move its full payment into the pool.

    Checks run in a fixed order and all of them happen before any write:
    caller is `identity`, contest active, payment covers the fee, not yet paid,
    pool stays within MAX_AMOUNT.
    """
    if caller != identity:
        raise Unauthorized(f"Caller {caller} cannot register {identity}")

    contest = await _require_active(session, contest_id)

    if payment_amount < contest.entry_fee:
        raise InsufficientPayment(payment_amount, int(contest.entry_fee))

    existing = await find_participant(session, contest_id, identity)
    if existing is not None and existing.entry_paid:
        raise AlreadyRegistered(identity)

    if int(contest.total_pool) + payment_amount > MAX_AMOUNT:
        raise InvalidAmount(f"Payment of {payment_amount} would push the pool past {MAX_AMOUNT}")

    seq = int(contest.participant_count) + 1
    if existing is None:
        existing = ContestParticipant(contest_id=contest_id, identity=identity, registration_seq=seq)
        session.add(existing)
    existing.score = 0
    existing.entry_paid = True
    existing.stake = int(payment_amount)
    existing.registration_seq = seq

    # the whole payment enters the pool, not just the fee
    contest.total_pool = int(contest.total_pool) + int(payment_amount)
    contest.participant_count = seq

    if payment_amount > 0:
        await record_entry(
            session, contest_id=contest_id, type=STAKE, amount=payment_amount,
            identity=identity, note="entry_stake",
        )
    extend_ttl(contest, existing)
    await session.flush()

    log.info(
        "participant_registered",
        contest_id=contest_id, identity=identity, payment=payment_amount, total_pool=contest.total_pool,
    )
    return True


async def update_score(session: AsyncSession, contest_id: str, caller: str, identity: str, new_score: int) -> ParticipantPublic:
    """Admin-only overwrite of a registered participant's score. The pool is untouched."""
    contest = await _require_active(session, contest_id)
    if caller != contest.admin:
        raise Unauthorized("Only the contest admin can update scores")

    rec = await find_participant(session, contest_id, identity)
    if rec is None or not rec.entry_paid:
        raise NotRegistered(identity)
    if not -MAX_AMOUNT - 1 <= new_score <= MAX_AMOUNT:
        raise InvalidAmount(f"Score {new_score} is out of range")

    rec.score = int(new_score)
    extend_ttl(contest, rec)
    await session.flush()

    log.info("score_updated", contest_id=contest_id, identity=identity, score=new_score)
    return to_public(contest_id, identity, rec)


async def lookup(session: AsyncSession, contest_id: str, identity: str) -> ParticipantPublic:
    """Never fails: an unknown identity reads as an unpaid record with score 0."""
    return to_public(contest_id, identity, await find_participant(session, contest_id, identity))


async def top_participants(session: AsyncSession, contest_id: str, limit: int | None = None) -> list[ContestParticipant]:
    """Paid participants by score (desc); ties go to the earlier registration."""
    q = (
        select(ContestParticipant)
        .where(ContestParticipant.contest_id == contest_id, ContestParticipant.entry_paid.is_(True))
        .order_by(ContestParticipant.score.desc(), ContestParticipant.registration_seq.asc())
    )
    if limit is not None:
        q = q.limit(limit)
    return list((await session.execute(q)).scalars().all())


async def leaderboard(session: AsyncSession, contest_id: str, limit: int | None = None) -> list[ParticipantPublic]:
    rows = await top_participants(session, contest_id, limit)
    return [to_public(contest_id, r.identity, r) for r in rows]
