from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Sequence
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.errors import ContestNotActive, InvalidWinners, Unauthorized
from quizpool.models.contest import ContestParticipant
from quizpool.schemas.contest import Award, PayoutPlan
from quizpool.services.contest import get_contest
from quizpool.services.ledger import record_entry, PAYOUT, RETAINED
from quizpool.services.registry import find_participant, top_participants
from quizpool.services.storage import extend_ttl

log = structlog.get_logger()

# Percent of the pool for 1st, 2nd and 3rd place
PRIZE_SPLIT = (50, 30, 20)
MAX_WINNERS = len(PRIZE_SPLIT)


def split_pool(pool: int) -> tuple[int, int, int]:
    """
    50/30/20 split with integer truncation per tier.
    The rounding remainder is not redistributed; close_and_distribute records it as RETAINED.
    """
    return tuple(pool * pct // 100 for pct in PRIZE_SPLIT)


async def _resolve_winners(session: AsyncSession, contest_id: str, winners: Sequence[str] | None) -> list[ContestParticipant]:
    if winners is None:
        return await top_participants(session, contest_id, limit=MAX_WINNERS)

    winners = list(winners)
    if len(winners) > MAX_WINNERS:
        raise InvalidWinners(f"At most {MAX_WINNERS} winners, got {len(winners)}")
    if len(set(winners)) != len(winners):
        raise InvalidWinners("Winners must be distinct")

    rows: list[ContestParticipant] = []
    for identity in winners:
        rec = await find_participant(session, contest_id, identity)
        if rec is None or not rec.entry_paid:
            raise InvalidWinners(f"{identity} is not a registered participant")
        rows.append(rec)
    return rows


async def close_and_distribute(
    session: AsyncSession,
    contest_id: str,
    caller: str,
    winners: Sequence[str] | None = None,
) -> PayoutPlan:
    """
    Close the contest and pay the pool out to up to three winners.

      - winners given  => taken as the ranking (1st, 2nd, 3rd); must be distinct paid participants
      - winners None   => top three of the leaderboard
    Places without a winner and the rounding remainder are RETAINED.
    Not idempotent: a closed contest raises ContestNotActive.
    """
    contest = await get_contest(session, contest_id, for_update=True)
    if contest is None or not contest.is_active:
        raise ContestNotActive(f"Contest {contest_id} already ended or was never started")
    if caller != contest.admin:
        raise Unauthorized("Only the contest admin can distribute prizes")

    ranked = await _resolve_winners(session, contest_id, winners)

    pool = int(contest.total_pool)
    prizes = split_pool(pool)
    awards = [
        Award(place=place, identity=rec.identity, amount=amt)
        for place, (rec, amt) in enumerate(zip(ranked, prizes), start=1)
    ]
    retained = pool - sum(a.amount for a in awards)

    for a in awards:
        if a.amount > 0:
            await record_entry(
                session, contest_id=contest_id, type=PAYOUT, amount=a.amount,
                identity=a.identity, place=a.place, note=f"prize_place_{a.place}",
            )
    if retained > 0:
        await record_entry(
            session, contest_id=contest_id, type=RETAINED, amount=retained,
            note=f"retained_{len(awards)}_winners",
        )

    contest.is_active = False
    contest.total_pool = 0
    contest.closed_at = datetime.now(dt_tz.utc)
    extend_ttl(contest)
    await session.flush()

    log.info(
        "prizes_distributed",
        contest_id=contest_id, pool=pool, prize1=prizes[0], prize2=prizes[1], prize3=prizes[2],
        winners=[a.identity for a in awards], retained=retained,
    )
    return PayoutPlan(
        contest_id=contest_id,
        pool_before_close=pool,
        prizes=prizes,
        awards=awards,
        retained=retained,
    )
