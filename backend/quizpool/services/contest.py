from __future__ import annotations
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.errors import AlreadyInitialized, InvalidAmount
from quizpool.models.contest import Contest, MAX_AMOUNT
from quizpool.schemas.contest import ContestState
from quizpool.services.storage import extend_ttl

log = structlog.get_logger()


async def get_contest(session: AsyncSession, contest_id: str, *, for_update: bool = False) -> Contest | None:
    """Stored ledger row, or None if the contest was never initialized."""
    if for_update:
        return await session.get(Contest, contest_id, with_for_update=True)
    return await session.get(Contest, contest_id)


def contest_status(contest: Contest | None) -> str:
    if contest is None:
        return "uninitialized"
    return "active" if contest.is_active else "closed"


def to_state(contest_id: str, contest: Contest | None) -> ContestState:
    if contest is None:
        return ContestState(contest_id=contest_id)
    return ContestState(
        contest_id=contest.id,
        entry_fee=int(contest.entry_fee),
        total_pool=int(contest.total_pool),
        is_active=bool(contest.is_active),
        participant_count=int(contest.participant_count),
        admin=contest.admin,
        status=contest_status(contest),
    )


async def initialize(session: AsyncSession, contest_id: str, caller: str, entry_fee: int) -> ContestState:
    """
    Open a new contest with a fixed entry fee. The caller becomes its admin.
    A contest id can be initialized only once; closed contests stay closed.
    """
    if isinstance(entry_fee, bool) or not isinstance(entry_fee, int) or not 0 <= entry_fee <= MAX_AMOUNT:
        raise InvalidAmount(f"entry_fee must be an integer in [0, {MAX_AMOUNT}], got {entry_fee!r}")

    existing = await get_contest(session, contest_id, for_update=True)
    if existing is not None:
        raise AlreadyInitialized(contest_id)

    contest = Contest(
        id=contest_id,
        admin=caller,
        entry_fee=entry_fee,
        total_pool=0,
        is_active=True,
        participant_count=0,
    )
    extend_ttl(contest)
    session.add(contest)
    await session.flush()

    log.info("contest_initialized", contest_id=contest_id, admin=caller, entry_fee=entry_fee)
    return to_state(contest_id, contest)


async def read_state(session: AsyncSession, contest_id: str) -> ContestState:
    """Pure read; an unknown contest yields the default inactive snapshot."""
    return to_state(contest_id, await get_contest(session, contest_id))
