from __future__ import annotations
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from quizpool.models.ledger import LedgerEntry

STAKE = "STAKE"
PAYOUT = "PAYOUT"
RETAINED = "RETAINED"

# ---------- writes ----------

async def record_entry(
    session: AsyncSession,
    *,
    contest_id: str,
    type: str,
    amount: int,
    identity: str | None = None,
    place: int | None = None,
    note: str | None = None,
) -> LedgerEntry:
    """Append one accounting entry. Amount must be > 0; zero movements are not recorded by callers."""
    if amount <= 0:
        raise ValueError("amount must be > 0")
    count = await session.scalar(
        select(func.count()).select_from(LedgerEntry).where(LedgerEntry.contest_id == contest_id)
    )
    entry = LedgerEntry(
        seq=int(count or 0) + 1,
        contest_id=contest_id,
        identity=identity,
        type=type,
        amount=int(amount),
        place=place,
        note=note,
    )
    session.add(entry)
    return entry

# ---------- reads ----------

async def ledger_entries(session: AsyncSession, contest_id: str) -> list[LedgerEntry]:
    return list((await session.execute(
        select(LedgerEntry).where(LedgerEntry.contest_id == contest_id).order_by(LedgerEntry.seq.asc())
    )).scalars().all())


async def snapshot_for_contest(session: AsyncSession, contest_id: str) -> dict:
    """Return entries plus per-type totals; pool = staked - paid out - retained."""
    from quizpool.schemas.ledger import LedgerEntryPublic

    entries = await ledger_entries(session, contest_id)
    totals = {STAKE: 0, PAYOUT: 0, RETAINED: 0}
    for e in entries:
        totals[e.type] = totals.get(e.type, 0) + int(e.amount)

    pool = totals[STAKE] - totals[PAYOUT] - totals[RETAINED]
    return {
        "contest_id": contest_id,
        "pool_tokens": int(pool),
        "staked_total": int(totals[STAKE]),
        "paid_out_total": int(totals[PAYOUT]),
        "retained_total": int(totals[RETAINED]),
        "entries": [
            LedgerEntryPublic(
                id=e.id,
                seq=e.seq,
                contest_id=e.contest_id,
                identity=e.identity,
                type=e.type,
                amount=int(e.amount),
                place=e.place,
                note=e.note,
                created_at=e.created_at,
            ) for e in entries
        ],
    }
