from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, ForeignKey, UniqueConstraint, Uuid
from quizpool.db import Base
from quizpool.models.contest import UTCDateTime, utcnow

class LedgerEntry(Base):
    """
    Append-only accounting trail per contest.
    Amounts are always positive; direction comes from the type:
      - STAKE    => into the pool (registration payment)
      - PAYOUT   => out of the pool to a winner (place 1..3)
      - RETAINED => out of the pool, kept by the contest (rounding remainder, unawarded places)

    After distribution, Σ STAKE == Σ PAYOUT + Σ RETAINED per contest.
    """
    __tablename__ = "ledger_entries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    seq: Mapped[int] = mapped_column(Integer, nullable=False)  # insertion order within the contest

    contest_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("contests.id", ondelete="CASCADE"), index=True, nullable=False
    )
    identity: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)  # null for RETAINED

    type: Mapped[str] = mapped_column(String(16), nullable=False)  # STAKE | PAYOUT | RETAINED
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    place: Mapped[int | None] = mapped_column(Integer, nullable=True)
    note: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("contest_id", "seq", name="uq_ledger_entries_contest_seq"),
    )
