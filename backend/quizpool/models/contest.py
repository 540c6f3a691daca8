from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, Boolean, DateTime, ForeignKey, TypeDecorator
from quizpool.db import Base

# Largest amount a BigInteger column holds
MAX_AMOUNT = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timestamp stored as UTC and always loaded timezone-aware (SQLite drops the offset)."""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Contest(Base):
    """
    Ledger state of one contest instance, keyed by contest_id.

    Invariant: total_pool == sum(stake) over paid participants while active,
    and 0 once prizes are distributed. A missing row reads as the default
    (uninitialized, inactive) state.
    """
    __tablename__ = "contests"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    admin: Mapped[str] = mapped_column(String(64), nullable=False)

    entry_fee: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_pool: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    participant_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    closed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)


class ContestParticipant(Base):
    """Registry record; only rows with entry_paid=True are ever written."""
    __tablename__ = "contest_participants"

    contest_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("contests.id", ondelete="CASCADE"), primary_key=True
    )
    identity: Mapped[str] = mapped_column(String(64), primary_key=True)

    score: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    entry_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stake: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    registration_seq: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-based, leaderboard tie-break

    registered_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
