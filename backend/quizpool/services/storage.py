from __future__ import annotations
from datetime import datetime, timedelta, timezone
from quizpool.config import settings

def lifetime_deadline(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(seconds=settings.storage_ttl_seconds)

def extend_ttl(*rows) -> datetime:
    """
    Refresh the storage lifetime of every row touched by a successful mutation.
    Rows must carry an `expires_at` column. Returns the new deadline.
    """
    deadline = lifetime_deadline()
    for row in rows:
        if row is not None:
            row.expires_at = deadline
    return deadline
