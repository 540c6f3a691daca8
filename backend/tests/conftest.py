from datetime import datetime, timedelta, timezone

import httpx
import jwt
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from quizpool.config import settings
from quizpool.db import Base, enable_sqlite_foreign_keys, get_session
from quizpool.main import app
import quizpool.models.contest  # register tables
import quizpool.models.ledger

ADMIN = "GADMINQUIZPOOL"


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest.fixture
async def client(sessionmaker):
    async def _get_session():
        async with sessionmaker() as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_session, None)


def make_access_token(sub: str, ttl_min: int = 15) -> str:
    """Mint a token the way the wallet login service does."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl_min)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def auth(identity: str) -> dict:
    return {"Authorization": f"Bearer {make_access_token(identity)}"}
