"""
Test configuration and fixtures.

Each test gets its own SQLite file database; the FastAPI ``get_db``
dependency is overridden to hand out sessions bound to it.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.main import app
from app.models.request import JoinRequest, RequestStatus
from app.models.team import Team
from app.models.user import User


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Session used by the test body to seed data and call services."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def team(db):
    """Team 7 owned by ``shadowfox``, with ``alice`` registered as a player."""
    owner = User(id=1, username="shadowfox", email="shadowfox@example.com")
    alice = User(id=2, username="alice", email="alice@example.com", bio="Support main.", avatar="alice.png")
    db.add_all([owner, alice])
    await db.flush()

    team = Team(id=7, name="Night Owls", tag="NOWL", owner_id=owner.id, total_members=0)
    db.add(team)
    await db.commit()
    return team


@pytest.fixture
def make_request(db):
    async def _make(request_id, team_id=7, requester_name="alice", role="support",
                    rank="gold", status=RequestStatus.PENDING):
        join_request = JoinRequest(
            id=request_id,
            team_id=team_id,
            requester_name=requester_name,
            role=role,
            rank=rank,
            status=status,
        )
        db.add(join_request)
        await db.commit()
        return join_request

    return _make
