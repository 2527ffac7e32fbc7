"""
Test fixtures - in-memory SQLite database, seeded workspaces + HTTP client
"""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from crewer.database import Base, get_db, configure_sqlite_engine
from crewer.main import app
from crewer.models import CrewMember, Job, LegacyShow, Resource, Workspace


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    configure_sqlite_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Two workspaces; the first one with jobs, resources and crew"""
    ws = Workspace(name="BBC Studios North", slug="bbc-studios-north")
    other = Workspace(name="Other Studio", slug="other-studio")
    db_session.add_all([ws, other])
    await db_session.flush()

    camera = Job(workspace_id=ws.id, title="Camera Operator")
    audio = Job(workspace_id=ws.id, title="Audio Engineer")
    studio = Resource(workspace_id=ws.id, name="Studio A", type="studio")
    camera_1 = Resource(workspace_id=ws.id, name="Camera 1", type="equipment")
    john = CrewMember(workspace_id=ws.id, name="John Smith", email="john@bbc.com")
    sarah = CrewMember(workspace_id=ws.id, name="Sarah Johnson", email="sarah@bbc.com")
    db_session.add_all([camera, audio, studio, camera_1, john, sarah])
    await db_session.commit()

    return {
        "ws": ws,
        "other": other,
        "camera": camera,
        "audio": audio,
        "studio": studio,
        "camera_1": camera_1,
        "john": john,
        "sarah": sarah,
    }


@pytest.fixture()
def make_show(db_session):
    """Factory adding a legacy show; start times step by one day per call"""
    counter = {"n": 0}
    base = datetime(2024, 3, 1, 8, 0)

    def _make(workspace, title, pattern=None, minutes=60, **kwargs):
        start = kwargs.pop("start_time", base + timedelta(days=counter["n"]))
        counter["n"] += 1
        show = LegacyShow(
            workspace_id=workspace.id,
            title=title,
            start_time=start,
            end_time=kwargs.pop("end_time", start + timedelta(minutes=minutes)),
            recurring_pattern=pattern,
            status=kwargs.pop("status", "scheduled"),
            **kwargs,
        )
        db_session.add(show)
        return show

    return _make


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
