import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# wayamba.main builds a module-level app on import; keep it off PostgreSQL.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from wayamba.auth import hash_password
from wayamba.config import DEFAULT_BOUNDARY_PATH, Settings
from wayamba.errors import UploadError
from wayamba.geo import BoundaryGate
from wayamba.integrations import ImageUpload
from wayamba.main import create_app
from wayamba.models import AdminUser, Base, Feedback

# Inside the North Western Province (Kurunegala district).
INSIDE = (7.8, 80.5)
# Colombo, Western Province.
OUTSIDE = (6.9, 79.8)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery staple"


class FakeImageHost:
    """Records uploads instead of calling an image service."""

    is_configured = True

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: List[Tuple[ImageUpload, str]] = []

    async def upload(self, image: ImageUpload, folder: str) -> Optional[str]:
        if self.fail:
            raise UploadError()
        self.uploads.append((image, folder))
        return f"https://images.test/{folder}/{image.filename}"


class RecordingNotifier:
    """Collects notified feedback ids; can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.notified: list = []

    async def feedback_submitted(self, feedback: Feedback) -> None:
        if self.fail:
            raise RuntimeError("mail relay unavailable")
        self.notified.append(feedback.id)


@pytest.fixture(scope="session")
def boundary() -> BoundaryGate:
    gate = BoundaryGate.from_file(DEFAULT_BOUNDARY_PATH)
    assert gate.is_loaded
    return gate


@pytest.fixture()
def test_db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture()
def settings(test_db_url: str) -> Settings:
    return Settings(database_url=test_db_url, debug=True)


@pytest.fixture()
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture()
async def db(test_db_url: str) -> AsyncIterator[async_sessionmaker]:
    """Session factory on the same database file the app under test uses."""
    engine = create_async_engine(test_db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture()
async def session(db: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    async with db() as s:
        yield s


@pytest.fixture()
def app(settings: Settings, boundary: BoundaryGate, image_host: FakeImageHost, notifier: RecordingNotifier):
    return create_app(settings, boundary=boundary, image_host=image_host, notifier=notifier)


@asynccontextmanager
async def serve(app) -> AsyncIterator[AsyncClient]:
    """Run ``app`` through its lifespan and yield a client bound to it."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with serve(app) as ac:
        yield ac


@pytest_asyncio.fixture()
async def admin_user(db: async_sessionmaker) -> AdminUser:
    async with db() as s:
        user = AdminUser(username=ADMIN_USERNAME, password_hash=hash_password(ADMIN_PASSWORD, rounds=4))
        s.add(user)
        await s.commit()
        return user


@pytest_asyncio.fixture()
async def admin_client(client: AsyncClient, admin_user: AdminUser) -> AsyncClient:
    resp = await client.post(
        "/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200, resp.text
    return client


async def count_rows(db: async_sessionmaker, model) -> int:
    async with db() as s:
        return (await s.execute(select(func.count(model.id)))).scalar_one()


def point_feature(lat: float, lon: float, **properties) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }
