"""Shared fixtures: a fresh SQLite database per test and a couple of users."""

import httpx
import pytest

from clipqa.main import app
from clipqa.services.auth import AuthService
from clipqa.services.clip_generator import ClipGenerator
from clipqa.services.database import Database, get_database


@pytest.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "clipqa-test.db"))
    await database.initialize()
    return database


@pytest.fixture
async def alice(db):
    result = await AuthService(db).register("alice", "password-a")
    return result.user.id


@pytest.fixture
async def bob(db):
    result = await AuthService(db).register("bob", "password-b")
    return result.user.id


@pytest.fixture
def make_video(db):
    async def _make_video(duration: int = 30, title: str = "Physics 101"):
        created = await ClipGenerator(db).create_video(title, f"https://example.com/{title}", duration)
        return created.video
    return _make_video


@pytest.fixture
def query(db):
    """Run a read query against the test database."""
    async def _query(sql: str, params: tuple = ()):
        async with db.connect() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            await cursor.close()
        return [dict(row) for row in rows]
    return _query


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_database] = lambda: db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
