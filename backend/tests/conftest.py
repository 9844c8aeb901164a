"""Pytest fixtures — in-memory repository for services and routes, SQLite for the SQL adapter."""
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from eventfeed.database import create_all
from eventfeed.dependencies import get_repository
from eventfeed.main import app
from eventfeed.repositories.memory import InMemoryEventRepository
from eventfeed.repositories.sql import SqlEventRepository
from eventfeed.session import UserSession


@pytest.fixture(scope="function")
def repo():
    """A fresh in-memory repository for each test."""
    return InMemoryEventRepository()


@pytest_asyncio.fixture(scope="function")
async def sql_repo(tmp_path):
    """SQL repository over a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_all(engine)
    yield SqlEventRepository(async_sessionmaker(engine, expire_on_commit=False), timeout=5.0)
    await engine.dispose()


@pytest.fixture(scope="function")
def client(repo):
    """FastAPI TestClient with the repository dependency overridden to the in-memory one."""
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def as_user(user_id: str) -> UserSession:
    return UserSession(user_id=user_id)


def auth(user_id: str) -> dict:
    """Headers identifying the caller to the API."""
    return {"X-User-Id": user_id}


def future(days: int = 3, hour: int = 18) -> datetime:
    base = datetime.now(timezone.utc) + timedelta(days=days)
    return base.replace(hour=hour, minute=0, second=0, microsecond=0)


def event_payload(title: str = "Board Games Night", **overrides) -> dict:
    """A valid create payload, JSON-ready."""
    start = future()
    payload = {
        "title": title,
        "description": "Bring a game",
        "location": "Community Hall",
        "category": "Social",
        "date": start.isoformat(),
        "time": start.isoformat(),
        "max_attendees": None,
    }
    payload.update(overrides)
    return payload
