"""
QuickNotes — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── make_note: Builds transient Note ORM rows
    ├── db_tables: Creates the schema in a temporary SQLite database
    ├── test_client: HTTPX AsyncClient wired to the FastAPI app
    └── notes_client: NotesClient on top of test_client
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any quicknotes import builds the engine
_TEST_DB_DIR = tempfile.mkdtemp(prefix="quicknotes_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from quicknotes.client.api import NotesClient  # noqa: E402
from quicknotes.database import Base, engine  # noqa: E402
from quicknotes.models.note import Note  # noqa: E402
from quicknotes.schemas.note import NoteResponse  # noqa: E402

BASE_TIME = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_note():
    """Factory for transient Note rows with sensible defaults."""
    def _make(note_id=1, title="Groceries", content="Milk, eggs", favorite=False,
              created_at=None):
        return Note(
            id=note_id,
            title=title,
            content=content,
            favorite=favorite,
            created_at=created_at or BASE_TIME + timedelta(minutes=note_id),
        )
    return _make


@pytest.fixture
def make_note_response(make_note):
    """Factory for NoteResponse objects as the client would cache them."""
    def _make(**kwargs):
        return NoteResponse.model_validate(make_note(**kwargs))
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (temporary SQLite database)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_tables():
    """
    Creates the notes table before the test and drops it afterwards.

    The pool is disposed at teardown so no connection outlives the
    test's event loop.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_tables):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from quicknotes.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notes_client(test_client):
    """NotesClient talking to the app through the ASGI test transport."""
    client = NotesClient(http=test_client)
    yield client
    await client.aclose()
