"""
HISS Backend — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the database gets a fresh in-memory SQLite
       store (aiosqlite) with the full schema created from the ORM metadata.
       The API client runs the real get_db_session dependency against that
       store, so commits and rollbacks behave as in production.

Fixture Hierarchy (all function-scoped):
    db_engine ──┬── db_session ── seeded_reports
                └── test_client
    mock_db_session: AsyncMock session for error-path unit tests
"""

import os
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any application imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["STATIC_DIR"] = "/nonexistent-static-dir"
os.environ["DB_CREATE_SCHEMA"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hiss import database
from hiss.database import create_schema
from hiss.models.radiology import Radiology


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with every table created.

    StaticPool keeps the single in-memory connection alive, so all sessions
    of one test see the same data.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for tests that need the database to misbehave.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════

def make_report(report_uid: int, pid: int, **overrides) -> dict:
    """Column values for one radiology report row."""
    ordered_at = datetime(2019, 3, 1, 8, 30) + timedelta(days=report_uid)
    values = {
        "pid": pid,
        "eid": pid * 10 + report_uid,
        "order_uid": 5000 + report_uid,
        "examination": "CT head without contrast",
        "request": "Acute left-sided weakness",
        "ordered_at": ordered_at,
        "discipline": "Neuroradiology",
        "report_uid": report_uid,
        "comment": "",
        "examination_started_at": ordered_at + timedelta(minutes=40),
        "report_type": "final",
        "report": f"Report {report_uid}: no acute intracranial hemorrhage.",
    }
    values.update(overrides)
    return values


@pytest_asyncio.fixture
async def seeded_reports(db_session):
    """
    Five reports: report_uid 1-3 belong to patient 100, 4-5 to patient 200.
    """
    rows = [
        Radiology(**make_report(1, 100)),
        Radiology(**make_report(2, 100, examination=None, request=None)),
        Radiology(**make_report(3, 100)),
        Radiology(**make_report(4, 200)),
        Radiology(**make_report(5, 200)),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest.fixture
def stroke_payload():
    return {
        "report_uid": 1,
        "eid": 2,
        "pid": 3,
        "kind": "infarct",
        "temporal": "acute",
        "location": "MCA territory",
        "side": "left",
        "extent": "small",
    }


@pytest.fixture
def angio_payload():
    return {
        "report_uid": 1,
        "eid": 2,
        "pid": 3,
        "vessel": "M1",
        "side": "left",
        "finding": "occlusion",
    }


@pytest.fixture
def degenerative_payload():
    return {
        "report_uid": 1,
        "eid": 2,
        "pid": 3,
        "cortical_atrophy": "moderate",
        "cortical_atrophy_description": "symmetric",
        "central_atrophy": "light",
        "microangiopathy": "severe",
    }


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine, monkeypatch):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session is left in place; only its session factory is pointed at
    the test engine.

    Usage:
        async def test_values(test_client):
            response = await test_client.get("/values")
            assert response.status_code == 200
    """
    from hiss.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "async_session_factory", factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
