"""Shared test fixtures for the process mapper backend.

Provides:
- Async PostgreSQL test database (session-scoped engine, per-test rollback),
  used only by the report snapshot tests; skipped when PostgreSQL is missing
- FastAPI test apps and HTTP clients, with and without a database
- Factory helpers for building process maps and sessions in a given state
"""

from __future__ import annotations

import os

# Set test environment BEFORE any app imports so Settings() picks them up.
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["GENERATOR_ENABLED"] = "false"
os.environ["SMTP_HOST"] = ""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from process_mapper.models import Base

# ---------------------------------------------------------------------------
# Database engine
# ---------------------------------------------------------------------------


def _test_db_url() -> str:
    user = os.getenv("POSTGRES_USER", "processmapper")
    password = os.getenv("POSTGRES_PASSWORD", "processmapper")
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("TEST_POSTGRES_DB", "processmapper_test")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine and all tables. Drops tables at teardown.

    Sync fixture with NullPool so every ``engine.connect()`` in the per-test
    ``db`` fixture opens a fresh asyncpg connection on the current loop.
    """
    url = _test_db_url()
    engine = create_async_engine(url, echo=False, poolclass=NullPool)

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    async def _teardown():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

    try:
        asyncio.run(_setup())
    except Exception as exc:
        asyncio.run(engine.dispose())
        pytest.skip(f"Test database not available ({exc})")

    yield engine

    asyncio.run(_teardown())


# ---------------------------------------------------------------------------
# Per-test transactional session (savepoint rollback pattern)
# ---------------------------------------------------------------------------


@pytest.fixture
async def db(test_engine):
    """Provide a transactional session that rolls back after each test.

    ``session.commit()`` in code under test releases the current savepoint;
    the ``after_transaction_end`` listener opens a new one.  The outer
    transaction is rolled back at teardown.
    """
    conn = await test_engine.connect()
    trans = await conn.begin()
    session = AsyncSession(bind=conn, expire_on_commit=False)

    await conn.begin_nested()

    @sa_event.listens_for(session.sync_session, "after_transaction_end")
    def _restart_savepoint(sess, transaction):
        if conn.closed or conn.invalidated:
            return
        if not conn.in_nested_transaction():
            conn.sync_connection.begin_nested()

    yield session

    await session.close()
    await trans.rollback()
    await conn.close()


# ---------------------------------------------------------------------------
# FastAPI test apps + HTTP clients
# ---------------------------------------------------------------------------


def _build_app():
    from fastapi import FastAPI
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    from process_mapper.api.v1.router import api_router
    from process_mapper.config import settings
    from process_mapper.core.rate_limit import limiter

    test_app = FastAPI()
    test_app.state.limiter = limiter
    test_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    test_app.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return test_app


@pytest.fixture
async def app():
    """Minimal FastAPI test app. Endpoints that need a database are not usable."""
    test_app = _build_app()
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
async def db_app(db):
    """Test app with ``get_db`` overridden to use the rolled-back test session."""
    from process_mapper.database import get_db

    test_app = _build_app()

    async def _override_get_db():
        yield db

    test_app.dependency_overrides[get_db] = _override_get_db
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
async def db_client(db_app):
    async with AsyncClient(transport=ASGITransport(app=db_app), base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Global state cleanup (autouse)
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_session_store():
    """Every test starts with an empty in-process session store."""
    from process_mapper.services.mapping_session import session_store

    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Disable slowapi rate limiting during tests to avoid 429 responses."""
    from process_mapper.core.rate_limit import limiter

    limiter.enabled = False
    yield
    limiter.enabled = True


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_process(pid: str, name: str, category: str = "core", **kwargs):
    from process_mapper.schemas.process_map import Process

    return Process(id=pid, name=name, category=category, **kwargs)


def make_map(processes, interactions=None):
    from process_mapper.schemas.process_map import ProcessMap

    return ProcessMap.from_processes(processes, interactions or [])


def link(src: str, dst: str, description: str | None = None):
    from process_mapper.schemas.process_map import Interaction

    return Interaction(from_=src, to=dst, description=description)


def make_result(process_map=None, industry_label: str = "Manufacturing", source: str = "benchmark"):
    from process_mapper.services.process_map_service import GenerationResult, build_deterministic_map

    if process_map is None:
        return build_deterministic_map(industry_label, [])
    return GenerationResult(process_map, industry_label, source)


def make_session(state: str = "input"):
    """Build a MappingSession walked forward to *state* with a Manufacturing map."""
    from process_mapper.services.mapping_session import MappingSession

    session = MappingSession()
    if state == "input":
        return session
    ticket = session.begin_generation("Manufacturing", [])
    session.apply_generation(ticket, make_result())
    if state == "generated":
        return session
    session.edit()
    if state == "editing":
        return session
    session.request_report("owner@example.com")
    if state == "gated":
        return session
    session.complete("report-1")
    return session
