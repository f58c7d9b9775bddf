"""Shared fixtures for Holiday API tests.

Uses SQLite (aiosqlite) by default, no PostgreSQL required.
Set TEST_DATABASE_URL to override (e.g. for CI with real PostgreSQL).
"""

import os
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

# Ensure settings never point at a real server during tests
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from holiday_api.database import Base, engine_options  # noqa: E402
from holiday_api.models.holiday import Holiday  # noqa: E402
from holiday_api.services.holiday_fetcher import FetchResult  # noqa: E402

_engine_kwargs = engine_options(TEST_DATABASE_URL)


# ---------------------------------------------------------------------------
# Fresh schema per test
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def db_engine():
    import holiday_api.models  # noqa: F401  (populates Base.metadata)

    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    session_factory = async_sessionmaker(
        bind=db_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# Reset rate-limiter counters before every test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Clear in-memory rate-limit counters so tests never block each other."""
    from holiday_api.core.rate_limit import limiter

    storage = getattr(limiter, "_storage", None)
    if storage is not None and hasattr(storage, "reset"):
        storage.reset()


# ---------------------------------------------------------------------------
# Fake holiday API
# ---------------------------------------------------------------------------

class FakeFetcher:
    """Stands in for HolidayFetcher; returns ``result`` or raises ``error``."""

    def __init__(self):
        self.result = FetchResult(status_code=200, holidays=[])
        self.error: Exception | None = None
        self.calls: list[tuple[int, str]] = []

    async def fetch(self, year: int, country_code: str) -> FetchResult:
        self.calls.append((year, country_code))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture()
def add_holidays(db_session: AsyncSession):
    """Insert holidays directly: ``await add_holidays(("US", date, name, local_name), ...)``."""

    async def _add(*entries: tuple[str, date, str, str]) -> list[Holiday]:
        holidays = [
            Holiday(country_code=code, date=day, name=name, local_name=local_name)
            for code, day, name, local_name in entries
        ]
        db_session.add_all(holidays)
        await db_session.flush()
        return holidays

    return _add


# ---------------------------------------------------------------------------
# HTTP test client
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def client(db_session: AsyncSession, fake_fetcher: FakeFetcher):
    from holiday_api.core.dependencies import get_holiday_fetcher
    from holiday_api.database import get_db
    from holiday_api.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_holiday_fetcher] = lambda: fake_fetcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
