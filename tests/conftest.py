"""Global pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from mysqlkit import MySQLManager, Settings, setup_test_logging

from tests.utils.helpers import RecordingObserver

POOL_SIZE = 2


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture
def sqlite_settings() -> Settings:
    """Settings matching the SQLite test engine."""
    return Settings(
        ssl_enabled=False,
        pool_size=POOL_SIZE,
        max_overflow=0,
        table_options="",
    )


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Pooled async engine over a temporary SQLite database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=POOL_SIZE,
        max_overflow=0,
    )
    yield engine
    await engine.dispose()


@pytest.fixture
def observer() -> RecordingObserver:
    """Observer recording pool events."""
    return RecordingObserver()


@pytest_asyncio.fixture
async def db_manager(
    sqlite_settings: Settings,
    sqlite_engine: AsyncEngine,
    observer: RecordingObserver,
) -> AsyncIterator[MySQLManager]:
    """Connected manager running on the SQLite engine."""
    manager = MySQLManager(sqlite_settings, engine=sqlite_engine, observers=[observer])
    async with manager:
        yield manager
