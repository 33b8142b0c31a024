"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite database file shared by every non-unit test
- Table cleanup and title seeding before each integration / e2e test
- A fake clock, plus repositories and services wired to it
- The session-scoped TestClient for e2e tests

Architecture:
- Unit tests (test/**/unit/): AsyncMock collaborators, no database
- Integration tests: real repositories on SQLite, fake clock
- E2E tests (test/e2e/): HTTP through the FastAPI app, fake clock injected via DI
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_dir = Path(tempfile.mkdtemp(prefix=f'showtime_reservation_{worker_id}_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / "test.db"}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # The scheduler is driven explicitly through run_once() in tests
    os.environ['RECONCILIATION_ENABLED'] = 'false'
    os.environ.setdefault('DB_SQLITE_BUSY_TIMEOUT', '30')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine, insert  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from src.platform.config.core_setting import settings  # noqa: E402
from src.platform.database.orm_db_setting import Base, Database  # noqa: E402
import src.platform.database.model_registry  # noqa: E402, F401
from src.service.showtime.driven_adapter.model.title_model import TitleModel  # noqa: E402
from test.constants import SEEDED_TITLES  # noqa: E402
from test.fake_clock import FakeClock  # noqa: E402


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
def _sync_database_url() -> str:
    return settings.DATABASE_URL_ASYNC.replace('+aiosqlite', '')


_sync_engine = create_engine(_sync_database_url(), poolclass=NullPool)
Base.metadata.create_all(_sync_engine)


def _reset_tables() -> None:
    with _sync_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
        conn.execute(insert(TitleModel), SEEDED_TITLES)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            item.fixturenames.insert(0, 'clean_database')


@pytest.fixture(scope='function')
def clean_database() -> None:
    _reset_tables()


# =============================================================================
# Clock and Persistence Fixtures
# =============================================================================
@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database()
    yield db
    await db.dispose()


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def e2e_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope='session')
def client(e2e_clock: FakeClock) -> Generator[TestClient, None, None]:
    from src.platform.config.di import container
    from test.test_main import app

    container.reset_singletons()
    container.clock.override(providers.Object(e2e_clock))
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        container.clock.reset_override()
        container.reset_singletons()


@pytest.fixture(autouse=True)
def reset_e2e_clock(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    # Only e2e tests share the session clock
    if 'e2e' in [m.name for m in request.node.iter_markers()]:
        request.getfixturevalue('e2e_clock').reset()
    yield


from test.fixture_loader import *  # noqa: E402, F401, F403
