"""Shared pytest fixtures for the sourced-core test suite.

No live PostgreSQL is needed: connections are MagicMock doubles and every
temporary directory lives under pytest's tmp_path.
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from sourced.common.config import SourcedConfig, get_config
from sourced.core.container import reset_container
from sourced.schemas.models import FetchStatus, Mention, Repository
from tests.utils.mocks import create_mock_pg_connection

# ========== Test Environment Setup ==========

_CONFIG_ENV_VARS = (
    "TEMP_DIR",
    "REMOVE_TEMP_DIR_ON_CLOSE",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Start every test with no config overrides and a fresh default container."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    reset_container()
    yield
    reset_container()
    get_config.cache_clear()


@pytest.fixture
def root_logger_state() -> Any:
    """Restore root logger handlers and level after setup_logging() replaces them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def restore_umask() -> Any:
    """Pin the umask to 022 so directory modes are predictable."""
    previous = os.umask(0o022)
    yield
    os.umask(previous)


# ========== Configuration Fixtures ==========


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    """Temp root that does not exist yet, so providers have to create it."""
    return tmp_path / "sourced_test"


@pytest.fixture
def test_config(temp_root: Path) -> SourcedConfig:
    """Provide a configuration pointing at a scratch temp root and a fake database."""
    return SourcedConfig(
        temp_dir=str(temp_root),
        postgres_host="test-db",
        postgres_port=5433,
        postgres_db="sourced_test",
        postgres_user="test",
        postgres_password="secret",
        log_level="DEBUG",
    )


# ========== Mock Service Fixtures ==========


@pytest.fixture
def mock_pg_connection(mocker: Any) -> Any:
    """Mock psycopg2 connection for unit tests."""
    return create_mock_pg_connection(mocker)


@pytest.fixture
def mock_pg_cursor(mock_pg_connection: Any) -> Any:
    """The cursor handed out by ``mock_pg_connection``."""
    return mock_pg_connection.cursor.return_value.__enter__.return_value


# ========== Test Data Factories ==========


@pytest.fixture
def sample_repository() -> Repository:
    now = datetime.now(UTC)
    return Repository(
        endpoints=["https://github.com/src-d/go-git.git", "git://github.com/src-d/go-git.git"],
        fetch_status=FetchStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_mention() -> Mention:
    return Mention(
        endpoint="https://github.com/src-d/go-git.git",
        provider="github",
        context={"event": "push"},
    )
