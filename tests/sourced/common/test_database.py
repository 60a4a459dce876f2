"""Tests for the default database handle."""

from typing import Any

import psycopg2
import pytest
from psycopg2.extras import RealDictCursor

from sourced.common.config import SourcedConfig
from sourced.common.database import (
    DatabaseConnectionError,
    connect,
    open_default_database,
)


def test_connect_passes_configured_parameters(
    mocker: Any, test_config: SourcedConfig, mock_pg_connection: Any
) -> None:
    mock_connect = mocker.patch(
        "sourced.common.database.psycopg2.connect", return_value=mock_pg_connection
    )

    conn = connect(test_config)

    assert conn is mock_pg_connection
    mock_connect.assert_called_once_with(
        host="test-db",
        port=5433,
        user="test",
        password="secret",
        dbname="sourced_test",
        sslmode="disable",
        connect_timeout=30,
        cursor_factory=RealDictCursor,
    )


def test_connect_failure_raises_database_connection_error(
    mocker: Any, test_config: SourcedConfig
) -> None:
    mocker.patch(
        "sourced.common.database.psycopg2.connect",
        side_effect=psycopg2.OperationalError("connection refused"),
    )

    with pytest.raises(DatabaseConnectionError, match="connection refused") as exc_info:
        connect(test_config)

    assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)


def test_open_default_database_validates_connection(
    mocker: Any, test_config: SourcedConfig, mock_pg_connection: Any, mock_pg_cursor: Any
) -> None:
    mocker.patch("sourced.common.database.psycopg2.connect", return_value=mock_pg_connection)

    conn = open_default_database(test_config)

    assert conn is mock_pg_connection
    mock_pg_cursor.execute.assert_called_once_with("SELECT 1")
    mock_pg_connection.close.assert_not_called()


def test_open_default_database_closes_connection_when_ping_fails(
    mocker: Any, test_config: SourcedConfig, mock_pg_connection: Any, mock_pg_cursor: Any
) -> None:
    mocker.patch("sourced.common.database.psycopg2.connect", return_value=mock_pg_connection)
    mock_pg_cursor.execute.side_effect = psycopg2.DatabaseError("server closed the connection")

    with pytest.raises(DatabaseConnectionError, match="ping failed"):
        open_default_database(test_config)

    mock_pg_connection.close.assert_called_once()


def test_open_default_database_uses_global_config(
    mocker: Any, monkeypatch: pytest.MonkeyPatch, mock_pg_connection: Any
) -> None:
    monkeypatch.setenv("POSTGRES_HOST", "db.internal")
    mock_connect = mocker.patch(
        "sourced.common.database.psycopg2.connect", return_value=mock_pg_connection
    )

    open_default_database()

    assert mock_connect.call_args.kwargs["host"] == "db.internal"
