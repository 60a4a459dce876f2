"""Tests for store schema creation."""

from typing import Any

import psycopg2
import pytest

from sourced.common.db_schema import SCHEMA_SQL, TABLES, create_schema


def test_schema_defines_every_table() -> None:
    for table in TABLES:
        assert f"CREATE TABLE IF NOT EXISTS {table}" in SCHEMA_SQL


def test_create_schema_executes_and_commits(
    mock_pg_connection: Any, mock_pg_cursor: Any
) -> None:
    create_schema(mock_pg_connection)

    mock_pg_cursor.execute.assert_called_once_with(SCHEMA_SQL)
    mock_pg_connection.commit.assert_called_once()
    mock_pg_connection.rollback.assert_not_called()


def test_create_schema_rolls_back_on_error(
    mock_pg_connection: Any, mock_pg_cursor: Any
) -> None:
    mock_pg_cursor.execute.side_effect = psycopg2.ProgrammingError("syntax error")

    with pytest.raises(psycopg2.ProgrammingError):
        create_schema(mock_pg_connection)

    mock_pg_connection.rollback.assert_called_once()
    mock_pg_connection.commit.assert_not_called()
