"""Helper functions for constructing common test doubles."""

from typing import Any


def create_mock_pg_connection(mocker: Any) -> Any:
    """Create a mocked psycopg2 connection whose cursor() works as a context manager.

    The cursor yielded by ``with conn.cursor() as cur`` is the same object for
    every call, reachable as ``conn.cursor.return_value.__enter__.return_value``.
    """

    mock_conn = mocker.MagicMock(name="connection")
    mock_cursor = mocker.MagicMock(name="cursor")
    mock_cursor.fetchone.return_value = None
    mock_cursor.fetchall.return_value = []
    mock_cursor.rowcount = 0
    mock_context = mock_conn.cursor.return_value
    mock_context.__enter__.return_value = mock_cursor
    mock_context.__exit__.return_value = None
    return mock_conn
