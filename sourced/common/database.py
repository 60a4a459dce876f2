"""Default PostgreSQL database handle.

Opens a connection with the configured default credentials and validates it
with a round trip before handing it out. A handle that cannot answer
``SELECT 1`` is never returned.
"""

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extras import RealDictCursor

from sourced.common.config import SourcedConfig, get_config
from sourced.common.logging import get_logger

logger = get_logger(__name__)


class DatabaseConnectionError(ConnectionError):
    """Exception raised when the default database cannot be opened."""

    pass


def connect(config: SourcedConfig) -> connection:
    """Create a PostgreSQL connection from config.

    Args:
        config: Configuration with the postgres_* connection parameters.

    Returns:
        connection: psycopg2 connection using RealDictCursor for dict rows.

    Raises:
        DatabaseConnectionError: On connection failure.
    """
    try:
        conn = psycopg2.connect(
            host=config.postgres_host,
            port=config.postgres_port,
            user=config.postgres_user,
            password=config.postgres_password.get_secret_value(),
            dbname=config.postgres_db,
            sslmode=config.postgres_sslmode,
            connect_timeout=config.postgres_connect_timeout,
            cursor_factory=RealDictCursor,
        )
    except psycopg2.Error as e:
        logger.exception(
            "Failed to connect to PostgreSQL",
            extra={"host": config.postgres_host, "database": config.postgres_db},
        )
        raise DatabaseConnectionError(f"Failed to connect to PostgreSQL: {e}") from e

    logger.info(
        "PostgreSQL connection opened",
        extra={"host": config.postgres_host, "database": config.postgres_db},
    )
    return conn


def ping(conn: connection) -> None:
    """Run a trivial query to prove the connection is usable.

    Raises:
        DatabaseConnectionError: If the query fails.
    """
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
        conn.rollback()
    except psycopg2.Error as e:
        logger.exception("PostgreSQL ping failed")
        raise DatabaseConnectionError(f"PostgreSQL ping failed: {e}") from e


def open_default_database(config: SourcedConfig | None = None) -> connection:
    """Open and validate the default database connection.

    The connection is closed again if validation fails, so callers either get
    a working handle or an exception.

    Args:
        config: Optional configuration, defaults to get_config().

    Returns:
        connection: A validated psycopg2 connection.

    Raises:
        DatabaseConnectionError: If connecting or validating fails.

    Example:
        >>> conn = open_default_database()
        >>> with conn.cursor() as cur:
        ...     cur.execute("SELECT count(*) AS n FROM repositories")
    """
    config = config or get_config()
    conn = connect(config)
    try:
        ping(conn)
    except DatabaseConnectionError:
        conn.close()
        raise
    return conn


__all__ = ["DatabaseConnectionError", "connect", "open_default_database", "ping"]
