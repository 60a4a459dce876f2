"""PostgreSQL schema for the repository and mention stores."""

import psycopg2
from psycopg2.extensions import connection

from sourced.common.logging import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS repositories (
    id UUID PRIMARY KEY,
    endpoints TEXT[] NOT NULL,
    fetch_status VARCHAR(16) NOT NULL,
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL,
    fetched_at TIMESTAMPTZ,
    fetch_error_at TIMESTAMPTZ,
    last_commit_at TIMESTAMPTZ
);

CREATE INDEX IF NOT EXISTS repositories_endpoints_idx
    ON repositories USING GIN (endpoints);

CREATE TABLE IF NOT EXISTS mentions (
    id UUID PRIMARY KEY,
    endpoint TEXT NOT NULL,
    provider VARCHAR(128) NOT NULL,
    vcs VARCHAR(16) NOT NULL,
    context JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL
);

CREATE INDEX IF NOT EXISTS mentions_endpoint_idx ON mentions (endpoint);
"""

TABLES = ("repositories", "mentions")


def create_schema(conn: connection) -> None:
    """Create the store tables if they do not exist.

    Executes in a single transaction; rolls back on failure.

    Raises:
        psycopg2.Error: If any statement fails.
    """
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
    except psycopg2.Error:
        conn.rollback()
        logger.exception("Schema creation failed")
        raise

    logger.info("Schema ready", extra={"tables": list(TABLES)})


__all__ = ["SCHEMA_SQL", "TABLES", "create_schema"]
