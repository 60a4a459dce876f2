"""PostgreSQL store for Repository records."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extras import RealDictCursor

from sourced.common.logging import get_logger
from sourced.schemas.models import FetchStatus, Repository

logger = get_logger(__name__)


class RepositoryStore:
    """Data-access object for the ``repositories`` table.

    Bound to a single database handle for its whole life; the handle is
    shared with the other stores of the process and is not closed here.
    """

    def __init__(self, conn: connection) -> None:
        """Initialize with PostgreSQL connection.

        Args:
            conn: psycopg2 connection object.
        """
        self.conn = conn
        logger.info("Initialized RepositoryStore")

    def create(self, repository: Repository) -> None:
        """Insert a repository record.

        Args:
            repository: Repository model to persist.
        """
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO repositories (
                        id, endpoints, fetch_status, created_at, updated_at,
                        fetched_at, fetch_error_at, last_commit_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                    (
                        str(repository.id),
                        repository.endpoints,
                        repository.fetch_status.value,
                        repository.created_at,
                        repository.updated_at,
                        repository.fetched_at,
                        repository.fetch_error_at,
                        repository.last_commit_at,
                    ),
                )
        except psycopg2.Error:
            self.conn.rollback()
            raise

        self.conn.commit()
        logger.debug(f"Created repository {repository.id}")

    def get(self, repository_id: UUID) -> Repository | None:
        """Return the repository with the given id, or None."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT * FROM repositories WHERE id = %s", (str(repository_id),))
                row = cur.fetchone()
        finally:
            # Reads also open a transaction on the shared handle.
            self.conn.rollback()

        return self._to_model(row) if row else None

    def find_by_endpoint(self, endpoint: str) -> Repository | None:
        """Return the repository that lists ``endpoint`` among its endpoints.

        When several match, the oldest one wins.
        """
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    """
                    SELECT * FROM repositories
                    WHERE %s = ANY(endpoints)
                    ORDER BY created_at ASC
                    LIMIT 1
                """,
                    (endpoint,),
                )
                row = cur.fetchone()
        finally:
            self.conn.rollback()

        return self._to_model(row) if row else None

    def update_fetch_status(self, repository_id: UUID, status: FetchStatus) -> bool:
        """Set the fetch status of a repository.

        Fetched repositories get ``fetched_at`` stamped; ``not_found`` stamps
        ``fetch_error_at``.

        Returns:
            bool: True if a row was updated.
        """
        now = datetime.now(UTC)
        fetched_at = now if status == FetchStatus.FETCHED else None
        error_at = now if status == FetchStatus.NOT_FOUND else None

        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE repositories
                    SET fetch_status = %s,
                        updated_at = %s,
                        fetched_at = COALESCE(%s, fetched_at),
                        fetch_error_at = COALESCE(%s, fetch_error_at)
                    WHERE id = %s
                """,
                    (status.value, now, fetched_at, error_at, str(repository_id)),
                )
                updated = cur.rowcount > 0
        except psycopg2.Error:
            self.conn.rollback()
            raise

        self.conn.commit()
        if updated:
            logger.info(f"Repository {repository_id} marked {status.value}")
        else:
            logger.warning(f"Repository {repository_id} not found for status update")
        return updated

    def count(self) -> int:
        """Return the number of stored repositories."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT COUNT(*) AS total FROM repositories")
                row = cur.fetchone()
        finally:
            self.conn.rollback()

        return int(row["total"]) if row else 0

    @staticmethod
    def _to_model(row: dict[str, Any]) -> Repository:
        return Repository.model_validate(dict(row))


__all__ = ["RepositoryStore"]
