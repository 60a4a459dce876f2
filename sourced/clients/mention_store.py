"""PostgreSQL store for Mention records."""

from typing import Any
from uuid import UUID

import psycopg2
from psycopg2.extensions import connection
from psycopg2.extras import Json, RealDictCursor

from sourced.common.logging import get_logger
from sourced.schemas.models import Mention

logger = get_logger(__name__)


class MentionStore:
    """Data-access object for the ``mentions`` table."""

    def __init__(self, conn: connection) -> None:
        """Initialize with PostgreSQL connection.

        Args:
            conn: psycopg2 connection object.
        """
        self.conn = conn
        logger.info("Initialized MentionStore")

    def create(self, mention: Mention) -> None:
        """Insert a mention record."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO mentions (id, endpoint, provider, vcs, context, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s)
                """,
                    (
                        str(mention.id),
                        mention.endpoint,
                        mention.provider,
                        mention.vcs.value,
                        Json(mention.context),
                        mention.created_at,
                    ),
                )
        except psycopg2.Error:
            self.conn.rollback()
            raise

        self.conn.commit()
        logger.debug(f"Created mention {mention.id} for {mention.endpoint}")

    def get(self, mention_id: UUID) -> Mention | None:
        """Return the mention with the given id, or None."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT * FROM mentions WHERE id = %s", (str(mention_id),))
                row = cur.fetchone()
        finally:
            # Reads also open a transaction on the shared handle.
            self.conn.rollback()

        return self._to_model(row) if row else None

    def list_by_endpoint(self, endpoint: str, limit: int | None = None) -> list[Mention]:
        """Return mentions of ``endpoint``, newest first.

        Args:
            endpoint: Clone URL to look up.
            limit: Optional max number of mentions to return.
        """
        query = """
            SELECT * FROM mentions
            WHERE endpoint = %s
            ORDER BY created_at DESC
        """
        params: list[object] = [endpoint]
        if limit is not None:
            query += " LIMIT %s"
            params.append(limit)

        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        finally:
            self.conn.rollback()

        return [self._to_model(row) for row in rows]

    def count(self) -> int:
        """Return the number of stored mentions."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT COUNT(*) AS total FROM mentions")
                row = cur.fetchone()
        finally:
            self.conn.rollback()

        return int(row["total"]) if row else 0

    @staticmethod
    def _to_model(row: dict[str, Any]) -> Mention:
        data = dict(row)
        data["context"] = data.get("context") or {}
        return Mention.model_validate(data)


__all__ = ["MentionStore"]
