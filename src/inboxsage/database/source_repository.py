"""Source repository for database operations."""

import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from inboxsage.core.enums import SourceType
from inboxsage.core.source import Source
from inboxsage.database.connection import DatabaseConnection
from inboxsage.utils.date_utils import from_db_datetime, now_utc, to_db_datetime
from inboxsage.utils.exceptions import DatabaseError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class SourceRepository:
    """Repository for user content sources."""

    def __init__(self, db: DatabaseConnection):
        """Initialize repository.

        Args:
            db: Database connection instance.
        """
        self.db = db

    def create_source(
        self,
        user_id: str,
        name: str,
        url: str,
        source_type: SourceType = SourceType.RSS,
        topic_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Source:
        """Register a feed for a user.

        Args:
            user_id: Owner of the source.
            name: Display name.
            url: Feed URL (unique per user).
            source_type: Kind of source.
            topic_id: Optional topic label.
            description: Optional free text.

        Returns:
            Created source.

        Raises:
            DatabaseError: If the URL is already registered or the insert fails.
        """
        source = Source(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            url=url,
            type=source_type,
            topic_id=topic_id,
            description=description,
        )
        try:
            self.db.execute(
                """
                INSERT INTO sources (
                    id, user_id, name, url, type, description, topic_id,
                    is_active, fetch_errors, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, 1, 0, ?)
                """,
                (
                    source.id,
                    source.user_id,
                    source.name,
                    source.url,
                    source.type.value,
                    source.description,
                    source.topic_id,
                    to_db_datetime(source.created_at),
                ),
            )
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("create_source_failed", user_id=user_id, url=url, error=str(e))
            raise DatabaseError(f"Failed to create source {url}: {e}") from e

        logger.info("source_created", source_id=source.id, user_id=user_id, type=source.type.value)
        return source

    def get_source(self, source_id: str) -> Optional[Source]:
        """Get a source by ID."""
        row = self.db.execute("SELECT * FROM sources WHERE id = ?", (source_id,)).fetchone()
        return self._row_to_source(row) if row else None

    def get_user_source(self, source_id: str, user_id: str) -> Optional[Source]:
        """Get a source only if it belongs to the given user."""
        row = self.db.execute(
            "SELECT * FROM sources WHERE id = ? AND user_id = ?",
            (source_id, user_id),
        ).fetchone()
        return self._row_to_source(row) if row else None

    def list_active_sources(self, user_id: str) -> List[Source]:
        """Active sources of a user, oldest first."""
        cursor = self.db.execute(
            """
            SELECT * FROM sources
            WHERE user_id = ? AND is_active = 1
            ORDER BY created_at
            """,
            (user_id,),
        )
        return [self._row_to_source(row) for row in cursor.fetchall()]

    def record_fetch_success(self, source_id: str, fetched_at: datetime) -> None:
        """Stamp last_fetched and reset the error counter."""
        self._update(
            "UPDATE sources SET last_fetched = ?, fetch_errors = 0 WHERE id = ?",
            (to_db_datetime(fetched_at), source_id),
        )

    def record_fetch_failure(self, source_id: str, fetched_at: datetime) -> None:
        """Stamp last_fetched and increment the error counter."""
        self._update(
            "UPDATE sources SET last_fetched = ?, fetch_errors = fetch_errors + 1 WHERE id = ?",
            (to_db_datetime(fetched_at), source_id),
        )

    def set_active(self, source_id: str, is_active: bool) -> None:
        """Enable or disable a source."""
        self._update(
            "UPDATE sources SET is_active = ? WHERE id = ?",
            (int(is_active), source_id),
        )

    def _update(self, query: str, params: tuple) -> None:
        try:
            self.db.execute(query, params)
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("source_update_failed", error=str(e))
            raise DatabaseError(f"Failed to update source: {e}") from e

    def _row_to_source(self, row: sqlite3.Row) -> Source:
        return Source(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            url=row["url"],
            type=row["type"],
            description=row["description"],
            topic_id=row["topic_id"],
            is_active=bool(row["is_active"]),
            last_fetched=from_db_datetime(row["last_fetched"]),
            fetch_errors=row["fetch_errors"],
            created_at=from_db_datetime(row["created_at"]) or now_utc(),
        )
