"""Digest repository for database operations."""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from inboxsage.core.digest import Digest, DigestItem, DigestPreview
from inboxsage.database.connection import DatabaseConnection
from inboxsage.utils.date_utils import from_db_datetime, now_utc, to_db_datetime
from inboxsage.utils.exceptions import DatabaseError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class DigestRepository:
    """Repository for digest database operations."""

    def __init__(self, db: DatabaseConnection):
        """Initialize repository.

        Args:
            db: Database connection instance.
        """
        self.db = db

    def save_digest(
        self,
        user_id: str,
        preview: DigestPreview,
        scheduled_for: Optional[datetime] = None,
    ) -> Digest:
        """Persist a composed digest and its ordered items.

        Items keep the preview's order and highlight flags; each item's
        custom summary is the article summary at composition time.

        Args:
            user_id: Recipient user.
            preview: Composed digest.
            scheduled_for: Delivery time the digest was generated for.

        Returns:
            Stored digest, not yet sent.

        Raises:
            DatabaseError: If database operation fails.
        """
        logger.info("saving_digest", user_id=user_id, item_count=len(preview.items))

        digest = Digest(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=preview.title,
            introduction=preview.introduction,
            highlights=preview.highlights,
            conclusion=preview.conclusion,
            scheduled_for=scheduled_for or preview.generated_at,
            generated_at=preview.generated_at,
        )
        digest.items = [
            DigestItem(
                digest_id=digest.id,
                article_id=item.article.id,
                order=item.order,
                is_highlight=item.is_highlight,
                custom_summary=item.article.summary,
            )
            for item in preview.items
        ]

        try:
            with self.db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO digests (
                        id, user_id, title, introduction, highlights, conclusion,
                        scheduled_for, generated_at, email_sent
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0)
                    """,
                    (
                        digest.id,
                        digest.user_id,
                        digest.title,
                        digest.introduction,
                        json.dumps(digest.highlights),
                        digest.conclusion,
                        to_db_datetime(digest.scheduled_for),
                        to_db_datetime(digest.generated_at),
                    ),
                )
                conn.executemany(
                    """
                    INSERT INTO digest_items (
                        digest_id, article_id, item_order, is_highlight, custom_summary
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            item.digest_id,
                            item.article_id,
                            item.order,
                            int(item.is_highlight),
                            item.custom_summary,
                        )
                        for item in digest.items
                    ],
                )
        except sqlite3.Error as e:
            logger.error("save_digest_failed", user_id=user_id, error=str(e))
            raise DatabaseError(f"Failed to save digest: {e}") from e

        logger.info("digest_saved", digest_id=digest.id, user_id=user_id)
        return digest

    def get_digest(self, digest_id: str) -> Optional[Digest]:
        """Get a digest with its items in order."""
        row = self.db.execute("SELECT * FROM digests WHERE id = ?", (digest_id,)).fetchone()
        if not row:
            return None

        digest = self._row_to_digest(row)
        cursor = self.db.execute(
            "SELECT * FROM digest_items WHERE digest_id = ? ORDER BY item_order",
            (digest_id,),
        )
        digest.items = [
            DigestItem(
                id=item["id"],
                digest_id=item["digest_id"],
                article_id=item["article_id"],
                order=item["item_order"],
                is_highlight=bool(item["is_highlight"]),
                custom_summary=item["custom_summary"],
            )
            for item in cursor.fetchall()
        ]
        return digest

    def mark_sent(self, digest_id: str, sent_at: datetime, email_id: Optional[str]) -> None:
        """Record a successful delivery."""
        self._update(
            """
            UPDATE digests SET email_sent = 1, sent_at = ?, email_id = ?, email_error = NULL
            WHERE id = ?
            """,
            (to_db_datetime(sent_at), email_id, digest_id),
        )

    def mark_failed(self, digest_id: str, error: str) -> None:
        """Record a delivery failure; the digest stays unsent."""
        self._update(
            "UPDATE digests SET email_sent = 0, email_error = ? WHERE id = ?",
            (error, digest_id),
        )

    def has_sent_digest_since(self, user_id: str, since: datetime) -> bool:
        """Whether a digest was successfully sent to the user at or after `since`."""
        cursor = self.db.execute(
            """
            SELECT 1 FROM digests
            WHERE user_id = ? AND email_sent = 1 AND sent_at >= ?
            LIMIT 1
            """,
            (user_id, to_db_datetime(since)),
        )
        return cursor.fetchone() is not None

    def list_digests(self, user_id: str, limit: int = 10) -> List[Digest]:
        """Most recent digests of a user (without items)."""
        cursor = self.db.execute(
            """
            SELECT * FROM digests
            WHERE user_id = ?
            ORDER BY generated_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [self._row_to_digest(row) for row in cursor.fetchall()]

    def _update(self, query: str, params: tuple) -> None:
        try:
            self.db.execute(query, params)
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("digest_update_failed", error=str(e))
            raise DatabaseError(f"Failed to update digest: {e}") from e

    def _row_to_digest(self, row: sqlite3.Row) -> Digest:
        return Digest(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            introduction=row["introduction"],
            highlights=json.loads(row["highlights"] or "[]"),
            conclusion=row["conclusion"],
            scheduled_for=from_db_datetime(row["scheduled_for"]),
            generated_at=from_db_datetime(row["generated_at"]) or now_utc(),
            sent_at=from_db_datetime(row["sent_at"]),
            email_sent=bool(row["email_sent"]),
            email_error=row["email_error"],
            email_id=row["email_id"],
        )
