"""Article repository for database operations."""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from inboxsage.core.article import Article, ArticleProcessingResult
from inboxsage.core.source import FeedEntry, Source
from inboxsage.database.connection import DatabaseConnection
from inboxsage.utils.date_utils import from_db_datetime, now_utc, to_db_datetime
from inboxsage.utils.exceptions import DatabaseError
from inboxsage.utils.logging import get_logger
from inboxsage.utils.text_utils import extract_tags

logger = get_logger(__name__)


class ArticleRepository:
    """Repository for article database operations."""

    def __init__(self, db: DatabaseConnection):
        """Initialize repository.

        Args:
            db: Database connection instance.
        """
        self.db = db

    def save_feed_entries(self, source: Source, entries: List[FeedEntry]) -> int:
        """Persist fetched entries as new articles, skipping known URLs.

        An article is identified by (source, url); entries already stored
        for this source are left untouched. A failure on one entry is logged
        and does not stop the rest.

        Args:
            source: Source the entries were fetched from.
            entries: Normalized feed entries.

        Returns:
            Number of articles newly inserted.

        Raises:
            DatabaseError: If the database is unreachable.
        """
        # Surface connection failures to the caller
        self.db.connect()

        logger.info("saving_feed_entries", source_id=source.id, count=len(entries))

        saved_count = 0
        for entry in entries:
            try:
                if self.article_exists(source.id, entry.url):
                    logger.debug("article_already_exists", source_id=source.id, url=entry.url)
                    continue

                now = now_utc()
                self.db.execute(
                    """
                    INSERT INTO articles (
                        id, source_id, topic_id, title, url, content, excerpt,
                        author, published_at, reading_time, image_url, tags,
                        is_processed, is_included, key_takeaways,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, 1, '[]', ?, ?)
                    """,
                    (
                        uuid.uuid4().hex,
                        source.id,
                        source.topic_id,
                        entry.title,
                        entry.url,
                        entry.content,
                        entry.excerpt,
                        entry.author,
                        to_db_datetime(entry.published_at),
                        entry.reading_time,
                        entry.image_url,
                        json.dumps(extract_tags(entry.content or entry.title)),
                        to_db_datetime(now),
                        to_db_datetime(now),
                    ),
                )
                self.db.commit()
                saved_count += 1
            except sqlite3.IntegrityError:
                # Lost a race with a concurrent fetch of the same source
                self.db.rollback()
                logger.debug("article_insert_conflict", source_id=source.id, url=entry.url)
            except sqlite3.Error as e:
                self.db.rollback()
                logger.error(
                    "article_insert_failed",
                    source_id=source.id,
                    url=entry.url,
                    error=str(e),
                )

        logger.info("feed_entries_saved", source_id=source.id, saved=saved_count)
        return saved_count

    def article_exists(self, source_id: str, url: str) -> bool:
        """Check whether an article with this URL is stored for the source."""
        cursor = self.db.execute(
            "SELECT 1 FROM articles WHERE source_id = ? AND url = ? LIMIT 1",
            (source_id, url),
        )
        return cursor.fetchone() is not None

    def get_article(self, article_id: str) -> Optional[Article]:
        """Get an article by ID."""
        row = self.db.execute("SELECT * FROM articles WHERE id = ?", (article_id,)).fetchone()
        return self._row_to_article(row) if row else None

    def count_for_source(self, source_id: str) -> int:
        """Number of articles stored for a source."""
        row = self.db.execute(
            "SELECT COUNT(*) AS n FROM articles WHERE source_id = ?", (source_id,)
        ).fetchone()
        return row["n"]

    def get_unprocessed_for_user(self, user_id: str, limit: int) -> List[Article]:
        """Unprocessed, included articles from the user's sources, newest first.

        Args:
            user_id: Owner of the sources.
            limit: Maximum number of articles.

        Returns:
            Articles awaiting summarization.
        """
        cursor = self.db.execute(
            """
            SELECT a.* FROM articles a
            JOIN sources s ON s.id = a.source_id
            WHERE s.user_id = ? AND a.is_processed = 0 AND a.is_included = 1
            ORDER BY a.published_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [self._row_to_article(row) for row in cursor.fetchall()]

    def update_processing_result(self, article_id: str, result: ArticleProcessingResult) -> None:
        """Store summarization output and mark the article processed.

        Raises:
            DatabaseError: If the update fails.
        """
        try:
            self.db.execute(
                """
                UPDATE articles SET
                    summary = ?,
                    key_takeaways = ?,
                    relevance_score = ?,
                    sentiment = ?,
                    reading_time = ?,
                    tags = ?,
                    is_processed = 1,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    result.summary,
                    json.dumps(result.key_takeaways),
                    result.relevance_score,
                    result.sentiment.value,
                    result.reading_time,
                    json.dumps(result.tags),
                    to_db_datetime(now_utc()),
                    article_id,
                ),
            )
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("update_processing_result_failed", article_id=article_id, error=str(e))
            raise DatabaseError(f"Failed to update article {article_id}: {e}") from e

    def mark_processed(self, article_id: str, is_included: bool = True) -> None:
        """Mark an article processed without a summary.

        Args:
            article_id: Article to update.
            is_included: False removes it from future digests.
        """
        try:
            self.db.execute(
                """
                UPDATE articles SET is_processed = 1, is_included = ?, updated_at = ?
                WHERE id = ?
                """,
                (int(is_included), to_db_datetime(now_utc()), article_id),
            )
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("mark_processed_failed", article_id=article_id, error=str(e))
            raise DatabaseError(f"Failed to mark article {article_id}: {e}") from e

    def get_digest_candidates(self, user_id: str, since: datetime, limit: int) -> List[Article]:
        """Summarized articles eligible for a digest, most relevant first.

        Args:
            user_id: Owner of the sources.
            since: Only articles published at or after this instant.
            limit: Maximum number of articles.

        Returns:
            Articles ordered by relevance, then recency.
        """
        cursor = self.db.execute(
            """
            SELECT a.* FROM articles a
            JOIN sources s ON s.id = a.source_id
            WHERE s.user_id = ?
              AND a.is_processed = 1
              AND a.is_included = 1
              AND a.summary IS NOT NULL
              AND a.published_at >= ?
            ORDER BY a.relevance_score DESC, a.published_at DESC
            LIMIT ?
            """,
            (user_id, to_db_datetime(since), limit),
        )
        return [self._row_to_article(row) for row in cursor.fetchall()]

    def _row_to_article(self, row: sqlite3.Row) -> Article:
        """Convert database row to Article model."""
        return Article(
            id=row["id"],
            source_id=row["source_id"],
            topic_id=row["topic_id"],
            title=row["title"],
            url=row["url"],
            content=row["content"],
            excerpt=row["excerpt"],
            author=row["author"],
            published_at=from_db_datetime(row["published_at"]) or now_utc(),
            reading_time=row["reading_time"],
            image_url=row["image_url"],
            tags=json.loads(row["tags"] or "[]"),
            is_processed=bool(row["is_processed"]),
            is_included=bool(row["is_included"]),
            summary=row["summary"],
            key_takeaways=json.loads(row["key_takeaways"] or "[]"),
            relevance_score=row["relevance_score"],
            sentiment=row["sentiment"],
            created_at=from_db_datetime(row["created_at"]) or now_utc(),
            updated_at=from_db_datetime(row["updated_at"]) or now_utc(),
        )
