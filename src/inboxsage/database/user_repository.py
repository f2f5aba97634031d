"""User, profile and topic repository."""

import json
import sqlite3
import uuid
from typing import List, Optional

from inboxsage.core.enums import ScheduleType
from inboxsage.core.user import Topic, User, UserProfile
from inboxsage.database.connection import DatabaseConnection
from inboxsage.utils.date_utils import from_db_datetime, now_utc, to_db_datetime
from inboxsage.utils.exceptions import DatabaseError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

_PROFILE_COLUMNS = (
    "schedule_type",
    "time_of_day",
    "timezone",
    "custom_days",
    "summary_depth",
    "summary_format",
    "summary_style",
    "language_preference",
    "max_items_per_digest",
    "digest_emails",
    "include_images",
    "include_videos",
)


def _profile_params(profile: UserProfile) -> tuple:
    return (
        profile.schedule_type.value,
        profile.time_of_day,
        profile.timezone,
        json.dumps(profile.custom_days),
        profile.summary_depth.value,
        profile.summary_format.value,
        profile.summary_style.value,
        profile.language_preference,
        profile.max_items_per_digest,
        json.dumps(profile.digest_emails),
        int(profile.include_images),
        int(profile.include_videos),
    )


class UserRepository:
    """Repository for users and their 1:1 profiles and topics."""

    def __init__(self, db: DatabaseConnection):
        """Initialize repository.

        Args:
            db: Database connection instance.
        """
        self.db = db

    def create_user(
        self,
        email: str,
        name: str,
        profile: Optional[UserProfile] = None,
    ) -> User:
        """Create a user together with its profile.

        Args:
            email: Account email address.
            name: Display name.
            profile: Initial preferences (defaults applied when omitted).

        Returns:
            Created user with profile attached.

        Raises:
            DatabaseError: If the email is taken or the insert fails.
        """
        user = User(id=uuid.uuid4().hex, email=email, name=name)
        if profile is None:
            profile = UserProfile(user_id=user.id)
        else:
            profile = profile.model_copy(update={"user_id": user.id})

        placeholders = ", ".join("?" for _ in _PROFILE_COLUMNS)
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)",
                    (user.id, user.email, user.name, to_db_datetime(user.created_at)),
                )
                conn.execute(
                    f"INSERT INTO user_profiles (user_id, {', '.join(_PROFILE_COLUMNS)}) "
                    f"VALUES (?, {placeholders})",
                    (user.id, *_profile_params(profile)),
                )
        except sqlite3.Error as e:
            logger.error("create_user_failed", email=email, error=str(e))
            raise DatabaseError(f"Failed to create user {email}: {e}") from e

        user.profile = profile
        logger.info("user_created", user_id=user.id)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user with its profile, or None."""
        row = self.db.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            return None

        user = self._row_to_user(row)
        user.profile = self.get_profile(user_id)
        return user

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get a user's profile, or None."""
        row = self.db.execute(
            "SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)
        ).fetchone()
        return self._row_to_profile(row) if row else None

    def update_profile(self, profile: UserProfile) -> bool:
        """Overwrite a user's profile.

        Returns:
            True if a profile row was updated.
        """
        assignments = ", ".join(f"{column} = ?" for column in _PROFILE_COLUMNS)
        try:
            cursor = self.db.execute(
                f"UPDATE user_profiles SET {assignments} WHERE user_id = ?",
                (*_profile_params(profile), profile.user_id),
            )
            self.db.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("update_profile_failed", user_id=profile.user_id, error=str(e))
            raise DatabaseError(f"Failed to update profile: {e}") from e

    def list_user_ids(self) -> List[str]:
        """IDs of every user."""
        cursor = self.db.execute("SELECT id FROM users ORDER BY created_at")
        return [row["id"] for row in cursor.fetchall()]

    def list_users_by_schedule(self, schedule_type: ScheduleType) -> List[User]:
        """Users (with profiles) whose profile uses the given schedule."""
        cursor = self.db.execute(
            """
            SELECT u.id AS u_id, u.email AS u_email, u.name AS u_name,
                   u.created_at AS u_created_at, p.*
            FROM users u
            JOIN user_profiles p ON p.user_id = u.id
            WHERE p.schedule_type = ?
            ORDER BY u.created_at
            """,
            (schedule_type.value,),
        )

        users = []
        for row in cursor.fetchall():
            users.append(
                User(
                    id=row["u_id"],
                    email=row["u_email"],
                    name=row["u_name"],
                    created_at=from_db_datetime(row["u_created_at"]) or now_utc(),
                    profile=self._row_to_profile(row),
                )
            )
        return users

    def create_topic(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Topic:
        """Create a topic; names are unique per user.

        Raises:
            DatabaseError: If the name is already used or the insert fails.
        """
        topic = Topic(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            description=description,
            color=color,
        )
        try:
            self.db.execute(
                """
                INSERT INTO topics (id, user_id, name, description, color, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    topic.id,
                    topic.user_id,
                    topic.name,
                    topic.description,
                    topic.color,
                    to_db_datetime(topic.created_at),
                ),
            )
            self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error("create_topic_failed", user_id=user_id, name=name, error=str(e))
            raise DatabaseError(f"Failed to create topic {name!r}: {e}") from e

        return topic

    def list_topics(self, user_id: str) -> List[Topic]:
        """Topics owned by a user, by name."""
        cursor = self.db.execute(
            "SELECT * FROM topics WHERE user_id = ? ORDER BY name", (user_id,)
        )
        return [
            Topic(
                id=row["id"],
                user_id=row["user_id"],
                name=row["name"],
                description=row["description"],
                color=row["color"],
                created_at=from_db_datetime(row["created_at"]) or now_utc(),
            )
            for row in cursor.fetchall()
        ]

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            created_at=from_db_datetime(row["created_at"]) or now_utc(),
        )

    def _row_to_profile(self, row: sqlite3.Row) -> UserProfile:
        return UserProfile(
            user_id=row["user_id"],
            schedule_type=row["schedule_type"],
            time_of_day=row["time_of_day"],
            timezone=row["timezone"],
            custom_days=json.loads(row["custom_days"] or "[]"),
            summary_depth=row["summary_depth"],
            summary_format=row["summary_format"],
            summary_style=row["summary_style"],
            language_preference=row["language_preference"],
            max_items_per_digest=row["max_items_per_digest"],
            digest_emails=json.loads(row["digest_emails"] or "[]"),
            include_images=bool(row["include_images"]),
            include_videos=bool(row["include_videos"]),
        )
