"""Database layer for InboxSage."""

from inboxsage.database.connection import DatabaseConnection, init_database
from inboxsage.database.digest_repository import DigestRepository
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.source_repository import SourceRepository
from inboxsage.database.user_repository import UserRepository

__all__ = [
    "DatabaseConnection",
    "init_database",
    "ArticleRepository",
    "DigestRepository",
    "SourceRepository",
    "UserRepository",
]
