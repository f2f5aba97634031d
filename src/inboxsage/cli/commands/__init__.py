"""CLI commands for InboxSage."""

from inboxsage.cli.commands.init_db import init_db
from inboxsage.cli.commands.serve import serve
from inboxsage.cli.commands.status import status
from inboxsage.cli.commands.trigger import trigger

__all__ = ["init_db", "serve", "status", "trigger"]
