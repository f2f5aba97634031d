"""Database initialization command."""

import click

from inboxsage.cli.commands._common import load_config
from inboxsage.database.connection import init_database
from inboxsage.utils.exceptions import DatabaseError


@click.command("init-db")
def init_db() -> None:
    """Create the database file and schema."""
    config = load_config()

    try:
        db = init_database(config.db_path)
    except DatabaseError as e:
        click.echo(f"Database initialization failed: {e}", err=True)
        raise click.Abort()

    db.close()
    click.echo(f"Database ready: {config.db_path}")
