"""Command-line interface for InboxSage."""

import click

from inboxsage.__version__ import __version__
from inboxsage.cli.commands import init_db, serve, status, trigger


@click.group()
@click.version_option(version=__version__, prog_name="inboxsage")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """InboxSage - AI-summarized email digests of your feeds.

    Fetches each user's RSS sources, summarizes new articles with an LLM,
    and emails curated digests on the user's schedule.
    """
    ctx.ensure_object(dict)


# Register commands
cli.add_command(init_db)
cli.add_command(serve)
cli.add_command(trigger)
cli.add_command(status)


def main() -> None:
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
