"""HTTP server command."""

import click
import uvicorn

from inboxsage.api.app import create_app
from inboxsage.cli.commands._common import load_config


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, type=int, show_default=True, help="Bind port")
@click.option(
    "--cron/--no-cron",
    default=None,
    help="Override ENABLE_CRON_JOBS for this process",
)
def serve(host: str, port: int, cron: bool | None) -> None:
    """Serve the control API with the job scheduler.

    Examples:
        inboxsage serve                  # Scheduler per ENABLE_CRON_JOBS
        inboxsage serve --cron           # Force recurring jobs on
        inboxsage serve --port 9000
    """
    config = load_config()
    if cron is not None:
        config.enable_cron_jobs = cron

    click.echo("InboxSage API")
    click.echo("=" * 50)
    click.echo(f"Database: {config.db_path}")
    click.echo(f"Recurring jobs: {'enabled' if config.enable_cron_jobs else 'disabled'}")
    click.echo(f"Listening on http://{host}:{port}")
    click.echo("=" * 50)

    app = create_app(config)
    uvicorn.run(app, host=host, port=port, log_config=None)
