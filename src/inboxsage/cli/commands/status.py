"""Status command: job cadences, configuration and API usage."""

from datetime import timedelta

import click

from inboxsage.cli.commands._common import load_config
from inboxsage.database.connection import init_database
from inboxsage.database.user_repository import UserRepository
from inboxsage.integrations.openai_client import get_usage_summary
from inboxsage.pipeline.scheduler import JOB_TRIGGERS
from inboxsage.utils.date_utils import now_utc


@click.command()
def status() -> None:
    """Show recurring jobs, configured integrations and 24h LLM usage."""
    config = load_config()
    db = init_database(config.db_path)

    try:
        click.echo("InboxSage Status")
        click.echo("=" * 50)
        click.echo(f"Recurring jobs: {'enabled' if config.enable_cron_jobs else 'disabled'}")
        click.echo(f"Timezone:       {config.scheduler_timezone}")
        for job, trigger in JOB_TRIGGERS.items():
            hours = ",".join(str(hour) for hour in sorted(trigger.hours))
            click.echo(f"  {job.value:<14} minute 0 of hours {hours}")

        click.echo()
        click.echo(f"OpenAI:  {'configured' if config.openai_api_key else 'missing'}")
        click.echo(f"Resend:  {'configured' if config.resend_api_key else 'missing'}")
        click.echo(f"Users:   {len(UserRepository(db).list_user_ids())}")

        usage = get_usage_summary(db, since=now_utc() - timedelta(hours=24))
        click.echo()
        click.echo("LLM usage (last 24h):")
        click.echo(f"  Calls:   {usage['calls']:>8} ({usage['failed']} failed)")
        click.echo(f"  Tokens:  {usage['total_tokens']:>8}")
        click.echo(f"  Cost:    ${usage['cost']:.4f}")

    finally:
        db.close()
