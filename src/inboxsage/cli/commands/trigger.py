"""One-shot job execution command."""

import asyncio
from typing import Dict

import click

from inboxsage.cli.commands._common import load_config
from inboxsage.core.enums import JobName
from inboxsage.database.connection import init_database
from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.utils.exceptions import InboxSageError


@click.command()
@click.argument("job", type=click.Choice([job.value for job in JobName]))
def trigger(job: str) -> None:
    """Run one scheduler job once, for all users.

    Examples:
        inboxsage trigger content-fetch
        inboxsage trigger ai-processing
        inboxsage trigger daily-digest
    """
    config = load_config()
    db = init_database(config.db_path)

    try:
        orchestrator = PipelineOrchestrator(config=config, db=db)
        if job == JobName.AI_PROCESSING.value:
            orchestrator.require_summarizer()

        scheduler = orchestrator.build_scheduler(enabled=False)
        stats: Dict[str, int] = asyncio.run(scheduler.run_job(JobName(job)))

        click.echo(f"\n{job} completed:")
        click.echo(f"  Users:      {stats['users']:>6}")
        click.echo(f"  Succeeded:  {stats['succeeded']:>6}")
        click.echo(f"  Failed:     {stats['failed']:>6}")

    except KeyboardInterrupt:
        click.echo("\nJob interrupted by user.", err=True)
        raise click.Abort()

    except InboxSageError as e:
        click.echo(f"\nJob failed: {e}", err=True)
        raise click.Abort()

    finally:
        db.close()
