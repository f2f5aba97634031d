"""Shared setup for CLI commands."""

import click

from inboxsage.core.config import Config
from inboxsage.utils.logging import setup_logging


def load_config() -> Config:
    """Load configuration, create paths and configure logging.

    Raises:
        click.Abort: If the configuration is invalid.
    """
    try:
        config = Config()
        config.validate_paths()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        click.echo("Please ensure .env file exists with required settings.", err=True)
        raise click.Abort()

    setup_logging(log_level=config.log_level, log_format=config.log_format, log_dir=config.log_dir)
    return config
