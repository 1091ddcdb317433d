"""
``socialgraph-migrate``: thin click wrapper around Alembic commands.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from alembic import command
from alembic.config import Config
from socialgraph import __version__
from socialgraph.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/socialgraph/database/cli.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")
    return Config(str(alembic_ini))


def run_alembic(action: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run an Alembic command, exiting with status 1 when it fails."""
    try:
        func(get_alembic_config(), *args, **kwargs)
    except Exception as e:
        logger.error("Migration command failed", action=action, error=str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="socialgraph-migrate")
def main(log_level: str) -> None:
    """Manage socialgraph database migrations."""
    configure_logging(debug=(log_level == "debug"), level=log_level)


@main.command()
@click.argument("revision", default="head")
@click.option("--sql", is_flag=True, default=False, help="Print SQL instead of applying it")
def upgrade(revision: str, sql: bool) -> None:
    """Upgrade the database to REVISION (default: head)."""
    logger.info("Upgrading database", revision=revision, offline=sql)
    run_alembic("upgrade", command.upgrade, revision, sql=sql)
    if not sql:
        logger.info("Database upgraded", revision=revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade the database to REVISION (default: one step back)."""
    logger.info("Downgrading database", revision=revision)
    run_alembic("downgrade", command.downgrade, revision)
    logger.info("Database downgraded", revision=revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option(
    "--autogenerate/--no-autogenerate", default=True, help="Diff models against the database"
)
def revision(message: str, autogenerate: bool) -> None:
    """Create a new revision file."""
    run_alembic("revision", command.revision, message=message, autogenerate=autogenerate)


@main.command()
@click.option("-v", "--verbose", is_flag=True, default=False)
def current(verbose: bool) -> None:
    """Show the revision the database is at."""
    run_alembic("current", command.current, verbose=verbose)


@main.command()
@click.option("-v", "--verbose", is_flag=True, default=False)
def history(verbose: bool) -> None:
    """List revisions in order."""
    run_alembic("history", command.history, verbose=verbose)


if __name__ == "__main__":
    main()
