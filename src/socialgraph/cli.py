"""
``socialgraph`` command line: run the API server, seed the database, print the schema.
"""

import asyncio
import os
import sys

import click
import uvicorn

from socialgraph import __version__
from socialgraph.config import settings
from socialgraph.logging import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="socialgraph")
def cli() -> None:
    """socialgraph GraphQL service."""


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Bind address")
@click.option("--port", default=settings.api_port, type=int, show_default=True, help="Bind port")
@click.option("--reload", is_flag=True, default=settings.api_reload, help="Reload on code changes")
@click.option("--workers", default=1, type=int, show_default=True, help="Worker processes")
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    type=click.Choice(LOG_LEVELS),
    show_default=True,
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Run the API server with uvicorn."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    # Workers import the app afresh and read their settings from the environment
    os.environ["SOCIALGRAPH_LOG_LEVEL"] = log_level
    if log_level == "debug":
        os.environ["SOCIALGRAPH_DEBUG"] = "true"

    if reload and workers > 1:
        logger.warning("--reload runs a single worker", requested_workers=workers)
        workers = 1

    logger.info("Starting server", host=host, port=port, reload=reload, workers=workers)
    try:
        uvicorn.run(
            "socialgraph.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=workers,
            log_level=log_level,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error("Server failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--sample-data",
    is_flag=True,
    default=False,
    help="Also create two sample users, the first subscribed to the second",
)
def seed(sample_data: bool) -> None:
    """Insert the member types (and optional sample data)."""
    from socialgraph.database.connection import dispose_database, get_async_session
    from socialgraph.database.seed_data import seed_initial_data

    configure_logging(debug=settings.debug)

    async def run() -> None:
        try:
            async with get_async_session() as db:
                await seed_initial_data(db, include_sample_data=sample_data)
        finally:
            await dispose_database()

    try:
        asyncio.run(run())
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database seeded")


@cli.command(name="schema")
def print_schema() -> None:
    """Print the GraphQL schema in SDL."""
    from socialgraph.graphql.schema import schema

    click.echo(schema.as_str())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
