"""fitgoals CLI — run the API server and manage the schema.

Usage:
    fitgoals serve                     # uvicorn on FITGOALS_HOST:FITGOALS_PORT
    fitgoals serve --port 8080 --reload
    fitgoals init-db                   # create tables from the ORM models
"""

from __future__ import annotations

import asyncio

import click

from fitgoals.config import settings


async def _create_tables(database_url: str) -> None:
    from fitgoals.db.engine import build_engine
    from fitgoals.db.models import Base

    engine = build_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


@click.group()
@click.version_option(package_name="fitgoals")
def cli():
    """Fitness goal tracking API."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: FITGOALS_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: FITGOALS_PORT).")
@click.option("--reload", is_flag=True, help="Restart on code changes (development).")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "fitgoals.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="Database URL (default: FITGOALS_DATABASE_URL).",
)
def init_db(database_url: str | None):
    """Create all tables that do not exist yet.

    For managed databases prefer `alembic upgrade head`.
    """
    asyncio.run(_create_tables(database_url or settings.database_url))
    click.secho("Tables created.", fg="green")


if __name__ == "__main__":
    cli()
