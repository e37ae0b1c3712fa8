"""
Database management commands for the governance indexer.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from govindexer.core.config import Settings
from govindexer.core.database import DatabaseManager, create_engine
from govindexer.core.logging import setup_logging
from govindexer.indexer import GovDatabase
from govindexer.services import ParamsCategory, make_encoding_config

console = Console()
app = typer.Typer(help="Database management commands")


def _load_settings(database_url: Optional[str]) -> Settings:
    config = Settings()
    if database_url:
        config = config.model_copy(update={"database_url": database_url})
    setup_logging(config)
    return config


@app.command()
def init(database_url: Optional[str] = typer.Option(None, help="Override the configured database URL")):
    """Initialize database with tables."""
    config = _load_settings(database_url)

    async def _init():
        engine = create_engine(config)
        try:
            await DatabaseManager.create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    console.print("✅ Database initialized successfully!")


@app.command()
def drop(
    database_url: Optional[str] = typer.Option(None, help="Override the configured database URL"),
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation"),
):
    """Drop all governance tables."""
    if not yes:
        typer.confirm("Drop all governance tables?", abort=True)
    config = _load_settings(database_url)

    async def _drop():
        engine = create_engine(config)
        try:
            await DatabaseManager.drop_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_drop())
    console.print("⬇️ Database tables dropped")


@app.command()
def health(database_url: Optional[str] = typer.Option(None, help="Override the configured database URL")):
    """Check database connectivity."""
    config = _load_settings(database_url)

    async def _health() -> bool:
        engine = create_engine(config)
        try:
            return await DatabaseManager.health_check(engine)
        finally:
            await engine.dispose()

    if not asyncio.run(_health()):
        console.print("❌ Database health check failed")
        raise typer.Exit(code=1)
    console.print("✅ Database health check passed")


@app.command()
def params(database_url: Optional[str] = typer.Option(None, help="Override the configured database URL")):
    """Show the stored height of every parameter category."""
    config = _load_settings(database_url)

    async def _params():
        async with GovDatabase.from_settings(config, make_encoding_config()) as db:
            return {category: await db.get_params(category) for category in ParamsCategory}

    stored = asyncio.run(_params())

    table = Table(title="Stored parameters")
    table.add_column("Category")
    table.add_column("Height", justify="right")
    for category, value in stored.items():
        table.add_row(category.value, str(value.height) if value else "-")
    console.print(table)


if __name__ == "__main__":
    app()
