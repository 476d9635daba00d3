"""Command-line entry point.

Logs go to stderr; stdout carries only each command's result.
"""

import asyncio
import json
from pathlib import Path

import typer
from pydantic import ValidationError

from report_extractor.config import Settings, get_settings
from report_extractor.core.exceptions import AppError
from report_extractor.database import DatabaseClient, create_engine
from report_extractor.services.pipeline import run_extraction
from report_extractor.utils.logging import configure_cli_logging, get_logger

LOGGER = get_logger(__name__)

app = typer.Typer(help="Extract company profiles and financial highlights from PDF reports.")


def _load_settings() -> Settings:
    """Load settings and route logging, exiting with status 1 on bad configuration."""
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)
    configure_cli_logging(settings.log_level)
    return settings


@app.command()
def extract(file: Path = typer.Argument(..., help="Path to the PDF report")):
    """Run the extraction pipeline on FILE and print a JSON summary."""
    settings = _load_settings()

    try:
        summary = asyncio.run(run_extraction(file, settings))
    except AppError as e:
        typer.echo(f"Extraction failed: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        LOGGER.error("Unexpected extraction failure", exc_info=True)
        typer.echo(f"Extraction failed: {type(e).__name__}: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(summary.to_dict(), indent=2))


@app.command("init-db")
def init_db():
    """Check the database is reachable and create missing tables."""
    settings = _load_settings()

    async def _create() -> None:
        client = DatabaseClient(create_engine(settings.db))
        try:
            await client.connect()
            await client.create_tables()
        finally:
            await client.disconnect()

    try:
        asyncio.run(_create())
    except Exception as e:
        typer.echo(f"Database initialization failed: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Database tables are ready")


def main():
    app()


if __name__ == "__main__":
    main()
