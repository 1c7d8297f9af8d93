"""CLI entry points for SRM Ops.

Usage:
    srmops init-db
    srmops check-config
    srmops export --user-id USER_ID --output records.xlsx
    srmops serve
"""

import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from . import __version__
from .config import get_settings
from .db import close_all_connections, create_tables, get_db_session
from .export.workbook import ExportFormats, ExportMode, UserRecords, export_to_workbook
from .logging import setup_logging
from .records.store import RecordStore


@click.group()
@click.version_option(version=__version__, prog_name="srmops")
def main():
    """SRM Ops - field intervention and reclamation records."""
    setup_logging()


@main.command(name="init-db")
def init_db_command():
    """Create the intervention and reclamation tables."""

    async def _run():
        try:
            await create_tables()
        finally:
            await close_all_connections()

    asyncio.run(_run())
    click.echo("Record tables created")


@main.command(name="check-config")
def check_config_command():
    """Report required settings that are not configured."""
    settings = get_settings()
    missing = settings.missing_required()
    click.echo(f"Environment: {settings.environment}")
    if missing:
        for name in missing:
            click.echo(f"  ✗ {name} is not set")
        sys.exit(1)
    click.echo("  ✓ All required settings are present")


@main.command(name="export")
@click.option("--user-id", required=True, help="Owner of the records to export")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Destination .xlsx file",
)
def export_command(user_id: str, output: Path):
    """Write a user's records to an XLSX workbook."""

    async def _run() -> bytes:
        try:
            async with get_db_session() as session:
                store = RecordStore(session)
                records = UserRecords(
                    interventions=await store.list_interventions(user_id),
                    reclamations=await store.list_reclamations(user_id),
                )
        finally:
            await close_all_connections()
        return export_to_workbook(
            records, ExportMode.USER, ExportFormats.from_settings(get_settings())
        )

    content = asyncio.run(_run())
    output.write_bytes(content)
    click.echo(f"Wrote {len(content)} bytes to {output}")


@main.command(name="serve")
@click.option("--host", default=None, help="Bind address (default: API_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: API_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve_command(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "srmops.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
