"""
AJ OS Backend CLI Interface
Command line interface implemented using Typer
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from config.loader import CONFIG_ENV_VAR, get_config
from core.logger import get_logger, setup_logging
from system.runtime import start_runtime, stop_runtime

logger = get_logger(__name__)


def start(
    host: Optional[str] = typer.Option(None, help="Server host address"),
    port: Optional[int] = typer.Option(None, help="Server port"),
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    debug: bool = typer.Option(False, help="Enable debug mode"),
):
    """Start AJ OS Backend service"""
    try:
        config = get_config(config_file)
        if config_file:
            # uvicorn re-imports the app (in a child process when reloading)
            os.environ[CONFIG_ENV_VAR] = str(Path(config_file).expanduser().resolve())
        host = host or config.get("server.host", "127.0.0.1")
        port = port or int(config.get("server.port", 8000))

        logger.info("Starting AJ OS Backend service...")
        logger.info(f"Host: {host}, Port: {port}")
        logger.info(f"Debug mode: {debug}")

        uvicorn.run(
            "ajos_backend.app:app",
            host=host,
            port=port,
            reload=debug,
            log_level="debug" if debug else "info",
        )

    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        raise typer.Exit(1)


def sync(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Pull every collection from the backend into the local cache"""

    async def run_sync():
        runtime = await start_runtime(config_file, sync=False)
        try:
            if not runtime.backend.is_configured:
                typer.echo("Backend not configured; nothing to sync")
                return {}
            return await runtime.storage.sync_all()
        finally:
            await stop_runtime(quiet=True)

    try:
        synced = asyncio.run(run_sync())
    except Exception as e:
        logger.error(f"Sync failed: {e}")
        raise typer.Exit(1)

    for name, records in synced.items():
        typer.echo(f"{name}: {len(records)}")


def export_insights(
    output_dir: Path = typer.Option(Path("."), help="Directory for the report file"),
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    ai: bool = typer.Option(False, help="Include an AI coaching insight"),
):
    """Write the insights report as ajos-insights-YYYY-MM-DD.json"""
    from core.insights import InsightsManager, report_filename
    from core.insights.metrics import DEFAULT_SYSTEM_START_DATE

    async def build():
        runtime = await start_runtime(config_file, sync=False)
        try:
            manager = InsightsManager(
                runtime.storage,
                system_start_date=runtime.config.get(
                    "insights.system_start_date", DEFAULT_SYSTEM_START_DATE
                ),
            )
            return await manager.report(include_ai_insight=ai)
        finally:
            await stop_runtime(quiet=True)

    try:
        report = asyncio.run(build())
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / report_filename()
        path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    except Exception as e:
        logger.error(f"Insights export failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"✓ Report written to {path}")


def clear_cache(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
):
    """Drop every cached collection and preference; the next sync refills them"""
    from core.cache import CacheStore

    config = get_config(config_file)
    cache = CacheStore(config.get("storage.cache_path") or None)

    keys = cache.keys()
    if not keys:
        typer.echo("Cache is already empty")
        return

    if not yes:
        typer.confirm(f"Remove {len(keys)} cached entries ({', '.join(keys)})?", abort=True)

    cache.clear()
    typer.echo(f"✓ Removed {len(keys)} cached entries")


def build_cli() -> typer.Typer:
    app = typer.Typer()

    app.command()(start)  # Start FastAPI server
    app.command()(sync)  # Pull all collections once
    app.command("export-insights")(export_insights)  # Write the JSON report
    app.command("clear-cache")(clear_cache)  # Drop every cached collection

    return app


def main():
    """Main function"""
    setup_logging()
    build_cli()()


if __name__ == "__main__":
    main()
