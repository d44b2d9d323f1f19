"""
Care Quality Engine - Application Launcher.

Entry points for serving the HTTP API and for running the quality metrics
batch once from the command line.
"""

import argparse
import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import uvicorn
from dotenv import load_dotenv
from rich.console import Console

from .api.app import create_app
from .config import Settings, configure_logging, get_logger, get_settings
from .core.container import Container, create_container

_TIMESTAMP_SUFFIXES = ("At", "Time", "Start", "End")


def get_server_config(settings: Settings, **kwargs: Any) -> dict[str, Any]:
    """
    Get uvicorn configuration for the current environment.

    Args:
        settings: Application settings
        **kwargs: Overrides for the generated configuration

    Returns:
        Dict[str, Any]: Server configuration dictionary
    """
    config: dict[str, Any] = {
        "host": settings.api_host,
        "port": settings.api_port,
        "log_level": "debug" if settings.debug else "info",
        "access_log": True,
        "server_header": False,
        "date_header": False,
    }
    config.update(kwargs)
    return config


def run_server(host: str | None = None, port: int | None = None, **kwargs: Any) -> None:
    """
    Run the API server.

    Args:
        host: Server host address (defaults to settings)
        port: Server port number (defaults to settings)
        **kwargs: Additional uvicorn configuration
    """
    settings = get_settings()
    logger = get_logger("app.server")
    app = create_app(settings)

    overrides = {key: value for key, value in {"host": host, "port": port}.items() if value is not None}
    config = get_server_config(settings, **overrides, **kwargs)
    logger.info("Starting server", host=config["host"], port=config["port"], environment=settings.environment)

    try:
        uvicorn.run(app, **config)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


def _parse_timestamps(document: dict[str, Any]) -> dict[str, Any]:
    parsed = dict(document)
    for key, value in document.items():
        if isinstance(value, str) and key.endswith(_TIMESTAMP_SUFFIXES):
            timestamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
            # Offset-less seed timestamps are UTC.
            parsed[key] = timestamp if timestamp.tzinfo is not None else timestamp.replace(tzinfo=UTC)
    return parsed


def load_seed_file(container: Container, path: Path) -> dict[str, int]:
    """
    Load a JSON file of ``{collection: [document, ...]}`` into the document store.

    ISO-8601 strings in timestamp fields (``createdAt``, ``startTime``, ...)
    are converted to datetimes so window queries compare correctly.

    Returns:
        Documents loaded per collection
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    store = container.document_store()
    return {
        collection: len(store.load(collection, [_parse_timestamps(doc) for doc in documents]))
        for collection, documents in data.items()
    }


async def run_metrics_once(container: Container, now: datetime | None = None) -> dict[str, Any]:
    """Run one scheduled quality metrics batch and return its summary."""
    result = await container.quality_metrics_batch().run_scheduled(now)
    return result.model_dump(mode="json")


def cli(argv: list[str] | None = None) -> int:
    """Command line entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(prog="care-quality", description="Care Quality Engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Host to bind to (default: API_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port to bind to (default: API_PORT)")

    run_metrics = subparsers.add_parser("run-metrics", help="Run the quality metrics batch once")
    run_metrics.add_argument("--seed", type=Path, default=None, help="JSON file of documents to load first")
    run_metrics.add_argument("--now", type=datetime.fromisoformat, default=None, help="Window end (ISO-8601)")

    args = parser.parse_args(argv)

    if args.command == "serve":
        run_server(host=args.host, port=args.port)
        return 0

    settings = get_settings()
    configure_logging(settings)
    container = create_container(settings)
    if args.seed is not None:
        loaded = load_seed_file(container, args.seed)
        get_logger("app.cli").info("Seed documents loaded", collections=loaded)

    summary = asyncio.run(run_metrics_once(container, args.now))
    Console().print_json(data=summary)
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    raise SystemExit(cli())
