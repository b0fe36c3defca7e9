"""Run the snapshot REST API with uvicorn.

Usage:
    python -m snapshot_rest
    python -m snapshot_rest --port 3000 --data-url https://example.com/db.json
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from snapshot_rest.app import create_app
from snapshot_rest.config import SnapshotRestSettings, get_settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="snapshot-rest",
        description="Serve a JSON snapshot as a schema-less REST API.",
    )
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--data-url", help="Load the snapshot from this URL first")
    parser.add_argument("--db-path", help="Local snapshot file")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> SnapshotRestSettings:
    """Environment settings with command-line overrides applied."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "data_url": args.data_url,
        "db_path": args.db_path,
        "log_level": args.log_level,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return get_settings()
    return SnapshotRestSettings(**{**get_settings().model_dump(), **overrides})


def main(argv: Optional[List[str]] = None) -> None:
    settings = build_settings(parse_args(argv))
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
