"""Command-line entry point for the lookup service."""

from __future__ import annotations

import argparse
import importlib
import logging
import os
from typing import Optional

from lineage.config import load_app_config
from lineage.genealogy import FamilyTree, load_genealogy_file

from .api import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lineage read-only lookup service.")
    parser.add_argument(
        "--data",
        default=None,
        help="Genealogy JSON file to serve (defaults to LINEAGE_DATA).",
    )
    parser.add_argument("--config", default=None, help="Optional TOML config file.")
    parser.add_argument("--host", default=None, help="Interface to bind (default: config).")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default: config).")
    parser.add_argument(
        "--log-level",
        default="info",
        help="Uvicorn log level (default: %(default)s).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    data_path = args.data or os.getenv("LINEAGE_DATA")
    if not data_path:
        parser.error("--data is required when LINEAGE_DATA is not set")

    cfg = load_app_config(args.config or os.getenv("LINEAGE_CONFIG"))
    tree = FamilyTree(capacity=cfg.table.initial_capacity, load_factor=cfg.table.load_factor)
    load_genealogy_file(
        data_path, tree, validate=cfg.loader.validate_schema, max_bytes=cfg.loader.max_bytes
    )
    app = create_app(tree)

    log_level = args.log_level.lower()
    logging.getLogger("lineage").setLevel(log_level.upper())

    uvicorn = importlib.import_module("uvicorn")
    uvicorn.run(
        app,
        host=args.host or cfg.service.host,
        port=cfg.service.port if args.port is None else args.port,
        log_level=log_level,
    )


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    main()
