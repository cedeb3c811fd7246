# start_app.py
"""Launch the bill quote API server."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load settings, validate them, then start the API."""

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8000")),
        help="Port to bind the API server to",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate config.json and environment overrides, then exit",
    )
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file

    try:
        settings = config.get_settings()
    except ValueError as exc:
        print(f"invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(2)

    if args.check_config:
        print(f"configuration ok for {settings.hotel_name}")
        return

    uvicorn.run(
        "gstpos.app.main:app",
        host="0.0.0.0",  # nosec B104: bind for local development
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
