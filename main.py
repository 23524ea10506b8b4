"""Development entrypoint for the heartforge HTTP API."""

from __future__ import annotations

import argparse

import uvicorn

from heartforge.api.app import app
from heartforge.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the heartforge API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Log level for the server and application loggers",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    args = parser.parse_args()

    if args.reload:
        uvicorn.run(
            "heartforge.api.app:app",
            host=args.host,
            port=args.port,
            log_level=args.log_level,
            reload=True,
            factory=False,
        )
    else:
        uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level, reload=False)


if __name__ == "__main__":
    main()
