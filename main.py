"""Development entrypoint for the Conqueror HTTP API."""

from __future__ import annotations

import argparse

import uvicorn

from conqueror.config import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Conqueror API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    parser.add_argument("--log-level", default=None, help="Override CONQUEROR_LOG_LEVEL")
    args = parser.parse_args()

    configure_logging(args.log_level)

    if args.reload:
        uvicorn.run(
            "conqueror.api.app:app",
            host=args.host,
            port=args.port,
            reload=True,
            factory=False,
        )
    else:
        from conqueror.api.app import app

        uvicorn.run(app, host=args.host, port=args.port, reload=False, factory=False)


if __name__ == "__main__":
    main()
