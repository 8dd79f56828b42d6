from __future__ import annotations

import argparse
import asyncio
import sys

from pydantic import ValidationError

from deployinfo.core.logging import configure_logging, get_logger
from deployinfo.core.settings import Settings
from deployinfo.server import ExitCode, run_server


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="deployinfo",
        description="Serve /health and /info for the deployed version.",
    )
    ap.add_argument("--host", help="listen address (default: $HOST or 0.0.0.0)")
    ap.add_argument("--port", type=int, help="listen port (default: $PORT or 8080)")
    ap.add_argument(
        "--grace-period",
        type=float,
        dest="grace_period",
        help="seconds in-flight requests get on shutdown (default: 30)",
    )
    return ap.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {
        "HOST": args.host,
        "PORT": args.port,
        "SHUTDOWN_GRACE_SECONDS": args.grace_period,
    }
    # init kwargs win over the environment and go through the same validation
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(args)
    except ValidationError as exc:
        configure_logging(json=True, level="INFO")
        get_logger().error("config.invalid", error=str(exc))
        return int(ExitCode.STARTUP_FAILURE)

    configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)
    return int(asyncio.run(run_server(settings)))


if __name__ == "__main__":
    sys.exit(main())
