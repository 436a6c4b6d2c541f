"""CLI launcher for the Snake Duel server."""

from __future__ import annotations

import argparse
import logging
import sys

from snake_duel.config import ServerSettings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-duel-server",
        description="Run the authoritative two-player snake server.",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON settings file (flags override it).",
    )
    parser.add_argument("--host", type=str, default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument(
        "--log-level", type=str, default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument(
        "--tick-rate", type=float, default=None,
        help="Simulation ticks per second.",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for food and respawn placement.",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> ServerSettings:
    """Combine environment, config file and flags, later sources winning."""
    settings = (
        ServerSettings.load(args.config)
        if args.config else ServerSettings.from_env()
    )
    return settings.with_overrides(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        tick_rate_hz=args.tick_rate,
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-duel-server`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    import uvicorn

    from snake_duel.server.app import create_app

    logger.info(
        "Serving on %s:%d (board %dx%d, %.1f Hz).",
        settings.host, settings.port,
        settings.tile_count, settings.tile_count, settings.tick_rate_hz,
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
