"""Entry point: ``python -m ascendant``.

Supports two modes:
  - ``python -m ascendant``          → Launch the FastAPI server with a live game clock
  - ``python -m ascendant cli``      → Headless simulation for a fixed span of game time
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ascendant Idle simulation core")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI game server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--time-scale", type=float, default=1.0,
                     help="Simulated seconds per wall-clock second")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--seconds", type=float, default=600.0, help="Simulated seconds to run")
    cli.add_argument("--fresh", action="store_true", help="Start with the level-1 army")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from ascendant.api.app import create_app
    from ascendant.config import GameConfig

    config = GameConfig(seed=args.seed, time_scale=args.time_scale, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from ascendant.config import GameConfig
    from ascendant.core.enums import Currency
    from ascendant.core.magnitude import format_magnitude
    from ascendant.engine.session import GameSession
    from ascendant.utils.logging import setup_logging

    config = GameConfig(seed=args.seed, veteran_army=not args.fresh, log_level=args.log_level)
    setup_logging(config.log_level)

    session = GameSession(config)
    session.start()
    try:
        fired = session.advance(args.seconds)
    finally:
        session.teardown()

    ledger = session.ledger
    logger.info("Ran %.0fs of game time (%d callbacks)", args.seconds, fired)
    logger.info("Reached zone %d wave %d, player level %d",
                session.zone, session.wave, session.player.level)
    logger.info("Mana %s | Gems %s | Essence %s",
                format_magnitude(ledger.balance(Currency.MANA)),
                format_magnitude(ledger.balance(Currency.GEMS)),
                format_magnitude(ledger.balance(Currency.ESSENCE)))
    for event in session.event_log.latest(10):
        logger.info("[%8.1f] %s", event.time, event.message)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
