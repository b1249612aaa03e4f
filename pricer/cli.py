"""Command line entrypoint: `python -m pricer serve|report|quote`."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .client import PricerClient
from .config import DEFAULT_PORT, ServerConfig
from .core.types import OptionKind, PricingRequest
from .db.store import create_store
from .errors import ConfigError, StoreError
from .logging_config import setup_logging
from .server import PricerServer, run_server

logger = logging.getLogger("pricer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pricer", description="Binary-protocol option pricer")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the pricing daemon")
    serve.add_argument("port", nargs="?", default=None,
                       help=f"TCP port to listen on (default $PRICER_PORT or {DEFAULT_PORT})")
    serve.add_argument("--host", default=None, help="Bind address (default $PRICER_HOST or 0.0.0.0)")
    serve.add_argument("--db-url", default=None, help="SQLAlchemy database URL (default $DB_URL)")
    serve.add_argument("--idle-timeout", type=float, default=None,
                       help="Close connections idle for this many seconds; 0 disables")
    serve.add_argument("--log-level", default=None, help="Logging level (e.g. INFO, DEBUG)")
    serve.add_argument("--log-file", default=None, help="Optional log file path")

    report = sub.add_parser("report", help="Print the most recent stored calculations")
    report.add_argument("--limit", type=int, default=10)
    report.add_argument("--db-url", default=None)

    quote = sub.add_parser("quote", help="Price one option against a running daemon")
    quote.add_argument("--spot", type=float, required=True)
    quote.add_argument("--strike", type=float, required=True)
    quote.add_argument("--rate", type=float, default=0.0)
    quote.add_argument("--vol", type=float, required=True)
    quote.add_argument("--maturity", type=float, required=True, help="Years to expiry")
    quote.add_argument("--put", action="store_true", help="Price a put (default call)")
    quote.add_argument("--steps", type=int, default=0, help="Tree steps; 0 = Black-Scholes")
    quote.add_argument("--host", default="127.0.0.1")
    quote.add_argument("--port", type=int, default=DEFAULT_PORT)

    return parser


def _serve(args) -> int:
    try:
        cfg = ServerConfig.from_env(
            host=args.host, port=args.port, db_url=args.db_url,
            idle_timeout=args.idle_timeout, log_level=args.log_level, log_file=args.log_file,
        )
        setup_logging(cfg.log_level, log_file=cfg.log_file)
    except (ConfigError, ValueError) as e:
        setup_logging("INFO")
        logger.error("%s", e)
        return 1

    try:
        store = create_store(cfg.db_url)
    except StoreError as e:
        logger.error("Failed to initialize database: %s", e)
        return 1

    server = PricerServer(store, host=cfg.host, port=cfg.port, idle_timeout=cfg.idle_timeout)
    try:
        asyncio.run(run_server(server))
    except OSError as e:
        logger.error("Cannot listen on %s:%s: %s", cfg.host, cfg.port, e)
        return 1
    except KeyboardInterrupt:
        pass
    finally:
        store.close()
    return 0


def _report(args) -> int:
    setup_logging("WARNING")
    try:
        cfg = ServerConfig.from_env(db_url=args.db_url)
        store = create_store(cfg.db_url)
    except (ConfigError, StoreError) as e:
        logger.error("%s", e)
        return 1

    try:
        frame = store.recent_frame(args.limit)
    except StoreError as e:
        logger.error("%s", e)
        return 1
    finally:
        store.close()

    if frame.empty:
        print("No calculations recorded.")
    else:
        print("Recent calculations:")
        print(frame.to_string(index=False))
    return 0


async def _quote_once(host: str, port: int, req: PricingRequest):
    async with PricerClient(host, port) as client:
        return await client.quote(req)


def _quote(args) -> int:
    setup_logging("WARNING")
    try:
        req = PricingRequest(
            S=args.spot, K=args.strike, r=args.rate, sigma=args.vol, T=args.maturity,
            kind=OptionKind.PUT if args.put else OptionKind.CALL, steps=args.steps,
        )
    except ValueError as e:
        logger.error("Invalid request: %s", e)
        return 1

    try:
        result = asyncio.run(_quote_once(args.host, args.port, req))
    except (OSError, asyncio.IncompleteReadError, asyncio.TimeoutError) as e:
        logger.error("Pricer at %s:%d did not answer: %s", args.host, args.port, e)
        return 1

    print(f"price={result.price:.6f} delta={result.delta:.6f} vega={result.vega:.6f}")
    return 0


COMMANDS = {"serve": _serve, "report": _report, "quote": _quote}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
