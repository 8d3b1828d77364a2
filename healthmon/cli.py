"""
healthmon command line.

Usage
-----
    healthmon --chain execution
    healthmon --chain execution --execution.engine-jwt /secrets/jwt.hex --port 8551
    healthmon --chain beacon --beacon.certificate /etc/ssl/node.crt
    healthmon --chain avax --http.addr 0.0.0.0

Exit codes
----------
- non-zero if the configuration is invalid; otherwise runs until terminated.
"""

import argparse
import logging
from typing import List, Optional

from healthmon.config import (
    DEFAULT_HTTP_ADDR,
    DEFAULT_HTTP_PORT,
    Settings,
    build_adapter,
    build_token_issuer,
)
from healthmon.errors import ConfigError
from healthmon.models import ChainKind
from healthmon.poller import DEFAULT_INTERVAL_S, Poller
from healthmon.server import create_app, serve
from healthmon.state import ReadinessState
from healthmon.tracker import DEFAULT_STALL_THRESHOLD_S

LOG = logging.getLogger("healthmon")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="healthmon",
        description="Readiness probe sidecar for execution, beacon and Avalanche C-chain nodes.")
    p.add_argument("--chain", required=True, choices=[k.value for k in ChainKind],
                   help="Chain type")
    p.add_argument("--port", type=int, default=None,
                   help="Node port (default: 8545 for execution, 9650 for avax, 4000 for beacon)")
    p.add_argument("--addr", default="localhost", help="Node host address (default: localhost)")
    p.add_argument("--timeout", type=float, default=5.0,
                   help="Node connection timeout, seconds (default: 5)")
    p.add_argument("--stall-threshold", type=float, default=DEFAULT_STALL_THRESHOLD_S,
                   help=f"Seconds without a new block before the node counts as stalled "
                        f"(default: {DEFAULT_STALL_THRESHOLD_S:g})")
    p.add_argument("--interval", type=float, default=DEFAULT_INTERVAL_S,
                   help=f"Seconds between evaluations (default: {DEFAULT_INTERVAL_S:g})")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Log level (default: INFO)")

    g = p.add_argument_group("Execution chain")
    g.add_argument("--execution.engine-jwt", dest="engine_jwt", default=None,
                   help="JWT hex secret path. Use only when connecting to the engine RPC endpoint.")
    g.add_argument("--execution.sync-tolerance", dest="sync_tolerance", type=int, default=0,
                   help="Max block lag tolerance while syncing (default: 0)")

    g = p.add_argument_group("Beacon chain")
    g.add_argument("--beacon.certificate", dest="certificate", default=None,
                   help="TLS root certificate path. Specify only if you have it configured for your node as well.")

    g = p.add_argument_group("healthcheck service")
    g.add_argument("--http.port", dest="http_port", type=int, default=DEFAULT_HTTP_PORT,
                   help=f"healthmon listening port (default: {DEFAULT_HTTP_PORT})")
    g.add_argument("--http.addr", dest="http_addr", default=DEFAULT_HTTP_ADDR,
                   help="healthmon listening address. Set to 0.0.0.0 to allow external access.")
    return p


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        chain=args.chain,
        addr=args.addr,
        port=args.port,
        timeout=args.timeout,
        stall_threshold=args.stall_threshold,
        interval=args.interval,
        engine_jwt=args.engine_jwt,
        sync_tolerance=args.sync_tolerance,
        certificate=args.certificate,
        http_addr=args.http_addr,
        http_port=args.http_port,
    )


def cli(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        settings = settings_from_args(args)
        adapter = build_adapter(settings)
        token_issuer = build_token_issuer(settings)
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc

    state = ReadinessState()
    Poller(adapter, state, token_issuer=token_issuer, interval=settings.interval).start()

    LOG.info("%s node address is %s", settings.chain.value, settings.node_url)
    LOG.info("healthmon listening on %s", settings.service_addr)
    serve(create_app(state), settings.http_addr, settings.http_port)


if __name__ == "__main__":
    cli()
