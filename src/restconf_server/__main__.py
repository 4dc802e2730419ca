"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m restconf_server [--addr HOST:PORT] [--models DIR]... [--module NAME]...
    restconf --addr :8408 --log-level DEBUG

Startup order:

    1. configure logging
    2. YANG: add search paths, load modules (missing ones are skipped)
    3. YANG: process; any error is logged and the exit status is 1
    4. build the server; a configuration error exits with status 1
    5. "restconf start and listen <addr>", then serve until SIGINT/SIGTERM

=============================================================================
"""

from dataclasses import replace
from typing import Optional, Sequence
import argparse
import logging
import sys

from . import __version__
from .config import DEFAULT_ADDRESS, LOG_FORMATS, LOG_LEVELS, ServerConfig
from .errors import ConfigurationError
from .server import RestconfServer, configure_logging
from .yang import YangModules


logger = logging.getLogger("restconf_server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restconf",
        description="Minimal RESTCONF (RFC 8040) server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  restconf                               # listen on :408
  restconf --addr 127.0.0.1:8408         # custom address
  restconf --models ./yang --module ietf-interfaces
        """,
    )

    parser.add_argument(
        "--addr", "-a",
        default=None,
        help=f"Listen address host:port (default: {DEFAULT_ADDRESS})",
    )

    parser.add_argument(
        "--models", "-m",
        action="append",
        default=None,
        metavar="DIR",
        help="Directory searched for YANG modules, repeatable (default: ./models)",
    )

    parser.add_argument(
        "--module",
        action="append",
        default=None,
        metavar="NAME",
        help="YANG module to load at startup, repeatable (default: base)",
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Maximum worker threads (default: 16)",
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--log-skip",
        action="append",
        default=None,
        metavar="PATH",
        help="Request path left out of the access log, repeatable",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"restconf {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """
    Environment first, then command-line flags on top.

    Raises:
        ConfigurationError: Malformed --addr or environment value.
    """
    config = ServerConfig.from_env()

    if args.addr is not None:
        config = config.with_address(args.addr)
    if args.models:
        config = replace(config, models_paths=tuple(args.models))
    if args.module:
        config = replace(config, modules=tuple(args.module))
    if args.workers is not None:
        config = replace(
            config,
            max_workers=args.workers,
            min_workers=min(config.min_workers, max(args.workers, 1)),
        )
    if args.log_level is not None:
        config = replace(config, log_level=args.log_level)
    if args.log_format is not None:
        config = replace(config, log_format=args.log_format)
    if args.log_skip:
        config = replace(config, log_skip_paths=tuple(args.log_skip))

    return config


def load_models(config: ServerConfig) -> Optional[YangModules]:
    """Load and validate YANG modules; None if validation reported errors."""
    yang = YangModules()
    yang.add_paths(*config.models_paths)
    yang.load(*config.modules)

    errors = yang.process()
    if errors:
        for err in errors:
            logger.error(f"YANG: {err}")
        return None

    for module in yang.modules:
        entry = yang.to_entry(module)
        logger.info(f"models: {entry.name}")
        logger.debug(f"models: {entry}")

    return yang


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        logging.basicConfig()
        logger.error(f"Configuration error: {e}")
        return 1

    configure_logging(config)

    if load_models(config) is None:
        return 1

    try:
        server = RestconfServer(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info(f"restconf start and listen {config.listen_address}")

    try:
        server.run()
    except OSError as e:
        logger.error(f"Cannot listen on {config.listen_address}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
