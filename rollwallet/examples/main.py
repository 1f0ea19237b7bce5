"""
Run one of the example applications against the rollup HTTP server.

    rollwallet-example echo
    rollwallet-example honeypot --owner 0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import replace
from typing import Callable, Dict, Optional, Sequence

from ..core.dispatch import Application
from ..core.errors import TransportError
from ..core.types import to_address
from ..integration.runner import RunOpts, run
from .address import AddressApplication
from .echo import EchoApplication
from .error import ErrorApplication
from .game import GameApplication
from .honeypot import HoneypotApplication
from .panic import PanicApplication

DEFAULT_OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

EXAMPLES: Dict[str, Callable[[argparse.Namespace], Application]] = {
    "address": lambda args: AddressApplication(),
    "echo": lambda args: EchoApplication(),
    "error": lambda args: ErrorApplication(),
    "game": lambda args: GameApplication(to_address(args.owner)),
    "honeypot": lambda args: HoneypotApplication(to_address(args.owner)),
    "panic": lambda args: PanicApplication(),
}


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rollwallet-example", description="Run a rollwallet example application.")
    ap.add_argument("example", choices=sorted(EXAMPLES))
    ap.add_argument("--owner", default=DEFAULT_OWNER, help="owner (honeypot) or game master (game) address")
    ap.add_argument("--rollup-url", default=None, help="overrides ROLLUP_HTTP_SERVER_URL")
    ap.add_argument("--log-level", default=os.environ.get("ROLLWALLET_LOG_LEVEL", "INFO"))
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("rollwallet.examples")

    try:
        app = EXAMPLES[args.example](args)
    except ValueError as exc:
        logger.error("invalid arguments: %s", exc)
        return 2

    opts = RunOpts.from_env()
    if args.rollup_url:
        opts = replace(opts, rollup_url=args.rollup_url)
    try:
        run(app, opts)
    except TransportError as exc:
        logger.error("application exited with error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
