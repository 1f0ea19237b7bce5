"""
Protocol loop: the accept/reject cycle against the rollup server.

    status = accept
    loop:
        input = finish(status)        # 202 -> retry with the same status
        result = dispatcher.handle(input)
        status = accept if result.accepted else reject

The loop has no terminal state. It ends when the transport fails
(`TransportError` propagates) or when `stop()` is called.
"""

from __future__ import annotations

import logging
import os
import platform
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from ..core.dispatch import Application, Dispatcher
from ..core.env import EngineConfig, Environment
from .address_book import AddressBook
from .rollup import FinishStatus, RollupServer
from .rollup_http import RollupHttp, RollupHttpConfig

logger = logging.getLogger(__name__)

ROLLUP_URL_ENV = "ROLLUP_HTTP_SERVER_URL"
ADDRESS_BOOK_ENV = "ROLLWALLET_ADDRESS_BOOK"


def default_rollup_url() -> str:
    # Inside the Cartesi machine the server listens on a fixed local port.
    if platform.machine() == "riscv64":
        return "http://127.0.0.1:5004"
    return "http://127.0.0.1:8080/rollup"


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class RunOpts:
    rollup_url: str = field(default_factory=default_rollup_url)
    address_book: AddressBook = AddressBook()
    engine: EngineConfig = EngineConfig()
    poll_interval_s: float = 0.0

    @classmethod
    def from_env(cls) -> "RunOpts":
        """
        Options from the process environment:
        - ROLLUP_HTTP_SERVER_URL: rollup server base URL
        - ROLLWALLET_ADDRESS_BOOK: optional YAML file overriding contract addresses
        """
        book_path = _env_str(ADDRESS_BOOK_ENV, "")
        book = AddressBook.from_yaml(book_path) if book_path else AddressBook()
        return cls(rollup_url=_env_str(ROLLUP_URL_ENV, default_rollup_url()), address_book=book)


class ProtocolLoop:
    def __init__(self, server: RollupServer, dispatcher: Dispatcher, *, poll_interval_s: float = 0.0) -> None:
        self.server = server
        self.dispatcher = dispatcher
        self.poll_interval_s = poll_interval_s
        self.processed = 0
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask the loop to return before its next `finish` call."""
        self._stop.set()

    def run(self) -> None:
        """
        Process inputs until stopped.

        Raises:
            TransportError: On any failure talking to the rollup server
        """
        status = FinishStatus.ACCEPT
        while not self._stop.is_set():
            logger.debug("sending finish status=%s", status.value)
            next_input = self.server.finish_and_get_next(status)
            if next_input is None:
                # No input ready yet; retry with the same status.
                if self.poll_interval_s > 0:
                    self._stop.wait(self.poll_interval_s)
                continue
            result = self.dispatcher.handle(next_input)
            status = FinishStatus.ACCEPT if result.accepted else FinishStatus.REJECT
            self.processed += 1


def run(app: Application, opts: Optional[RunOpts] = None) -> None:
    """
    Connect to the rollup server and serve `app` until the transport fails.

    If opts is None, options are read with `RunOpts.from_env()`.
    """
    if opts is None:
        opts = RunOpts.from_env()
    server = RollupHttp(RollupHttpConfig(url=opts.rollup_url))
    env = Environment(opts.address_book, server, opts.engine)
    loop = ProtocolLoop(server, Dispatcher(env, app), poll_interval_s=opts.poll_interval_s)
    logger.info("connecting to rollup server url=%s", opts.rollup_url)
    started = time.monotonic()
    try:
        loop.run()
    finally:
        logger.info("protocol loop exited after %d inputs in %.1fs", loop.processed, time.monotonic() - started)
