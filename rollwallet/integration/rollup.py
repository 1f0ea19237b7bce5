"""
Rollup API interface used by the environment and the protocol loop.

Implementations:
- `RollupHttp` talks to the rollup HTTP server (production).
- `RollupMock` records outputs in memory (unit tests, `Tester`).
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Optional

from ..core.types import Address, Amount, Input


@unique
class FinishStatus(Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class RollupBackend:
    """Outputs of the current input. Every call is a blocking round-trip."""

    def send_voucher(self, destination: Address, payload: bytes, value: Optional[Amount] = None) -> int:
        """Send a voucher and return its index."""
        raise NotImplementedError

    def send_notice(self, payload: bytes) -> int:
        """Send a notice and return its index."""
        raise NotImplementedError

    def send_report(self, payload: bytes) -> None:
        raise NotImplementedError


class RollupServer(RollupBackend):
    """A backend that can also drive the accept/reject loop."""

    def finish_and_get_next(self, status: FinishStatus) -> Optional[Input]:
        """
        Finish the current input with `status` and fetch the next one.

        Returns None when the server has no input ready yet; callers retry with
        the same status.
        """
        raise NotImplementedError
