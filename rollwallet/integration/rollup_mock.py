"""
In-memory rollup backend.

Records the outputs of the current input. When driven by the protocol loop it
serves a scripted queue of inputs (`None` entries simulate a 202 "try again")
and records every finish status it receives.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

from ..core.errors import TransportError
from ..core.types import Address, Amount, Input, Notice, Report, Voucher
from .rollup import FinishStatus, RollupServer


class RollupMock(RollupServer):
    def __init__(self, inputs: Iterable[Optional[Input]] = ()) -> None:
        self.vouchers: List[Voucher] = []
        self.notices: List[Notice] = []
        self.reports: List[Report] = []
        self.statuses: List[FinishStatus] = []
        self._inputs: Deque[Optional[Input]] = deque(inputs)

    def send_voucher(self, destination: Address, payload: bytes, value: Optional[Amount] = None) -> int:
        self.vouchers.append(Voucher(destination=destination, payload=payload, value=value))
        return len(self.vouchers) - 1

    def send_notice(self, payload: bytes) -> int:
        self.notices.append(Notice(payload=payload))
        return len(self.notices) - 1

    def send_report(self, payload: bytes) -> None:
        self.reports.append(Report(payload=payload))

    def finish_and_get_next(self, status: FinishStatus) -> Optional[Input]:
        self.statuses.append(status)
        if not self._inputs:
            raise TransportError("rollup mock: no more inputs")
        next_input = self._inputs.popleft()
        if next_input is not None:
            self.reset()
        return next_input

    def push(self, input: Optional[Input]) -> None:
        self._inputs.append(input)

    def reset(self) -> None:
        """Drop the outputs of the previous input."""
        self.vouchers = []
        self.notices = []
        self.reports = []
