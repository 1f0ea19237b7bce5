"""Echo: every advance emits a voucher, a notice and a report with its payload."""

from __future__ import annotations

from typing import Optional

from ..core.dispatch import Application
from ..core.env import AdvanceEnv, InspectEnv
from ..core.types import Deposit, Metadata


class EchoApplication(Application):
    def advance(self, env: AdvanceEnv, metadata: Metadata, deposit: Optional[Deposit], payload: bytes) -> None:
        env.voucher(metadata.msg_sender, payload)
        env.notice(payload)
        env.report(payload)

    def inspect(self, env: InspectEnv, payload: bytes) -> None:
        env.report(payload)
