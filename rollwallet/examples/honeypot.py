"""
Honeypot: a contract that keeps every Ether deposit for its owner.

Deposits from anyone but the owner are transferred to the owner. An advance
without a deposit is a withdrawal request, accepted only from the owner. Every
input reports the owner's balance as a 32-byte big-endian integer.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.dispatch import Application
from ..core.env import AdvanceEnv, InspectEnv
from ..core.errors import RollwalletError
from ..core.types import Address, Deposit, EtherDeposit, Metadata

logger = logging.getLogger(__name__)


class HoneypotError(RollwalletError):
    pass


class HoneypotApplication(Application):
    def __init__(self, owner: Address) -> None:
        self.owner = owner

    def advance(self, env: AdvanceEnv, metadata: Metadata, deposit: Optional[Deposit], payload: bytes) -> None:
        try:
            if deposit is not None:
                self._deposit(env, deposit)
            else:
                self._withdraw(env, metadata)
        finally:
            self.inspect(env, b"")

    def inspect(self, env: InspectEnv, payload: bytes) -> None:
        balance = env.ether_balance_of(self.owner)
        env.report(balance.to_bytes(32, byteorder="big"))

    def _deposit(self, env: AdvanceEnv, deposit: Deposit) -> None:
        if not isinstance(deposit, EtherDeposit):
            raise HoneypotError(f"unsupported deposit: {type(deposit).__name__}")
        if deposit.sender != self.owner:
            env.ether_transfer(deposit.sender, self.owner, deposit.value)

    def _withdraw(self, env: AdvanceEnv, metadata: Metadata) -> None:
        if metadata.msg_sender != self.owner:
            raise HoneypotError("input not from owner")
        balance = env.ether_balance_of(self.owner)
        if balance == 0:
            raise HoneypotError("nothing to withdraw")
        env.ether_withdraw(self.owner, balance)
        logger.info("withdrawn value=%d", balance)
