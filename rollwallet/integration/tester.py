"""
Unit tester for rollwallet applications.

Drives the real dispatcher and environment against an in-memory rollup, so
portal decoding, ledger updates and fault isolation behave as in production:

    tester = Tester(MyApplication())
    result = tester.deposit_ether(alice, 100, b"")
    assert result.accepted
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

from ..core.codec import encode_erc20_deposit, encode_ether_deposit
from ..core.dispatch import Application, Dispatcher
from ..core.env import EngineConfig, Environment
from ..core.errors import RollwalletError
from ..core.types import Address, AdvanceInput, Amount, InspectInput, Metadata, Notice, Report, Voucher
from .address_book import AddressBook
from .rollup_mock import RollupMock


@dataclass(frozen=True)
class AdvanceResult:
    vouchers: List[Voucher]
    notices: List[Notice]
    reports: List[Report]
    metadata: Metadata
    error: Optional[RollwalletError] = None

    @property
    def accepted(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class InspectResult:
    reports: List[Report]
    error: Optional[RollwalletError] = None

    @property
    def accepted(self) -> bool:
        return self.error is None


class Tester:
    def __init__(
        self,
        app: Application,
        *,
        address_book: Optional[AddressBook] = None,
        config: EngineConfig = EngineConfig(),
        chain_id: Optional[int] = None,
        app_contract: Optional[Address] = None,
    ) -> None:
        self.rollup = RollupMock()
        self.book = address_book if address_book is not None else AddressBook()
        self.env = Environment(self.book, self.rollup, config)
        self.dispatcher = Dispatcher(self.env, app)
        self.chain_id = chain_id
        self.app_contract = app_contract
        self.index = 0

    def advance(self, msg_sender: Address, payload: bytes = b"") -> AdvanceResult:
        """Send an advance input from `msg_sender`."""
        return self._send_advance(msg_sender, payload)

    def deposit_ether(self, sender: Address, value: Amount, payload: bytes = b"") -> AdvanceResult:
        """Simulate an Ether portal deposit carrying `payload`."""
        return self._send_advance(self.book.ether_portal, encode_ether_deposit(sender, value, payload))

    def deposit_erc20(self, token: Address, sender: Address, value: Amount, payload: bytes = b"") -> AdvanceResult:
        """Simulate a successful ERC-20 portal deposit carrying `payload`."""
        portal_payload = encode_erc20_deposit(
            token, sender, value, payload, success_flag=self.env.config.erc20_success_flag
        )
        return self._send_advance(self.book.erc20_portal, portal_payload)

    def relay_app_address(self, address: Address) -> AdvanceResult:
        """Simulate the relay contract announcing the application address."""
        if self.book.app_address_relay is None:
            raise ValueError("address book has no app address relay")
        return self._send_advance(self.book.app_address_relay, bytes(address))

    def inspect(self, payload: bytes = b"") -> InspectResult:
        self.rollup.reset()
        result = self.dispatcher.handle(InspectInput(payload=payload))
        return InspectResult(reports=list(self.rollup.reports), error=result.error)

    def _send_advance(self, msg_sender: Address, payload: bytes) -> AdvanceResult:
        self.rollup.reset()
        metadata = Metadata(
            input_index=self.index,
            msg_sender=msg_sender,
            block_number=self.index,
            block_timestamp=int(time.time()),
            chain_id=self.chain_id,
            app_contract=self.app_contract,
        )
        result = self.dispatcher.handle(AdvanceInput(metadata=metadata, payload=payload))
        self.index += 1
        return AdvanceResult(
            vouchers=list(self.rollup.vouchers),
            notices=list(self.rollup.notices),
            reports=list(self.rollup.reports),
            metadata=metadata,
            error=result.error,
        )
