"""
Environment: the capabilities an application sees while handling an input.

`Environment` is created once per run and owns the ledger and the application
address. Applications never get it directly; they get a view:

- `InspectEnv`: reports and read-only ledger queries (inspect and advance).
- `AdvanceEnv`: adds vouchers, notices, transfers and withdrawals (advance only).

Ledger writes are applied immediately and never rolled back. Each ledger call
is atomic on its own; a later failure in the same input does not undo it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..integration.address_book import AddressBook
from ..integration.rollup import RollupBackend
from ..state.ledger import Ledger
from .codec import bytes_to_hex
from .errors import UnknownAppAddressError
from .portals import PortalRegistry
from .types import MAX_UINT256, Address, Amount, format_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    # Upper bound for every ledger balance.
    max_balance: int = MAX_UINT256
    # Older ERC-20 portals prefix deposits with a success byte.
    erc20_success_flag: bool = True
    # Chain-aware servers send the app contract in each input's metadata.
    app_address_from_metadata: bool = True


class Environment:
    def __init__(
        self,
        address_book: AddressBook,
        rollup: RollupBackend,
        config: EngineConfig = EngineConfig(),
    ) -> None:
        self.address_book = address_book
        self.rollup = rollup
        self.config = config
        self.ledger = Ledger(config.max_balance)
        self.portals = PortalRegistry(
            self.ledger,
            ether_portal=address_book.ether_portal,
            erc20_portal=address_book.erc20_portal,
            app_address_relay=address_book.app_address_relay,
            erc20_success_flag=config.erc20_success_flag,
        )
        self._app_address: Optional[Address] = None

    @property
    def app_address(self) -> Optional[Address]:
        return self._app_address

    def set_app_address(self, address: Address) -> None:
        if address != self._app_address:
            logger.debug("got application address: %s", format_address(address))
        self._app_address = address


class InspectEnv:
    def __init__(self, env: Environment) -> None:
        self._env = env

    @property
    def address_book(self) -> AddressBook:
        return self._env.address_book

    def report(self, payload: bytes) -> None:
        logger.debug("sending report payload=%s", bytes_to_hex(payload))
        self._env.rollup.send_report(bytes(payload))

    def reportf(self, fmt: str, *args: object) -> None:
        """Format `fmt % args` and send it as a UTF-8 report."""
        text = fmt % args if args else fmt
        self.report(text.encode("utf-8"))

    def app_address(self) -> Optional[Address]:
        """The application contract address, or None until it has been relayed."""
        return self._env.app_address

    def ether_addresses(self) -> List[Address]:
        return self._env.ledger.ether_addresses()

    def ether_balance_of(self, address: Address) -> Amount:
        return self._env.ledger.ether_balance_of(address)

    def erc20_tokens(self) -> List[Address]:
        return self._env.ledger.erc20_tokens()

    def erc20_addresses(self, token: Address) -> List[Address]:
        return self._env.ledger.erc20_addresses(token)

    def erc20_balance_of(self, token: Address, address: Address) -> Amount:
        return self._env.ledger.erc20_balance_of(token, address)


class AdvanceEnv(InspectEnv):
    def voucher(self, destination: Address, payload: bytes, value: Optional[Amount] = None) -> int:
        logger.debug(
            "sending voucher destination=%s value=%s payload=%s",
            format_address(destination),
            value,
            bytes_to_hex(payload),
        )
        return self._env.rollup.send_voucher(destination, bytes(payload), value)

    def notice(self, payload: bytes) -> int:
        logger.debug("sending notice payload=%s", bytes_to_hex(payload))
        return self._env.rollup.send_notice(bytes(payload))

    def ether_transfer(self, src: Address, dst: Address, value: Amount) -> None:
        self._env.ledger.ether_transfer(src, dst, value)

    def ether_withdraw(self, address: Address, value: Amount) -> int:
        """
        Debit `value` from `address` and emit the withdrawal voucher to the
        application contract. Returns the voucher index.

        Raises:
            UnknownAppAddressError: If the app address was not relayed yet
            InsufficientFundsError: If the account holds less than value
        """
        app_address = self._env.app_address
        if app_address is None:
            raise UnknownAppAddressError("can't withdraw ether without application address")
        payload = self._env.ledger.ether_withdraw(address, value)
        return self.voucher(app_address, payload)

    def erc20_transfer(self, token: Address, src: Address, dst: Address, amount: Amount) -> None:
        self._env.ledger.erc20_transfer(token, src, dst, amount)

    def erc20_withdraw(self, token: Address, address: Address, amount: Amount) -> int:
        """Debit the account and emit a token `transfer` voucher. Returns the voucher index."""
        payload = self._env.ledger.erc20_withdraw(token, address, amount)
        return self.voucher(token, payload)
