"""
Portal registry: classifies an advance input by its sender.

- Ether portal:      decode, credit the ledger, yield an `EtherDeposit`.
- ERC-20 portal:     decode (failed transfers reject), credit, yield an `ERC20Deposit`.
- App address relay: decode a bare address; the input never reaches the app.
- Anything else:     the payload is forwarded untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..state.ledger import Ledger
from .codec import decode_erc20_deposit, decode_ether_deposit, decode_relay_address
from .types import Address, Deposit, ERC20Deposit, EtherDeposit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayMessage:
    address: Address


@dataclass(frozen=True)
class PortalDeposit:
    deposit: Deposit
    payload: bytes


@dataclass(frozen=True)
class PlainInput:
    payload: bytes


Classified = Union[RelayMessage, PortalDeposit, PlainInput]


class PortalRegistry:
    def __init__(
        self,
        ledger: Ledger,
        *,
        ether_portal: Address,
        erc20_portal: Address,
        app_address_relay: Optional[Address] = None,
        erc20_success_flag: bool = True,
    ) -> None:
        self._ledger = ledger
        self.ether_portal = ether_portal
        self.erc20_portal = erc20_portal
        self.app_address_relay = app_address_relay
        self.erc20_success_flag = erc20_success_flag

    def classify(self, sender: Address, payload: bytes) -> Classified:
        """
        Classify one advance input and apply any deposit to the ledger.

        Raises:
            MalformedPayloadError: If a portal or relay payload is malformed
            FailedTransferError: If an ERC-20 deposit reports a failed transfer
        """
        if self.app_address_relay is not None and sender == self.app_address_relay:
            return RelayMessage(decode_relay_address(payload))
        if sender == self.ether_portal:
            return self._ether_deposit(payload)
        if sender == self.erc20_portal:
            return self._erc20_deposit(payload)
        return PlainInput(payload)

    def _ether_deposit(self, payload: bytes) -> PortalDeposit:
        sender, value, rest = decode_ether_deposit(payload)
        self._ledger.ether_deposit(sender, value)
        deposit = EtherDeposit(sender=sender, value=value)
        logger.debug("received deposit: %s", deposit)
        return PortalDeposit(deposit, rest)

    def _erc20_deposit(self, payload: bytes) -> PortalDeposit:
        token, sender, amount, rest = decode_erc20_deposit(payload, success_flag=self.erc20_success_flag)
        self._ledger.erc20_deposit(token, sender, amount)
        deposit = ERC20Deposit(token=token, sender=sender, amount=amount)
        logger.debug("received deposit: %s", deposit)
        return PortalDeposit(deposit, rest)
