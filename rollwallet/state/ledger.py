"""
Asset ledger: one balance table for Ether and one per ERC-20 token.

The ledger only does bookkeeping. Withdrawals return the encoded call that the
caller must emit as a voucher.
"""

from __future__ import annotations

from typing import Dict, List

from ..core.codec import encode_erc20_withdrawal, encode_ether_withdrawal
from ..core.types import MAX_UINT256, Address, Amount
from .balances import BalanceTable


class Ledger:
    def __init__(self, max_balance: Amount = MAX_UINT256) -> None:
        self.max_balance = max_balance
        self._ether = BalanceTable(max_balance)
        self._tokens: Dict[Address, BalanceTable] = {}

    # -- Ether ---------------------------------------------------------------

    def ether_balance_of(self, address: Address) -> Amount:
        return self._ether.get(address)

    def ether_addresses(self) -> List[Address]:
        return self._ether.addresses()

    def ether_deposit(self, address: Address, value: Amount) -> Amount:
        return self._ether.deposit(address, value)

    def ether_transfer(self, src: Address, dst: Address, value: Amount) -> None:
        self._ether.transfer(src, dst, value)

    def ether_withdraw(self, address: Address, value: Amount) -> bytes:
        """Debit the account and return the `withdrawEther` voucher payload."""
        # Encode first so a bad value can't leave the balance debited.
        payload = encode_ether_withdrawal(address, value)
        self._ether.withdraw(address, value)
        return payload

    # -- ERC-20 --------------------------------------------------------------

    def erc20_balance_of(self, token: Address, address: Address) -> Amount:
        table = self._tokens.get(token)
        return table.get(address) if table is not None else 0

    def erc20_tokens(self) -> List[Address]:
        """Tokens with at least one non-zero balance, sorted by raw bytes."""
        return sorted(token for token, table in self._tokens.items() if len(table) > 0)

    def erc20_addresses(self, token: Address) -> List[Address]:
        table = self._tokens.get(token)
        return table.addresses() if table is not None else []

    def erc20_deposit(self, token: Address, address: Address, amount: Amount) -> Amount:
        try:
            return self._token_table(token).deposit(address, amount)
        finally:
            self._drop_if_empty(token)

    def erc20_transfer(self, token: Address, src: Address, dst: Address, amount: Amount) -> None:
        table = self._token_table(token)
        try:
            table.transfer(src, dst, amount)
        finally:
            self._drop_if_empty(token)

    def erc20_withdraw(self, token: Address, address: Address, amount: Amount) -> bytes:
        """Debit the account and return the token `transfer` voucher payload."""
        payload = encode_erc20_withdrawal(address, amount)
        table = self._token_table(token)
        try:
            table.withdraw(address, amount)
        finally:
            self._drop_if_empty(token)
        return payload

    def _token_table(self, token: Address) -> BalanceTable:
        table = self._tokens.get(token)
        if table is None:
            table = BalanceTable(self.max_balance)
            self._tokens[token] = table
        return table

    def _drop_if_empty(self, token: Address) -> None:
        table = self._tokens.get(token)
        if table is not None and len(table) == 0:
            del self._tokens[token]

    def __repr__(self) -> str:
        return f"Ledger(ether={len(self._ether)} accounts, tokens={len(self._tokens)})"
