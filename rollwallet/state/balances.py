"""
Bounded balance tracking with deterministic ordering.

Implements BalanceTable[Address] -> Amount
"""

import logging
from typing import Dict, List

from ..core.errors import BalanceOverflowError, InsufficientFundsError, SelfTransferError
from ..core.types import MAX_UINT256, Address, Amount, format_address

logger = logging.getLogger(__name__)


class BalanceTable:
    """
    Sparse balance table mapping address -> amount.

    Zero balances are never stored, so `addresses()` only lists accounts that
    hold something. Ordering is imposed at read time (byte-lexicographic over
    the raw address), never taken from dict iteration order.
    """

    def __init__(self, max_balance: Amount = MAX_UINT256):
        """Initialize empty balance table."""
        if max_balance <= 0:
            raise ValueError(f"max_balance must be positive: {max_balance}")
        self.max_balance = max_balance
        self._balances: Dict[Address, Amount] = {}

    def get(self, address: Address) -> Amount:
        """Get balance for address. Returns 0 if not found."""
        return self._balances.get(address, 0)

    def set(self, address: Address, amount: Amount) -> None:
        """
        Set balance for address.

        Args:
            address: Account address
            amount: Amount in [0, max_balance]

        Raises:
            ValueError: If amount is out of range
        """
        if amount < 0 or amount > self.max_balance:
            raise ValueError(f"Balance out of range: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(address, None)
        else:
            self._balances[address] = amount

    def deposit(self, address: Address, amount: Amount) -> Amount:
        """
        Credit an inbound deposit. Saturates at `max_balance` instead of failing,
        because the asset already left the origin chain.

        Returns:
            The new balance
        """
        _require_amount(amount)
        new_balance = self.get(address) + amount
        if new_balance > self.max_balance:
            # Not reachable with real token supplies.
            logger.warning("balance overflow on deposit; clamping account=%s", format_address(address))
            new_balance = self.max_balance
        self.set(address, new_balance)
        return new_balance

    def transfer(self, src: Address, dst: Address, amount: Amount) -> None:
        """
        Move amount from src to dst. Either both balances change or neither does.

        Raises:
            SelfTransferError: If src == dst
            InsufficientFundsError: If src holds less than amount
            BalanceOverflowError: If dst would exceed max_balance
        """
        _require_amount(amount)
        if src == dst:
            raise SelfTransferError()
        src_balance = self.get(src)
        if src_balance < amount:
            raise InsufficientFundsError(src_balance, amount)
        new_dst_balance = self.get(dst) + amount
        if new_dst_balance > self.max_balance:
            raise BalanceOverflowError()

        # commit
        self.set(src, src_balance - amount)
        self.set(dst, new_dst_balance)

    def withdraw(self, address: Address, amount: Amount) -> None:
        """
        Debit amount from address.

        Raises:
            InsufficientFundsError: If address holds less than amount
        """
        _require_amount(amount)
        balance = self.get(address)
        if balance < amount:
            raise InsufficientFundsError(balance, amount)
        self.set(address, balance - amount)

    def addresses(self) -> List[Address]:
        """Addresses with a non-zero balance, sorted by raw bytes."""
        return sorted(self._balances)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"


def _require_amount(amount: Amount) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"amount must be an int: {amount!r}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
