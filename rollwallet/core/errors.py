"""Exception types for the rollwallet engine.

Decode and ledger errors reject the current input. ``TransportError`` is the
only fatal class: it ends the protocol loop.
"""

from __future__ import annotations


class RollwalletError(Exception):
    """Base class for every error raised by the engine."""


class MalformedPayloadError(RollwalletError):
    """Raised when a portal or relay payload has the wrong size or shape."""


class FailedTransferError(RollwalletError):
    """Raised when a token deposit reports that the origin-chain transfer failed."""


class LedgerError(RollwalletError):
    """Base class for ledger invariant violations."""


class SelfTransferError(LedgerError):
    """Raised when the source and destination of a transfer are the same account."""

    def __init__(self) -> None:
        super().__init__("can't transfer to self")


class InsufficientFundsError(LedgerError):
    """Raised when an account balance is lower than the requested amount."""

    def __init__(self, balance: int, value: int) -> None:
        self.balance = balance
        self.value = value
        super().__init__(f"insufficient funds: balance {balance} < {value}")


class BalanceOverflowError(LedgerError):
    """Raised when a credit would push a balance past the ledger maximum."""

    def __init__(self) -> None:
        super().__init__("balance overflow")


class UnknownAppAddressError(RollwalletError):
    """Raised when an operation needs the application address before it was relayed."""


class ApplicationFaultError(RollwalletError):
    """An unexpected exception escaped the application callback."""


class TransportError(RollwalletError):
    """Network or protocol failure while talking to the rollup server."""
