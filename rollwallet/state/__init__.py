"""
In-memory asset state for rollwallet
"""

from .balances import BalanceTable
from .ledger import Ledger

__all__ = [
    "BalanceTable",
    "Ledger",
]
