from __future__ import annotations

import pytest

from rollwallet.core.errors import InsufficientFundsError, SelfTransferError
from rollwallet.state.ledger import Ledger

SRC = bytes.fromhex("fa" * 20)
DST = bytes.fromhex("fe" * 20)
TOKEN = bytes.fromhex("fb" * 20)
OTHER_TOKEN = bytes.fromhex("0b" * 20)

ETHER_WITHDRAW_100 = bytes.fromhex(
    "522f6815"
    "000000000000000000000000fafafafafafafafafafafafafafafafafafafafa"
    "0000000000000000000000000000000000000000000000000000000000000064"
)
ERC20_TRANSFER_100 = bytes.fromhex(
    "a9059cbb"
    "000000000000000000000000fafafafafafafafafafafafafafafafafafafafa"
    "0000000000000000000000000000000000000000000000000000000000000064"
)


class TestEther:
    def test_deposit_and_enumerate(self) -> None:
        ledger = Ledger()
        assert ledger.ether_addresses() == []
        ledger.ether_deposit(DST, 1)
        ledger.ether_deposit(SRC, 2)
        assert ledger.ether_addresses() == [SRC, DST]
        assert ledger.ether_balance_of(SRC) == 2

    def test_withdraw_returns_voucher_payload(self) -> None:
        ledger = Ledger()
        ledger.ether_deposit(SRC, 100)
        assert ledger.ether_withdraw(SRC, 100) == ETHER_WITHDRAW_100
        assert ledger.ether_balance_of(SRC) == 0
        assert ledger.ether_addresses() == []

    def test_insufficient_funds_withdraw(self) -> None:
        ledger = Ledger()
        ledger.ether_deposit(SRC, 50)
        with pytest.raises(InsufficientFundsError):
            ledger.ether_withdraw(SRC, 100)
        assert ledger.ether_balance_of(SRC) == 50

    def test_transfer(self) -> None:
        ledger = Ledger()
        ledger.ether_deposit(SRC, 50)
        ledger.ether_transfer(SRC, DST, 20)
        assert ledger.ether_balance_of(SRC) == 30
        assert ledger.ether_balance_of(DST) == 20


class TestERC20:
    def test_tables_are_independent_per_token(self) -> None:
        ledger = Ledger()
        ledger.erc20_deposit(TOKEN, SRC, 10)
        ledger.erc20_deposit(OTHER_TOKEN, SRC, 5)
        ledger.ether_deposit(SRC, 1)
        assert ledger.erc20_balance_of(TOKEN, SRC) == 10
        assert ledger.erc20_balance_of(OTHER_TOKEN, SRC) == 5
        assert ledger.ether_balance_of(SRC) == 1
        assert ledger.erc20_tokens() == [OTHER_TOKEN, TOKEN]

    def test_unknown_token_reads_as_empty(self) -> None:
        ledger = Ledger()
        assert ledger.erc20_balance_of(TOKEN, SRC) == 0
        assert ledger.erc20_addresses(TOKEN) == []
        assert ledger.erc20_tokens() == []

    def test_token_disappears_when_last_balance_is_zero(self) -> None:
        ledger = Ledger()
        ledger.erc20_deposit(TOKEN, SRC, 100)
        assert ledger.erc20_withdraw(TOKEN, SRC, 100) == ERC20_TRANSFER_100
        assert ledger.erc20_tokens() == []
        assert ledger.erc20_addresses(TOKEN) == []

    def test_zero_deposit_does_not_create_token(self) -> None:
        ledger = Ledger()
        ledger.erc20_deposit(TOKEN, SRC, 0)
        assert ledger.erc20_tokens() == []

    def test_transfer_errors_leave_state_untouched(self) -> None:
        ledger = Ledger()
        ledger.erc20_deposit(TOKEN, SRC, 10)
        with pytest.raises(SelfTransferError):
            ledger.erc20_transfer(TOKEN, SRC, SRC, 1)
        with pytest.raises(InsufficientFundsError):
            ledger.erc20_transfer(TOKEN, SRC, DST, 11)
        with pytest.raises(InsufficientFundsError):
            ledger.erc20_transfer(OTHER_TOKEN, SRC, DST, 1)
        assert ledger.erc20_addresses(TOKEN) == [SRC]
        assert ledger.erc20_tokens() == [TOKEN]

    def test_transfer_moves_balances(self) -> None:
        ledger = Ledger()
        ledger.erc20_deposit(TOKEN, SRC, 10)
        ledger.erc20_transfer(TOKEN, SRC, DST, 10)
        assert ledger.erc20_addresses(TOKEN) == [DST]
        assert ledger.erc20_balance_of(TOKEN, DST) == 10
