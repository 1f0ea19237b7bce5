from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rollwallet.core.errors import BalanceOverflowError, InsufficientFundsError, SelfTransferError
from rollwallet.core.types import MAX_UINT256
from rollwallet.state.balances import BalanceTable

SRC = bytes.fromhex("fa" * 20)
DST = bytes.fromhex("fe" * 20)

addresses = st.binary(min_size=20, max_size=20)
amounts = st.integers(min_value=0, max_value=MAX_UINT256)


def test_unknown_address_has_zero_balance() -> None:
    assert BalanceTable().get(SRC) == 0


def test_zero_balances_are_not_stored() -> None:
    table = BalanceTable()
    table.set(SRC, 1)
    table.set(DST, 1)
    assert table.addresses() == [SRC, DST]

    table.set(SRC, 0)
    table.set(DST, 0)
    assert table.addresses() == []
    assert len(table) == 0


def test_addresses_sorted_by_raw_bytes() -> None:
    table = BalanceTable()
    low = bytes.fromhex("00" * 19 + "01")
    high = bytes.fromhex("ff" + "00" * 19)
    for address in (DST, high, SRC, low):
        table.set(address, 7)
    assert table.addresses() == [low, SRC, DST, high]


def test_set_rejects_out_of_range() -> None:
    table = BalanceTable(max_balance=100)
    with pytest.raises(ValueError):
        table.set(SRC, -1)
    with pytest.raises(ValueError):
        table.set(SRC, 101)


def test_valid_transfer() -> None:
    table = BalanceTable()
    table.set(SRC, 50)
    table.set(DST, 50)
    table.transfer(SRC, DST, 50)
    assert table.get(SRC) == 0
    assert table.get(DST) == 100
    assert table.addresses() == [DST]


def test_zero_transfer_between_empty_accounts() -> None:
    table = BalanceTable()
    table.transfer(SRC, DST, 0)
    assert table.get(SRC) == 0
    assert table.get(DST) == 0
    assert len(table) == 0


def test_self_transfer() -> None:
    table = BalanceTable()
    table.set(SRC, 50)
    with pytest.raises(SelfTransferError, match="can't transfer to self"):
        table.transfer(SRC, SRC, 50)
    assert table.get(SRC) == 50


def test_insufficient_funds_transfer() -> None:
    table = BalanceTable()
    table.set(SRC, 50)
    with pytest.raises(InsufficientFundsError, match="insufficient funds"):
        table.transfer(SRC, DST, 100)
    assert table.get(SRC) == 50
    assert table.get(DST) == 0


def test_balance_overflow_transfer() -> None:
    table = BalanceTable()
    table.set(SRC, 50)
    table.set(DST, MAX_UINT256)
    with pytest.raises(BalanceOverflowError, match="balance overflow"):
        table.transfer(SRC, DST, 50)
    assert table.get(SRC) == 50
    assert table.get(DST) == MAX_UINT256


def test_deposit_clamps_at_max(caplog) -> None:
    table = BalanceTable()
    table.deposit(SRC, MAX_UINT256)
    with caplog.at_level("WARNING"):
        assert table.deposit(SRC, 0x1000) == MAX_UINT256
    assert table.get(SRC) == MAX_UINT256
    assert "balance overflow" in caplog.text


def test_custom_bound_applies_to_deposits() -> None:
    table = BalanceTable(max_balance=1000)
    table.deposit(SRC, 999)
    table.deposit(SRC, 999)
    assert table.get(SRC) == 1000


def test_withdraw() -> None:
    table = BalanceTable()
    table.set(SRC, 100)
    with pytest.raises(InsufficientFundsError):
        table.withdraw(SRC, 101)
    assert table.get(SRC) == 100
    table.withdraw(SRC, 100)
    assert table.get(SRC) == 0
    assert table.addresses() == []


def test_negative_amounts_rejected() -> None:
    table = BalanceTable()
    with pytest.raises(ValueError):
        table.deposit(SRC, -1)
    with pytest.raises(ValueError):
        table.transfer(SRC, DST, -1)
    with pytest.raises(TypeError):
        table.withdraw(SRC, True)


@given(owner=addresses, first=amounts, second=amounts)
def test_deposit_adds_and_saturates(owner: bytes, first: int, second: int) -> None:
    table = BalanceTable()
    table.deposit(owner, first)
    table.deposit(owner, second)
    assert table.get(owner) == min(first + second, MAX_UINT256)


@given(owner=addresses, balance=amounts, amount=amounts)
def test_self_transfer_never_changes_balance(owner: bytes, balance: int, amount: int) -> None:
    table = BalanceTable()
    table.set(owner, balance)
    with pytest.raises(SelfTransferError):
        table.transfer(owner, owner, amount)
    assert table.get(owner) == balance


@given(src_balance=amounts, dst_balance=amounts, amount=amounts)
def test_transfer_is_all_or_nothing(src_balance: int, dst_balance: int, amount: int) -> None:
    table = BalanceTable()
    table.set(SRC, src_balance)
    table.set(DST, dst_balance)
    try:
        table.transfer(SRC, DST, amount)
    except InsufficientFundsError:
        assert amount > src_balance
        assert (table.get(SRC), table.get(DST)) == (src_balance, dst_balance)
    except BalanceOverflowError:
        assert dst_balance + amount > MAX_UINT256
        assert (table.get(SRC), table.get(DST)) == (src_balance, dst_balance)
    else:
        assert table.get(SRC) == src_balance - amount
        assert table.get(DST) == dst_balance + amount
        assert table.get(SRC) + table.get(DST) == src_balance + dst_balance


@given(src_balance=amounts, dst_balance=amounts)
def test_zero_transfer_is_identity(src_balance: int, dst_balance: int) -> None:
    table = BalanceTable()
    table.set(SRC, src_balance)
    table.set(DST, dst_balance)
    table.transfer(SRC, DST, 0)
    assert (table.get(SRC), table.get(DST)) == (src_balance, dst_balance)
