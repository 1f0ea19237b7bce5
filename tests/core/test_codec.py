from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rollwallet.core.codec import (
    ERC20_TRANSFER_SELECTOR,
    WITHDRAW_ETHER_SELECTOR,
    bytes_to_hex,
    decode_erc20_deposit,
    decode_ether_deposit,
    decode_relay_address,
    encode_erc20_deposit,
    encode_erc20_withdrawal,
    encode_ether_deposit,
    encode_ether_withdrawal,
    hex_to_bytes,
    uint256_to_hex,
)
from rollwallet.core.errors import FailedTransferError, MalformedPayloadError
from rollwallet.core.types import MAX_UINT256, ERC20Deposit, EtherDeposit

SRC = bytes.fromhex("fa" * 20)
TOKEN = bytes.fromhex("fb" * 20)
VALUE_100 = "0000000000000000000000000000000000000000000000000000000000000064"


class TestHex:
    def test_empty_payload(self) -> None:
        assert hex_to_bytes("0x", name="payload") == b""

    def test_round_trip(self) -> None:
        assert hex_to_bytes("0xDeadBeef", name="payload") == b"\xde\xad\xbe\xef"
        assert bytes_to_hex(b"\xde\xad\xbe\xef") == "0xdeadbeef"

    @pytest.mark.parametrize("bad", ["deadbeef", "0xabc", "0xzz", "0xaa bb", "0x aabb"])
    def test_rejects_malformed_hex(self, bad: str) -> None:
        with pytest.raises(ValueError):
            hex_to_bytes(bad, name="payload")

    def test_rejects_non_string(self) -> None:
        with pytest.raises(TypeError):
            hex_to_bytes(None, name="payload")  # type: ignore[arg-type]

    def test_expected_size(self) -> None:
        with pytest.raises(ValueError):
            hex_to_bytes("0x" + "aa" * 19, name="msg_sender", expected_nbytes=20)
        assert hex_to_bytes("0x" + "aa" * 20, name="msg_sender", expected_nbytes=20) == b"\xaa" * 20

    def test_uint256_to_hex(self) -> None:
        assert uint256_to_hex(100) == "0x" + VALUE_100
        with pytest.raises(ValueError):
            uint256_to_hex(MAX_UINT256 + 1)


class TestEtherDeposit:
    def test_valid_deposit(self) -> None:
        payload = bytes.fromhex("fa" * 20 + VALUE_100 + "deadbeef")
        sender, value, rest = decode_ether_deposit(payload)
        assert sender == SRC
        assert value == 100
        assert rest == bytes.fromhex("deadbeef")

    def test_valid_deposit_with_empty_input(self) -> None:
        payload = bytes.fromhex("fa" * 20 + VALUE_100)
        _sender, _value, rest = decode_ether_deposit(payload)
        assert rest == b""

    def test_malformed_deposit(self) -> None:
        with pytest.raises(MalformedPayloadError, match="invalid ether deposit size; got 3"):
            decode_ether_deposit(bytes.fromhex("fafafa"))

    def test_one_byte_short(self) -> None:
        with pytest.raises(MalformedPayloadError, match="got 51"):
            decode_ether_deposit(b"\x01" * 51)

    def test_string(self) -> None:
        deposit = EtherDeposit(sender=SRC, value=123000000000000000)
        expected = "0xFafafAfafAFaFAFaFafafafAfaFaFAfAfAfAFaFA deposited 0.123000000000000000 Ether"
        assert str(deposit) == expected

    @given(
        sender=st.binary(min_size=20, max_size=20),
        value=st.integers(min_value=0, max_value=MAX_UINT256),
        extra=st.binary(max_size=256),
    )
    def test_decode_inverts_portal_layout(self, sender: bytes, value: int, extra: bytes) -> None:
        assert decode_ether_deposit(encode_ether_deposit(sender, value, extra)) == (sender, value, extra)


class TestERC20Deposit:
    def test_valid_deposit(self) -> None:
        payload = bytes.fromhex("01" + "fb" * 20 + "fa" * 20 + VALUE_100 + "deadbeef")
        token, sender, amount, rest = decode_erc20_deposit(payload)
        assert token == TOKEN
        assert sender == SRC
        assert amount == 100
        assert rest == bytes.fromhex("deadbeef")

    def test_any_non_zero_flag_is_success(self) -> None:
        payload = bytes.fromhex("ff" + "fb" * 20 + "fa" * 20 + VALUE_100)
        assert decode_erc20_deposit(payload) == (TOKEN, SRC, 100, b"")

    def test_failed_transfer(self) -> None:
        payload = bytes.fromhex("00" + "fb" * 20 + "fa" * 20 + VALUE_100)
        with pytest.raises(FailedTransferError, match="received failed erc20 transfer"):
            decode_erc20_deposit(payload)

    def test_malformed_deposit(self) -> None:
        with pytest.raises(MalformedPayloadError, match="invalid erc20 deposit size; got 72"):
            decode_erc20_deposit(b"\x01" * 72)

    def test_layout_without_success_flag(self) -> None:
        payload = bytes.fromhex("fb" * 20 + "fa" * 20 + VALUE_100 + "beef")
        assert decode_erc20_deposit(payload, success_flag=False) == (TOKEN, SRC, 100, b"\xbe\xef")
        with pytest.raises(MalformedPayloadError):
            decode_erc20_deposit(payload[:71], success_flag=False)

    def test_encode_matches_decode(self) -> None:
        payload = encode_erc20_deposit(TOKEN, SRC, 100, b"hi")
        assert payload[0] == 1
        assert decode_erc20_deposit(payload) == (TOKEN, SRC, 100, b"hi")

    def test_string(self) -> None:
        deposit = ERC20Deposit(token=TOKEN, sender=SRC, amount=5)
        assert str(deposit).endswith(" token")
        assert " deposited 5 of " in str(deposit)


class TestRelay:
    def test_exact_address(self) -> None:
        assert decode_relay_address(SRC) == SRC

    @pytest.mark.parametrize("size", [0, 19, 21, 32])
    def test_wrong_size(self, size: int) -> None:
        with pytest.raises(MalformedPayloadError, match="invalid input from app address relay"):
            decode_relay_address(b"\xfa" * size)


class TestWithdrawal:
    def test_selectors(self) -> None:
        assert WITHDRAW_ETHER_SELECTOR == bytes.fromhex("522f6815")
        assert ERC20_TRANSFER_SELECTOR == bytes.fromhex("a9059cbb")

    def test_encode_ether_withdrawal(self) -> None:
        expected = bytes.fromhex("522f6815" + "00" * 12 + "fa" * 20 + VALUE_100)
        assert encode_ether_withdrawal(SRC, 100) == expected

    def test_encode_erc20_withdrawal(self) -> None:
        expected = bytes.fromhex("a9059cbb" + "00" * 12 + "fa" * 20 + VALUE_100)
        assert encode_erc20_withdrawal(SRC, 100) == expected

    def test_max_value(self) -> None:
        payload = encode_ether_withdrawal(SRC, MAX_UINT256)
        assert len(payload) == 4 + 32 + 32
        assert payload[-32:] == b"\xff" * 32

    def test_out_of_range_value(self) -> None:
        with pytest.raises(ValueError):
            encode_ether_withdrawal(SRC, MAX_UINT256 + 1)
        with pytest.raises(ValueError):
            encode_erc20_withdrawal(SRC, -1)
