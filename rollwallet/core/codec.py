"""
Fixed-layout binary codec for portal payloads and withdrawal vouchers.

Portal payloads are packed (no padding), big-endian:
- Ether deposit:   sender(20) | value(32) | payload(*)
- ERC-20 deposit:  success(1) | token(20) | sender(20) | amount(32) | payload(*)
- Address relay:   address(20)

Withdrawal vouchers are ABI-encoded calls:
    selector(4) | pad(12) | address(20) | value(32)
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from .errors import FailedTransferError, MalformedPayloadError
from .types import ADDRESS_LENGTH, MAX_UINT256, WORD_LENGTH, Address, Amount, format_address

WITHDRAW_ETHER_SIGNATURE = "withdrawEther(address,uint256)"
ERC20_TRANSFER_SIGNATURE = "transfer(address,uint256)"

WITHDRAW_ETHER_SELECTOR = function_signature_to_4byte_selector(WITHDRAW_ETHER_SIGNATURE)
ERC20_TRANSFER_SELECTOR = function_signature_to_4byte_selector(ERC20_TRANSFER_SIGNATURE)

ETHER_DEPOSIT_MIN_SIZE = ADDRESS_LENGTH + WORD_LENGTH
ERC20_DEPOSIT_MIN_SIZE = 1 + ADDRESS_LENGTH + ADDRESS_LENGTH + WORD_LENGTH

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]*$")


# -- hex at the transport boundary -------------------------------------------


def hex_to_bytes(hex_str: str, *, name: str, expected_nbytes: Optional[int] = None) -> bytes:
    """
    Decode a 0x-prefixed hex string. "0x" alone decodes to an empty payload.

    Raises:
        ValueError: If the string is not 0x-prefixed, even-length hex of the expected size
    """
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a string")
    if not hex_str.startswith(("0x", "0X")):
        raise ValueError(f"{name} must be 0x-prefixed hex")
    s = hex_str[2:]
    if len(s) % 2 != 0:
        raise ValueError(f"{name} must have an even number of hex chars")
    # bytes.fromhex() tolerates whitespace; the regex does not.
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    out = bytes.fromhex(s)
    if expected_nbytes is not None and len(out) != expected_nbytes:
        raise ValueError(f"{name} must decode to exactly {expected_nbytes} bytes")
    return out


def bytes_to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def uint256_to_hex(value: Amount) -> str:
    return bytes_to_hex(_uint256_bytes(value))


def _uint256_bytes(value: Amount) -> bytes:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("value must be an int")
    if value < 0 or value > MAX_UINT256:
        raise ValueError(f"value out of uint256 range: {value}")
    return value.to_bytes(WORD_LENGTH, byteorder="big", signed=False)


# -- portal payloads ---------------------------------------------------------


def decode_ether_deposit(payload: bytes) -> Tuple[Address, Amount, bytes]:
    """
    Split an Ether portal payload into (sender, value, application payload).

    Raises:
        MalformedPayloadError: If the payload is shorter than 52 bytes
    """
    if len(payload) < ETHER_DEPOSIT_MIN_SIZE:
        raise MalformedPayloadError(f"invalid ether deposit size; got {len(payload)}")
    sender = bytes(payload[:ADDRESS_LENGTH])
    value = int.from_bytes(payload[ADDRESS_LENGTH:ETHER_DEPOSIT_MIN_SIZE], byteorder="big", signed=False)
    return sender, value, bytes(payload[ETHER_DEPOSIT_MIN_SIZE:])


def decode_erc20_deposit(payload: bytes, *, success_flag: bool = True) -> Tuple[Address, Address, Amount, bytes]:
    """
    Split an ERC-20 portal payload into (token, sender, amount, application payload).

    Older portals prefix the payload with a success byte; a zero byte means the
    token transfer itself failed on the origin chain.

    Raises:
        MalformedPayloadError: If the payload is shorter than the fixed header
        FailedTransferError: If the success byte is zero
    """
    min_size = ERC20_DEPOSIT_MIN_SIZE if success_flag else ERC20_DEPOSIT_MIN_SIZE - 1
    if len(payload) < min_size:
        raise MalformedPayloadError(f"invalid erc20 deposit size; got {len(payload)}")
    offset = 0
    if success_flag:
        if payload[0] == 0:
            raise FailedTransferError("received failed erc20 transfer")
        offset = 1
    token = bytes(payload[offset : offset + ADDRESS_LENGTH])
    offset += ADDRESS_LENGTH
    sender = bytes(payload[offset : offset + ADDRESS_LENGTH])
    offset += ADDRESS_LENGTH
    amount = int.from_bytes(payload[offset : offset + WORD_LENGTH], byteorder="big", signed=False)
    offset += WORD_LENGTH
    return token, sender, amount, bytes(payload[offset:])


def decode_relay_address(payload: bytes) -> Address:
    if len(payload) != ADDRESS_LENGTH:
        raise MalformedPayloadError(f"invalid input from app address relay: {bytes_to_hex(payload)}")
    return bytes(payload)


def encode_ether_deposit(sender: Address, value: Amount, payload: bytes = b"") -> bytes:
    """Build the payload the Ether portal sends for a deposit (used by the tester)."""
    return bytes(sender) + _uint256_bytes(value) + bytes(payload)


def encode_erc20_deposit(
    token: Address,
    sender: Address,
    amount: Amount,
    payload: bytes = b"",
    *,
    success_flag: bool = True,
) -> bytes:
    """Build the payload the ERC-20 portal sends for a successful deposit."""
    header = b"\x01" if success_flag else b""
    return header + bytes(token) + bytes(sender) + _uint256_bytes(amount) + bytes(payload)


# -- withdrawal vouchers -----------------------------------------------------


def _encode_call(selector: bytes, address: Address, value: Amount) -> bytes:
    _uint256_bytes(value)  # range check before handing off to the ABI encoder
    return selector + encode(["address", "uint256"], [format_address(address), value])


def encode_ether_withdrawal(address: Address, value: Amount) -> bytes:
    """Payload of `withdrawEther(address,uint256)` on the application contract."""
    return _encode_call(WITHDRAW_ETHER_SELECTOR, address, value)


def encode_erc20_withdrawal(address: Address, value: Amount) -> bytes:
    """Payload of `transfer(address,uint256)` on the token contract."""
    return _encode_call(ERC20_TRANSFER_SELECTOR, address, value)
