"""Data types shared by the codec, the ledger, the dispatcher and the transports.

All records are frozen dataclasses. Conventions:
- `Address` values are raw 20-byte strings; ordering is byte-lexicographic.
- `Amount` values are non-negative integers bounded by `MAX_UINT256`.
- Payloads are raw `bytes`; hex only appears at the transport boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from eth_utils import from_wei, to_checksum_address

# Type aliases
Address = bytes  # 20 raw bytes
Amount = int  # 0 <= amount <= MAX_UINT256

ADDRESS_LENGTH = 20
WORD_LENGTH = 32
MAX_UINT256 = 2**256 - 1


def to_address(value: Union[str, bytes, bytearray]) -> Address:
    """
    Normalize an address given as raw bytes or as a 0x-prefixed hex string.

    Raises:
        ValueError: If the value does not describe exactly 20 bytes
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        s = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            raw = bytes.fromhex(s)
        except ValueError as exc:
            raise ValueError(f"invalid address hex: {value!r}") from exc
    else:
        raise TypeError("address must be str or bytes")
    if len(raw) != ADDRESS_LENGTH:
        raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(raw)}")
    return raw


def format_address(address: Address) -> str:
    return to_checksum_address("0x" + address.hex())


@dataclass(frozen=True)
class Metadata:
    """Per-input descriptor supplied by the rollup server (advance inputs only)."""

    input_index: int
    msg_sender: Address
    block_number: int
    block_timestamp: int
    # Chain-aware servers also send these.
    chain_id: Optional[int] = None
    app_contract: Optional[Address] = None
    prev_randao: Optional[str] = None


@dataclass(frozen=True)
class EtherDeposit:
    """Native coin that arrived through the Ether portal."""

    sender: Address
    value: Amount

    def __str__(self) -> str:
        ether = from_wei(self.value, "ether")
        return f"{format_address(self.sender)} deposited {ether:.18f} Ether"


@dataclass(frozen=True)
class ERC20Deposit:
    """Fungible tokens that arrived through the ERC-20 portal."""

    token: Address
    sender: Address
    amount: Amount

    def __str__(self) -> str:
        return (
            f"{format_address(self.sender)} deposited {self.amount} "
            f"of {format_address(self.token)} token"
        )


Deposit = Union[EtherDeposit, ERC20Deposit]


@dataclass(frozen=True)
class AdvanceInput:
    metadata: Metadata
    payload: bytes


@dataclass(frozen=True)
class InspectInput:
    payload: bytes


Input = Union[AdvanceInput, InspectInput]


@dataclass(frozen=True)
class Voucher:
    destination: Address
    payload: bytes
    value: Optional[Amount] = None


@dataclass(frozen=True)
class Notice:
    payload: bytes


@dataclass(frozen=True)
class Report:
    payload: bytes
