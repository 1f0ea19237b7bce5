"""
Addresses of the rollups contracts on mainnet and devnet.

The defaults can be overridden per field, from a mapping or from a YAML file:

    ether_portal: "0xfa2292f6D85ea4e629B156A4f99219e30D12EE17"
    erc20_portal: "0xB0e28881FF7ee9CD5B1229d570540d74bce23D39"
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..core.types import Address, format_address, to_address


@dataclass(frozen=True)
class AddressBook:
    application_factory: Address = to_address("0xA1DA32BF664109D62208a1cb0d69aACc6a484873")
    authority_factory: Address = to_address("0xbDC5D42771A4Ae55eC7670AAdD2458D1d9C7C8A8")
    erc1155_batch_portal: Address = to_address("0x4a218D331C0933d7E3EB496ac901669f28D94981")
    erc1155_single_portal: Address = to_address("0x2f0D587DD6EcF67d25C558f2e9c3839c579e5e38")
    erc20_portal: Address = to_address("0xB0e28881FF7ee9CD5B1229d570540d74bce23D39")
    erc721_portal: Address = to_address("0x874b3245ead7474Cb9f3b83cD1446dC522f6bd36")
    ether_portal: Address = to_address("0xfa2292f6D85ea4e629B156A4f99219e30D12EE17")
    input_box: Address = to_address("0x593E5BCf894D6829Dd26D0810DA7F064406aebB6")
    quorum_factory: Address = to_address("0x68C3d53a095f66A215a8bEe096Cd3Ba4fFB7bAb3")
    safe_erc20_transfer: Address = to_address("0x817b126F242B5F184Fa685b4f2F91DC99D8115F9")
    self_hosted_application_factory: Address = to_address("0x0678FAA399F0193Fb9212BE41590316D275b1392")
    # None disables relay handling (servers that send app_contract in the metadata).
    app_address_relay: Optional[Address] = to_address("0xF5DE34d6BbC0446E2a45719E718efBbB2aeD5fe5")

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any], *, base: Optional["AddressBook"] = None) -> "AddressBook":
        """
        Return `base` (defaults if omitted) with the named fields replaced.

        Raises:
            ValueError: On unknown field names or malformed addresses
        """
        if not isinstance(overrides, Mapping):
            raise ValueError("address book overrides must be a mapping")
        known = {f.name for f in fields(cls)}
        changes: dict[str, Optional[Address]] = {}
        for name, value in overrides.items():
            if name not in known:
                raise ValueError(f"unknown address book entry: {name}")
            if value is None and name == "app_address_relay":
                changes[name] = None
                continue
            try:
                changes[name] = to_address(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"invalid address for {name}: {exc}") from exc
        return replace(base if base is not None else cls(), **changes)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "AddressBook":
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is None:
            return cls()
        return cls.from_mapping(obj)

    def to_dict(self) -> dict[str, Optional[str]]:
        out: dict[str, Optional[str]] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = format_address(value) if value is not None else None
        return out
