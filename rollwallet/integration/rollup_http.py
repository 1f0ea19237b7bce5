"""
Rollup HTTP server client.

Every route is a JSON POST relative to the configured base URL:
- finish  {status}                       -> 202 (retry) | 200 {request_type, data}
- voucher {destination, [value], payload} -> {index}
- notice  {payload}                      -> {index}
- report  {payload}                      -> 200

Any network failure, non-2xx status or malformed body raises `TransportError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from ..core.codec import bytes_to_hex, hex_to_bytes, uint256_to_hex
from ..core.errors import TransportError
from ..core.types import ADDRESS_LENGTH, Address, AdvanceInput, Amount, Input, InspectInput, Metadata
from .rollup import FinishStatus, RollupServer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollupHttpConfig:
    url: str
    connect_timeout_s: float = 5.0
    # None: `finish` may block until the server has an input.
    read_timeout_s: Optional[float] = None


class RollupHttp(RollupServer):
    def __init__(self, config: RollupHttpConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()

    # -- rollup interface ----------------------------------------------------

    def finish_and_get_next(self, status: FinishStatus) -> Optional[Input]:
        resp = self._post("finish", {"status": status.value})
        if resp.status_code == 202:
            return None
        body = _json_object(resp, route="finish")
        request_type = body.get("request_type")
        data = body.get("data")
        if not isinstance(data, Mapping):
            raise TransportError("rollup: finish response data must be an object")
        if request_type == "advance_state":
            return parse_advance_input(data)
        if request_type == "inspect_state":
            return parse_inspect_input(data)
        raise TransportError(f"rollup: invalid request type: {request_type}")

    def send_voucher(self, destination: Address, payload: bytes, value: Optional[Amount] = None) -> int:
        request: dict[str, Any] = {"destination": bytes_to_hex(destination)}
        if value is not None:
            request["value"] = uint256_to_hex(value)
        request["payload"] = bytes_to_hex(payload)
        resp = self._post("voucher", request)
        return _output_index(resp, route="voucher")

    def send_notice(self, payload: bytes) -> int:
        resp = self._post("notice", {"payload": bytes_to_hex(payload)})
        return _output_index(resp, route="notice")

    def send_report(self, payload: bytes) -> None:
        self._post("report", {"payload": bytes_to_hex(payload)})

    # -- helpers -------------------------------------------------------------

    def _post(self, route: str, request: Mapping[str, Any]) -> requests.Response:
        endpoint = f"{self.config.url.rstrip('/')}/{route}"
        try:
            resp = self.session.post(
                endpoint,
                json=dict(request),
                timeout=(self.config.connect_timeout_s, self.config.read_timeout_s),
            )
        except requests.RequestException as exc:
            raise TransportError(f"rollup: do request: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise TransportError(f"http: invalid status {resp.status_code}: {resp.text}")
        return resp


def _json_object(resp: requests.Response, *, route: str) -> Mapping[str, Any]:
    try:
        body = resp.json()
    except ValueError as exc:
        raise TransportError(f"rollup: decode {route} response: {exc}") from exc
    if not isinstance(body, Mapping):
        raise TransportError(f"rollup: {route} response must be an object")
    return body


def _output_index(resp: requests.Response, *, route: str) -> int:
    index = _json_object(resp, route=route).get("index")
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        raise TransportError(f"rollup: invalid {route} index: {index!r}")
    return index


def _require_int(obj: Mapping[str, Any], key: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key} must be an int")
    return value


def parse_advance_input(data: Mapping[str, Any]) -> AdvanceInput:
    try:
        payload = hex_to_bytes(data.get("payload"), name="payload")
        raw_metadata = data.get("metadata")
        if not isinstance(raw_metadata, Mapping):
            raise ValueError("metadata must be an object")
        app_contract = raw_metadata.get("app_contract")
        chain_id = raw_metadata.get("chain_id")
        prev_randao = raw_metadata.get("prev_randao")
        if chain_id is not None and (not isinstance(chain_id, int) or isinstance(chain_id, bool)):
            raise ValueError("chain_id must be an int")
        if prev_randao is not None and not isinstance(prev_randao, str):
            raise ValueError("prev_randao must be a string")
        metadata = Metadata(
            input_index=_require_int(raw_metadata, "input_index"),
            msg_sender=hex_to_bytes(raw_metadata.get("msg_sender"), name="msg_sender", expected_nbytes=ADDRESS_LENGTH),
            block_number=_require_int(raw_metadata, "block_number"),
            block_timestamp=_require_int(raw_metadata, "timestamp"),
            chain_id=chain_id,
            app_contract=(
                hex_to_bytes(app_contract, name="app_contract", expected_nbytes=ADDRESS_LENGTH)
                if app_contract is not None
                else None
            ),
            prev_randao=prev_randao,
        )
    except (TypeError, ValueError) as exc:
        raise TransportError(f"rollup: decode advance input: {exc}") from exc
    return AdvanceInput(metadata=metadata, payload=payload)


def parse_inspect_input(data: Mapping[str, Any]) -> InspectInput:
    try:
        payload = hex_to_bytes(data.get("payload"), name="payload")
    except (TypeError, ValueError) as exc:
        raise TransportError(f"rollup: decode inspect input: {exc}") from exc
    return InspectInput(payload=payload)
