"""
Dispatcher: runs one input through the portals and the application.

``handle(input)`` is the single entry point. It:

1. Classifies advance inputs by sender (relay message, portal deposit, plain).
2. Calls the application with the matching environment view.
3. Converts any exception into a rejected ``DispatchResult``.

``TransportError`` is the exception to rule 3: it propagates so the protocol
loop terminates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .codec import bytes_to_hex
from .env import AdvanceEnv, Environment, InspectEnv
from .errors import ApplicationFaultError, RollwalletError, TransportError
from .portals import PlainInput, PortalDeposit, RelayMessage
from .types import AdvanceInput, Deposit, Input, InspectInput, Metadata, format_address

logger = logging.getLogger(__name__)


class Application:
    """
    Interface implemented by the rollup application.

    Raising any exception from either method rejects the input.
    """

    def advance(self, env: AdvanceEnv, metadata: Metadata, deposit: Optional[Deposit], payload: bytes) -> None:
        """Advance the application state."""
        raise NotImplementedError

    def inspect(self, env: InspectEnv, payload: bytes) -> None:
        """Answer a read-only query, usually through `env.report()`."""
        raise NotImplementedError


@dataclass(frozen=True)
class DispatchResult:
    accepted: bool
    error: Optional[RollwalletError] = None

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


class Dispatcher:
    def __init__(self, env: Environment, app: Application) -> None:
        self.env = env
        self.app = app
        self._advance_env = AdvanceEnv(env)
        self._inspect_env = InspectEnv(env)

    def handle(self, input: Input) -> DispatchResult:
        if not isinstance(input, (AdvanceInput, InspectInput)):
            raise TypeError(f"invalid input type: {type(input).__name__}")
        try:
            if isinstance(input, AdvanceInput):
                self._handle_advance(input)
            else:
                self._handle_inspect(input)
        except TransportError:
            raise
        except RollwalletError as exc:
            logger.error("input rejected: %s", exc)
            return DispatchResult(accepted=False, error=exc)
        except Exception as exc:
            fault = ApplicationFaultError(f"application fault: {exc}")
            fault.__cause__ = exc
            logger.error("input rejected: %s", fault, exc_info=exc)
            return DispatchResult(accepted=False, error=fault)
        return DispatchResult(accepted=True)

    def _handle_advance(self, input: AdvanceInput) -> None:
        metadata = input.metadata
        logger.debug(
            "received advance input_index=%s msg_sender=%s block_number=%s block_timestamp=%s payload=%s",
            metadata.input_index,
            format_address(metadata.msg_sender),
            metadata.block_number,
            metadata.block_timestamp,
            bytes_to_hex(input.payload),
        )
        if self.env.config.app_address_from_metadata and metadata.app_contract is not None:
            self.env.set_app_address(metadata.app_contract)

        classified = self.env.portals.classify(metadata.msg_sender, input.payload)
        deposit: Optional[Deposit] = None
        if isinstance(classified, RelayMessage):
            # Relay messages are consumed by the engine.
            self.env.set_app_address(classified.address)
            return
        if isinstance(classified, PortalDeposit):
            deposit = classified.deposit
            payload = classified.payload
        elif isinstance(classified, PlainInput):
            payload = classified.payload
        else:
            raise TypeError(f"unexpected classification: {type(classified).__name__}")
        self.app.advance(self._advance_env, metadata, deposit, payload)

    def _handle_inspect(self, input: InspectInput) -> None:
        logger.debug("received inspect payload=%s", bytes_to_hex(input.payload))
        self.app.inspect(self._inspect_env, input.payload)
