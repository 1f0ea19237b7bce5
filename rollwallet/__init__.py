"""`rollwallet`: a high-level framework for rollup applications.

The engine pulls inputs from the rollup HTTP server, decodes portal deposits
into a per-account ledger, and calls the application with the decoded deposit
and the remaining payload.

Public API:
- `Application` (subclass it; implement `advance` and `inspect`)
- `run(app, opts=None)` (process entry point)
- `Tester(app)` (unit tests for applications)
"""

from .core.dispatch import Application, DispatchResult, Dispatcher
from .core.env import AdvanceEnv, EngineConfig, Environment, InspectEnv
from .core.errors import (
    ApplicationFaultError,
    BalanceOverflowError,
    FailedTransferError,
    InsufficientFundsError,
    LedgerError,
    MalformedPayloadError,
    RollwalletError,
    SelfTransferError,
    TransportError,
    UnknownAppAddressError,
)
from .core.types import (
    MAX_UINT256,
    AdvanceInput,
    ERC20Deposit,
    EtherDeposit,
    InspectInput,
    Metadata,
    Notice,
    Report,
    Voucher,
    to_address,
)
from .integration.address_book import AddressBook
from .integration.runner import ProtocolLoop, RunOpts, run
from .integration.tester import AdvanceResult, InspectResult, Tester

__all__ = [
    "Application",
    "DispatchResult",
    "Dispatcher",
    "AdvanceEnv",
    "EngineConfig",
    "Environment",
    "InspectEnv",
    "ApplicationFaultError",
    "BalanceOverflowError",
    "FailedTransferError",
    "InsufficientFundsError",
    "LedgerError",
    "MalformedPayloadError",
    "RollwalletError",
    "SelfTransferError",
    "TransportError",
    "UnknownAppAddressError",
    "MAX_UINT256",
    "AdvanceInput",
    "ERC20Deposit",
    "EtherDeposit",
    "InspectInput",
    "Metadata",
    "Notice",
    "Report",
    "Voucher",
    "to_address",
    "AddressBook",
    "ProtocolLoop",
    "RunOpts",
    "run",
    "AdvanceResult",
    "InspectResult",
    "Tester",
]
