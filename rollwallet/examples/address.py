"""
Reports the application address (once relayed) on every inspect.

The relay input itself is consumed by the engine; any other advance is rejected.
"""

from __future__ import annotations

from ..core.dispatch import Application
from ..core.errors import RollwalletError


class AddressApplication(Application):
    def advance(self, env, metadata, deposit, payload) -> None:
        raise RollwalletError("reject")

    def inspect(self, env, payload) -> None:
        address = env.app_address()
        if address is not None:
            env.report(address)
