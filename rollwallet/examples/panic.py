"""Crashes on every input. The dispatcher isolates the fault and rejects the input."""

from __future__ import annotations

from ..core.dispatch import Application


class PanicApplication(Application):
    def advance(self, env, metadata, deposit, payload) -> None:
        raise RuntimeError("input not accepted")

    def inspect(self, env, payload) -> None:
        raise ValueError("input not accepted")
