"""Rejects every input by raising."""

from __future__ import annotations

from ..core.dispatch import Application
from ..core.errors import RollwalletError


class InputNotAccepted(RollwalletError):
    pass


class ErrorApplication(Application):
    def advance(self, env, metadata, deposit, payload) -> None:
        raise InputNotAccepted("input not accepted")

    def inspect(self, env, payload) -> None:
        raise InputNotAccepted("input not accepted")
