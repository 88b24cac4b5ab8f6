"""OTP ledger adapters - Volatile code storage."""

from .memory import InMemoryOTPLedger

__all__ = ["InMemoryOTPLedger"]
