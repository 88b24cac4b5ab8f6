"""
Resend countdown - Cooperative asyncio timer gating the "Resend OTP" action.

Phases:
- IDLE: no code requested, or the countdown was cancelled
- PENDING: counting down; resend is hidden and seconds_left is shown
- SENT: countdown finished; resend is available again

One ticking task exists at most. Starting again, resetting, or cancelling
always cancels the previous task so no orphaned timer keeps running.
"""

import asyncio
from collections.abc import Callable
from enum import Enum


class CountdownPhase(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"
    SENT = "SENT"


class ResendCountdown:
    """Counts down once per tick from `seconds` to zero."""

    def __init__(
        self,
        seconds: int = 30,
        tick: float = 1.0,
        on_change: Callable[["ResendCountdown"], None] | None = None,
    ) -> None:
        self.seconds = seconds
        self.tick = tick
        self.on_change = on_change
        self.phase = CountdownPhase.IDLE
        self.seconds_left = 0
        self._task: asyncio.Task | None = None

    @property
    def can_resend(self) -> bool:
        return self.phase is CountdownPhase.SENT

    def start(self) -> None:
        """Enter PENDING and launch the ticking task. Needs a running loop."""
        self.cancel()
        self.phase = CountdownPhase.PENDING
        self.seconds_left = self.seconds
        self._notify()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        """Stop ticking and return to IDLE."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.phase = CountdownPhase.IDLE
        self.seconds_left = 0

    async def wait(self) -> None:
        """Wait for the current countdown to reach zero (no-op when idle)."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while self.seconds_left > 0:
            await asyncio.sleep(self.tick)
            self.seconds_left -= 1
            self._notify()
        self.phase = CountdownPhase.SENT
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
