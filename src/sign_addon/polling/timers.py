from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any


class LoopTimers:
    """Schedules callbacks on the running event loop.

    The poller only talks to this small interface so that tests can record
    or drive timers themselves.
    """

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(max(delay, 0), callback)

    def cancel(self, handle: Any) -> None:
        handle.cancel()
