"""FIFO ownership lock serializing SmartAC refresh cycles.

Only one refresh may talk to mymodlet.com at a time. Callers that arrive
while a refresh is running queue up in arrival order and, once ownership is
handed to them, usually find the cache fresh and return without any I/O.
"""

from __future__ import annotations

import asyncio
import collections
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class OwnershipLock:
    """Cooperative mutual exclusion with strict FIFO hand-off.

    Unlike a plain flag, release() passes ownership directly to the head
    waiter, so a coroutine arriving between release and wake-up cannot barge
    ahead of the queue. A woken waiter still re-runs the acquire protocol and
    only proceeds once it confirms ownership was handed to it.

    There is no timeout: a holder that never releases blocks every later
    caller. Use ``async with lock:`` so release happens on every exit path.
    """

    def __init__(self) -> None:
        self._held = False
        self._waiters: collections.deque[asyncio.Future[None]] = collections.deque()
        self._handed_to: asyncio.Future[None] | None = None

    def locked(self) -> bool:
        """Return True if the lock is currently owned."""
        return self._held

    async def acquire(self) -> bool:
        """Wait until this caller owns the lock."""
        if not self._held:
            self._held = True
            return True

        loop = asyncio.get_running_loop()
        while True:
            waiter: asyncio.Future[None] = loop.create_future()
            self._waiters.append(waiter)
            try:
                await waiter
            except asyncio.CancelledError:
                self._abandon(waiter)
                raise

            if self._handed_to is waiter:
                self._handed_to = None
                return True

    def release(self) -> None:
        """Hand ownership to the next waiter, or mark the lock free."""
        if not self._held:
            error_msg = "Lock is not acquired"
            raise RuntimeError(error_msg)

        while self._waiters:
            waiter = self._waiters.popleft()
            if waiter.done():
                continue
            self._handed_to = waiter
            waiter.set_result(None)
            return

        self._held = False

    def _abandon(self, waiter: asyncio.Future[None]) -> None:
        """Drop a cancelled waiter, passing on ownership it may have received."""
        if self._handed_to is waiter:
            self._handed_to = None
            self.release()
            return

        with contextlib.suppress(ValueError):
            self._waiters.remove(waiter)

    async def __aenter__(self) -> None:
        await self.acquire()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
