"""Coalescing resolver restart notifier."""

import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_RESTART_DELAY = 1.0


class CoalescingRestarter:
    """Collapses bursts of restart requests into a single restart.

    ``request_restart`` only arms a delayed restart; further requests
    before it fires are absorbed. A request arriving while a restart is
    running arms one more restart after it.

    Args:
        restart: Coroutine function performing the actual restart
        delay: Seconds to wait for more requests before restarting
    """

    def __init__(self, restart: Callable[[], Awaitable[None]], delay: float = DEFAULT_RESTART_DELAY):
        """Initialize restarter around the ``restart`` coroutine function."""
        self.restart = restart
        self.delay = delay
        self.restart_count = 0
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._again = False

    @property
    def pending(self) -> bool:
        """Whether a restart is armed but not yet started."""
        return self._handle is not None

    def request_restart(self) -> None:
        """Ask for a resolver restart. Safe to call any number of times."""
        if self._task is not None:
            self._again = True
            return
        if self._handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._start)

    async def join(self) -> None:
        """Wait for any pending or running restart to finish."""
        while self._handle is not None or self._task is not None:
            if self._task is not None:
                await self._task
            else:
                await asyncio.sleep(self.delay)

    def cancel(self) -> None:
        """Drop an armed restart that has not started yet."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _start(self) -> None:
        self._handle = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            logger.info("Restarting resolver")
            await self.restart()
            self.restart_count += 1
        except Exception as e:
            logger.error(f"Failed to restart resolver: {e}")
        finally:
            self._task = None
            if self._again:
                self._again = False
                self.request_restart()
