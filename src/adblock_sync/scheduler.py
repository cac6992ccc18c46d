"""Debounced, single-flight scheduler for blocklist refresh cycles.

The scheduler is a small state machine driven from one asyncio loop:

- ``Idle``: at most one wake-up is armed, either *immediate* (a state change
  is waiting to be applied) or *periodic* (the next daily refresh).
- ``Running``: one refresh or clean-up cycle is in flight. It is never
  cancelled; toggles arriving meanwhile only update ``desired``.

When a cycle ends, the ``desired`` value it started with is compared with the
current one. If they differ a toggle arrived mid-run, and an immediate
wake-up is armed so the toggle is not lost; otherwise the periodic wake-up is
armed.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Protocol

from .interfaces import RestartNotifier
from .models import ReconcileReport
from .models import UnitOutcome
from .settings import RELOAD_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

# finished cycles kept for inspection
HISTORY_LIMIT = 32


class Refresher(Protocol):
    async def refresh(self) -> ReconcileReport: ...

    async def clean_up(self) -> ReconcileReport: ...


class Wakeup(Enum):
    """Kind of pending wake-up."""

    IMMEDIATE = "immediate"
    PERIODIC = "periodic"


@dataclass(frozen=True)
class RunToken:
    """State captured when a cycle starts.

    Attributes:
        pre_state: ``current`` before the cycle (None until the first cycle ran)
        desired_at_start: ``desired`` when the cycle started
    """

    pre_state: bool | None
    desired_at_start: bool


@dataclass
class RunRecord:
    """A finished cycle and what it did."""

    token: RunToken
    report: ReconcileReport = field(default_factory=ReconcileReport)


class RefreshScheduler:
    """Runs blocklist refresh cycles, one at a time, debounced.

    Args:
        refresher: Performs the refresh and clean-up work
        notifier: Receives one restart request per cycle that touched disk
        interval: Seconds between periodic refreshes
        history_limit: Number of finished cycles kept in ``history``
    """

    def __init__(
        self,
        refresher: Refresher,
        notifier: RestartNotifier,
        interval: float = RELOAD_INTERVAL_SECONDS,
        history_limit: int = HISTORY_LIMIT,
    ):
        """Initialize scheduler in the idle state with ``current`` unset."""
        self.refresher = refresher
        self.notifier = notifier
        self.interval = interval

        # None means "never applied", so the first cycle always does its work
        self.current: bool | None = None
        self.desired = False

        self.history: deque[RunRecord] = deque(maxlen=history_limit)
        self._run_count = 0
        self._token: RunToken | None = None
        self._task: asyncio.Task | None = None
        self._wakeup: asyncio.Handle | None = None
        self._wakeup_kind: Wakeup | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        """Whether a cycle is in flight."""
        return self._token is not None

    @property
    def pending(self) -> Wakeup | None:
        """Kind of the armed wake-up, if any."""
        return self._wakeup_kind

    @property
    def run_count(self) -> int:
        """Number of cycles finished since start."""
        return self._run_count

    def set_desired(self, desired: bool) -> None:
        """Request that blocklists be present (True) or absent (False).

        Must be called from the event loop thread. While a cycle is running
        only ``desired`` changes; the running cycle picks it up on completion.

        Args:
            desired: New desired state
        """
        if self._closed:
            logger.warning("Refresh scheduler is closed, ignoring desired state change")
            return

        self._loop = asyncio.get_running_loop()
        self.desired = desired
        logger.info(f"Blocklist next state is: {desired}")

        self._cancel_wakeup()
        if self.running:
            return
        self._arm(Wakeup.IMMEDIATE)

    async def join(self) -> None:
        """Wait until no cycle is running and no immediate wake-up is armed."""
        while True:
            task = self._task
            if task is not None:
                await task
                continue
            if self._wakeup_kind is Wakeup.IMMEDIATE:
                await asyncio.sleep(0)
                continue
            return

    def close(self) -> None:
        """Drop any pending wake-up and refuse further scheduling.

        A cycle already running finishes but does not reschedule.
        """
        self._closed = True
        self._cancel_wakeup()

    # ===== State Machine =====

    def _arm(self, kind: Wakeup) -> None:
        self._cancel_wakeup()
        if kind is Wakeup.IMMEDIATE:
            self._wakeup = self._loop.call_soon(self._fire)
        else:
            self._wakeup = self._loop.call_later(self.interval, self._fire)
        self._wakeup_kind = kind

    def _cancel_wakeup(self) -> None:
        if self._wakeup is not None:
            self._wakeup.cancel()
        self._wakeup = None
        self._wakeup_kind = None

    def _fire(self) -> None:
        self._wakeup = None
        self._wakeup_kind = None
        if self.running:
            logger.debug("Refresh cycle already running, wake-up ignored")
            return

        token = RunToken(pre_state=self.current, desired_at_start=self.desired)
        self._token = token
        self.current = token.desired_at_start
        logger.info(
            f"In reload cycle: pre state: {token.pre_state}, next state: {token.desired_at_start}, "
            f"cycle: {self.run_count}"
        )
        self._task = self._loop.create_task(self._run(token))

    async def _run(self, token: RunToken) -> None:
        report = ReconcileReport()
        try:
            if token.desired_at_start:
                logger.info("Start to update blocklist filters")
                report = await self.refresher.refresh()
                self.notifier.request_restart()
                logger.info(f"Update blocklist filters finished with {len(report.failures)} failures")
            elif token.pre_state is False:
                logger.debug("Blocklists already disabled, nothing to clean up")
            else:
                logger.info("Start to clean up blocklist filters")
                report = await self.refresher.clean_up()
                self.notifier.request_restart()
        except Exception as e:
            logger.exception(f"Blocklist refresh cycle failed: {e}")
            report.add(UnitOutcome("cycle", "refresh", ok=False, error=str(e)))
        finally:
            self.history.append(RunRecord(token, report))
            self._run_count += 1
            self._token = None
            self._task = None
            if not self._closed:
                self._reschedule(token)

    def _reschedule(self, token: RunToken) -> None:
        if self.desired == token.desired_at_start:
            logger.info(f"Schedule next blocklist reload in {self.interval}s")
            self._arm(Wakeup.PERIODIC)
        else:
            logger.warning(
                f"Blocklist next state changed from {token.desired_at_start} to {self.desired} "
                "during reload, will reload again immediately"
            )
            self._arm(Wakeup.IMMEDIATE)
