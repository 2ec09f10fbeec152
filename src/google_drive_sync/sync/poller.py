"""
Self-rescheduling change poller.

A single asyncio task alternates between sleeping and running one check, so
two checks can never overlap. The sleep coroutine is injectable, which lets
tests drive the poller with a fake clock.
"""

import asyncio
import enum
import logging
from typing import Awaitable, Callable, Optional

from ..services.drive.constants import DEFAULT_POLL_INTERVAL, DEFAULT_ERROR_POLL_INTERVAL
from ..utils.log_sanitizer import sanitize_error

logger = logging.getLogger(__name__)


class PollerState(enum.Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"


class ChangePoller:
    """
    Runs `check` repeatedly with a fixed two-tier back-off.

    After a successful check the next one is scheduled `interval` seconds
    later, after a failure `error_interval` seconds later. Polling stops on
    its own once `is_active` returns False, and otherwise runs until `stop`.
    """

    def __init__(
            self,
            check: Callable[[], Awaitable[None]],
            is_active: Callable[[], bool] = lambda: True,
            interval: float = DEFAULT_POLL_INTERVAL,
            error_interval: float = DEFAULT_ERROR_POLL_INTERVAL,
            sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._check = check
        self._is_active = is_active
        self.interval = interval
        self.error_interval = error_interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._state = PollerState.IDLE

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, delay: float = 0) -> bool:
        """
        Schedule the first check after `delay` seconds.

        Args:
            delay: Seconds before the first check

        Returns:
            True if a polling task was started, False if one is already
            running or polling is not active
        """
        if self.is_running:
            return False
        if not self._is_active():
            logger.info("Access token is empty. Stop polling changes...")
            return False
        self._task = asyncio.get_running_loop().create_task(self._run(delay))
        return True

    async def stop(self) -> None:
        """Cancel the pending check and wait for the polling task to finish."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            if task is asyncio.current_task():
                return
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._state = PollerState.IDLE

    async def _run(self, delay: float) -> None:
        try:
            while True:
                self._state = PollerState.SCHEDULED
                await self._sleep(delay)

                self._state = PollerState.RUNNING
                try:
                    await self._check()
                    delay = self.interval
                except Exception as e:
                    logger.error("Google Drive sync error %s", sanitize_error(e))
                    delay = self.error_interval

                if not self._is_active():
                    logger.info("Access token is empty. Stop polling changes...")
                    break
        finally:
            self._state = PollerState.IDLE
