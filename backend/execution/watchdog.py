"""
Wall-clock deadline enforcement for sandbox processes
"""

import asyncio
import logging
import os
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

TIMEOUT_MS = int(os.getenv('JUDGE_TIMEOUT_MS', '5000'))
KILL_GRACE_MS = int(os.getenv('JUDGE_KILL_GRACE_MS', '500'))


class Watchdog:
    """
    Kills a sandbox process that outlives its deadline.

    On expiry the process is asked to terminate; if it has not exited
    within the grace window it is killed outright and the optional
    ``on_force_kill`` hook runs (used to remove the container itself).
    Once ``killed`` is set it stays set.
    """

    def __init__(
        self,
        timeout_ms: int = TIMEOUT_MS,
        grace_ms: int = KILL_GRACE_MS,
        on_force_kill: Optional[Callable[[], Awaitable[None]]] = None
    ):
        self.timeout_ms = timeout_ms
        self.grace_ms = grace_ms
        self.on_force_kill = on_force_kill
        self.killed = False
        self.force_killed = False
        self._task: Optional[asyncio.Task] = None

    def start(self, process: asyncio.subprocess.Process) -> None:
        if self._task is not None:
            raise RuntimeError("Watchdog already started")
        self._task = asyncio.create_task(self._guard(process))

    def cancel(self) -> None:
        """Stop the timer; a no-op once the deadline has fired"""
        if self._task is not None and not self.killed and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for an in-flight termination sequence to finish"""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def _guard(self, process: asyncio.subprocess.Process) -> None:
        await asyncio.sleep(self.timeout_ms / 1000)
        if process.returncode is not None:
            return

        self.killed = True
        logger.warning(f"Process {process.pid} exceeded {self.timeout_ms}ms, terminating")
        try:
            process.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(process.wait(), timeout=self.grace_ms / 1000)
            return
        except asyncio.TimeoutError:
            pass

        self.force_killed = True
        logger.warning(f"Process {process.pid} ignored termination, killing")
        try:
            process.kill()
        except ProcessLookupError:
            pass
        if self.on_force_kill is not None:
            await self.on_force_kill()
