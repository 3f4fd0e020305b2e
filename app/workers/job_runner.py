"""Polling of asynchronous assistant runs until they reach a terminal status."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from app.core.errors import JobTimeoutError
from app.core.settings import Settings
from app.core.utils import get_logger

logger = get_logger("finance-assistant.poller")

PENDING_STATUSES = frozenset({"queued", "in_progress"})


class JobPoller:
    """Waits for an OpenAI Assistants run to leave the queued/in_progress states.

    The wait is bounded both by attempt count and elapsed time; hitting either bound raises ``JobTimeoutError``.
    """

    def __init__(
        self,
        llm_client: Any,
        interval: float = 0.5,
        max_attempts: int = 240,
        timeout: float = 120.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the poller with an async OpenAI client and its bounds."""
        self.llm_client = llm_client
        self.interval = interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_settings(cls, llm_client: Any, settings: Settings) -> "JobPoller":
        """Build a poller using the configured interval and bounds."""
        return cls(
            llm_client,
            interval=settings.poll_interval,
            max_attempts=settings.poll_max_attempts,
            timeout=settings.poll_timeout,
        )

    async def wait(self, thread_id: str, run_id: str) -> Any:
        """Fetch the run until its status is terminal and return the last fetched run."""
        started = time.monotonic()
        attempts = 0
        while True:
            run = await self.llm_client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
            attempts += 1
            if run.status not in PENDING_STATUSES:
                logger.info(f"Run {run_id} finished with status '{run.status}' after {attempts} poll(s)")
                return run
            elapsed = time.monotonic() - started
            if attempts >= self.max_attempts or elapsed + self.interval > self.timeout:
                logger.error(f"Giving up on run {run_id} (thread {thread_id}) after {attempts} polls")
                raise JobTimeoutError(thread_id, run_id, attempts, elapsed)
            logger.info(f"⏳ Waiting for thread completion: {thread_id} (status={run.status}, attempt={attempts})")
            await self._sleep(self.interval)
