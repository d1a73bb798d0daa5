"""Interval scheduler for generation tasks.

Runs every registered task concurrently once per tick and keeps success and
failure counts per task. A failing task never stops the loop.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime

from termsite.interfaces.task import BaseTask, SchedulerError
from termsite.models.records import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskMetrics:
    """Snapshot of a task's execution history."""

    name: str
    last_run: datetime | None
    success_count: int
    failure_count: int


class ScheduledTask:
    """A task plus its run counters."""

    def __init__(self, task: BaseTask) -> None:
        self.task = task
        self.last_run: datetime | None = None
        self.success_count = 0
        self.failure_count = 0

    async def execute(self) -> bool:
        """Run the task once and record the outcome.

        Returns:
            True if the task completed, False if it raised.
        """
        self.last_run = utc_now()
        started = time.perf_counter()
        logger.info(f"Executing task: {self.task.name}")

        try:
            await self.task.execute()
        except Exception as e:
            self.failure_count += 1
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.error(f"Task '{self.task.name}' failed after {elapsed_ms} ms: {e}", exc_info=True)
            return False

        self.success_count += 1
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"Task '{self.task.name}' completed successfully in {elapsed_ms} ms")
        return True

    def metrics(self) -> TaskMetrics:
        return TaskMetrics(
            name=self.task.name,
            last_run=self.last_run,
            success_count=self.success_count,
            failure_count=self.failure_count,
        )


class Scheduler:
    """Runs tasks on a fixed interval inside the current event loop.

    Example:
        ```python
        scheduler = Scheduler(interval_seconds=30)
        scheduler.add_task(HomeGeneratorTask(...))
        await scheduler.run()
        ...
        await scheduler.stop()
        ```
    """

    def __init__(self, interval_seconds: float) -> None:
        """Initialize the scheduler.

        Args:
            interval_seconds: Delay between the end of one tick and the next.
        """
        self.interval_seconds = interval_seconds
        self._tasks: list[ScheduledTask] = []
        self._loop_task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None

    def add_task(self, task: BaseTask) -> None:
        self._tasks.append(ScheduledTask(task))
        logger.info(f"Registered task: {task.name}")

    def task_metrics(self) -> list[TaskMetrics]:
        return [scheduled.metrics() for scheduled in self._tasks]

    async def run_once(self) -> int:
        """Run every task once, concurrently.

        Returns:
            The number of tasks that succeeded.
        """
        if not self._tasks:
            logger.warning("No tasks to execute")
            return 0

        logger.info(f"Executing {len(self._tasks)} tasks")
        results = await asyncio.gather(*(scheduled.execute() for scheduled in self._tasks))
        succeeded = sum(results)
        logger.info(f"Completed task execution: {succeeded}/{len(self._tasks)} successful")
        return succeeded

    async def run(self) -> None:
        """Start the background loop. The first tick runs immediately.

        Raises:
            SchedulerError: If the scheduler is already running.
        """
        if self.is_running:
            raise SchedulerError("Scheduler is already running")

        logger.info(f"Starting scheduler with interval of {self.interval_seconds} seconds")
        self._stop_event = asyncio.Event()
        self._loop_task = asyncio.create_task(self._loop(self._stop_event))

    async def _loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue
        logger.info("Scheduler stopped")

    async def stop(self) -> None:
        """Stop the loop and wait for the current tick to finish.

        Raises:
            SchedulerError: If the scheduler is not running.
        """
        if self._loop_task is None or self._stop_event is None:
            raise SchedulerError("Scheduler is not running")

        logger.info("Stopping scheduler")
        self._stop_event.set()
        loop_task = self._loop_task
        self._loop_task = None
        self._stop_event = None
        await loop_task
