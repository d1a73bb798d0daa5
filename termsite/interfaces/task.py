"""Abstract base class for scheduled generation tasks."""

from abc import ABC, abstractmethod


class BaseTask(ABC):
    """A unit of work run by the scheduler on every tick.

    Example:
        ```python
        class HomeGeneratorTask(BaseTask):
            @property
            def name(self) -> str:
                return "HomeGenerator"

            async def execute(self) -> None:
                ...
        ```
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a human-readable task name used in logs and metrics."""
        ...

    @abstractmethod
    async def execute(self) -> None:
        """Run the task once.

        Raises:
            Exception: Any failure; the scheduler counts it and keeps running.
        """
        ...


class SchedulerError(Exception):
    """Raised when the scheduler is started twice or stopped while idle."""

    pass
