"""Scheduled generation tasks."""

from termsite.tasks.home_generator import HomeGeneratorTask

__all__ = [
    "HomeGeneratorTask",
]
