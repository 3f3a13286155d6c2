"""Scheduling: spawning waiters for new entries and cancelling running ones."""

from timers.scheduling.canceller import cancel, terminate
from timers.scheduling.scheduler import describe, schedule_entry

__all__ = [
    "cancel",
    "describe",
    "schedule_entry",
    "terminate",
]
