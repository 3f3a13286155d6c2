"""Create timers and alarms: append a live record and detach a waiter process.

The waiter (``python -m timers.scheduling.waiter``) runs in its own session so
it outlives the invoking shell; its pid is the handle stored in the record.
"""

import logging
import os
import subprocess
import sys
import time
from dataclasses import replace
from datetime import datetime

from timers import config, entries
from timers.config import TZ, Settings, load_settings
from timers.entries import Entry, clean_message
from timers.errors import InvalidDuration, MissingFields, TimeInPast
from timers.notify import notify
from timers.timeparse import representable

log = logging.getLogger(__name__)

WAITER_MODULE = "timers.scheduling.waiter"


def waiter_argv(entry: Entry) -> list[str]:
    return [
        sys.executable,
        "-m",
        WAITER_MODULE,
        entry.kind,
        str(entry.stamp),
        str(entry.window),
        str(int(entry.sound)),
        "--",
        entry.message,
    ]


def _spawn_waiter(entry: Entry) -> int:
    """Start a detached waiter for ``entry``; returns its pid."""
    env = {
        **os.environ,
        "TIMERS_LOG": str(entries.LOG_FILE),
        "TIMERS_CONFIG": str(config.CONFIG_FILE),
    }
    proc = subprocess.Popen(
        waiter_argv(entry),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
        close_fds=True,
        cwd="/",
        env=env,
    )
    return proc.pid


def schedule_entry(
    kind: entries.Kind,
    deadline: int,
    message: str,
    *,
    window: int = 0,
    sound: bool = False,
    settings: Settings | None = None,
    now: int | None = None,
) -> Entry:
    """Validate, spawn the waiter, then append its record. Nothing is written on rejection."""
    now = int(time.time()) if now is None else now
    message = clean_message(message)
    if not message.strip():
        raise MissingFields("a message is required")
    if deadline - now <= 0:
        if kind == "ALARM" and representable(deadline):
            raise TimeInPast(f"{_local(deadline)} is in the past")
        raise TimeInPast("duration must be greater than zero")
    # The waiter's DateTrigger needs a real datetime.
    if not representable(deadline):
        raise InvalidDuration("deadline is too far in the future")

    settings = settings or load_settings()
    pending = Entry(kind=kind, stamp=deadline, message=message, window=window, sound=sound)
    entry = replace(pending, pid=_spawn_waiter(pending))
    entries.append_entry(entry)
    log.info("scheduled %s %r for %s (pid %d)", kind.lower(), message, _local(deadline), entry.pid)

    if settings.notify_on_create:
        notify(f"{kind.title()} set", f"{message} at {_local(deadline)}", urgency="low")
    return entry


def _local(stamp: int) -> str:
    return datetime.fromtimestamp(stamp, TZ).strftime("%Y-%m-%d %H:%M:%S")


def describe(entry: Entry) -> str:
    """One-line confirmation printed after scheduling."""
    return f"{entry.kind.lower()} set: {entry.message} -- {_local(entry.stamp)}"
