"""Interactive cancel menu: pick a live timer/alarm, kill its waiter, drop its record."""

import contextlib
import logging
import os
import signal
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from timers import entries
from timers.scheduling.scheduler import WAITER_MODULE

log = logging.getLogger(__name__)

Outcome = Literal["nothing", "invalid", "cancelled"]


def _is_waiter(pid: int) -> bool:
    """False when /proc shows the pid now belongs to something else."""
    if not Path("/proc").is_dir():
        return True
    try:
        cmdline = Path(f"/proc/{pid}/cmdline").read_bytes()
    except OSError:
        return False
    return WAITER_MODULE in cmdline.decode(errors="replace")


def terminate(pid: int) -> None:
    """Best-effort SIGTERM; a waiter that already exited is not an error."""
    if not _is_waiter(pid):
        log.debug("pid %d is not a running waiter, not signalling", pid)
        return
    with contextlib.suppress(ProcessLookupError, PermissionError):
        os.kill(pid, signal.SIGTERM)


def cancel(
    read_choice: Callable[[str], str] | None = None,
    *,
    now: int | None = None,
    retention: int = 600,
) -> Outcome:
    live = [(line, entry) for line, entry in entries.load_entries(now, retention) if entry.live]
    if not live:
        print("Nothing to cancel.")
        return "nothing"

    print("Select a timer to cancel:")
    for i, (_line, entry) in enumerate(live, start=1):
        print(f"{i}) {entry.message}")

    try:
        choice = (read_choice or input)("> ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        choice = ""
    if not (choice.isascii() and choice.isdigit()) or not 1 <= int(choice) <= len(live):
        print("Invalid selection.")
        return "invalid"

    line, entry = live[int(choice) - 1]
    if entry.pid is not None:
        terminate(entry.pid)
    # Exact text: a no-op if the waiter fired in the meantime.
    entries.remove_record(line)
    print(f"Cancelled: {entry.message}")
    return "cancelled"
