"""Timer/alarm entry model and the one-line record format of the timer log.

Record formats (space separated, message is always the greedy last column)::

    <deadline> TIMER <pid> <window> <sound> <message>
    <deadline> ALARM <pid> <window> <sound> <message>
    <completed_at> ✔ <message>

Lines that match neither format are left alone by every writer.
"""

import logging
import time
from dataclasses import dataclass
from typing import Literal

from timers import storage
from timers.config import LOG_FILE as LOG_FILE

Kind = Literal["TIMER", "ALARM", "DONE"]

CHECKMARK = "✔"
LIVE_KINDS = ("TIMER", "ALARM")

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    kind: Kind
    stamp: int  # deadline for TIMER/ALARM, firing time for DONE
    message: str
    pid: int | None = None  # waiter process; None for DONE
    window: int = 0  # seconds before deadline it becomes visible; 0 = always
    sound: bool = False

    @property
    def live(self) -> bool:
        return self.kind != "DONE"

    @staticmethod
    def completed(message: str, at: int) -> "Entry":
        return Entry(kind="DONE", stamp=at, message=message)

    def to_record(self) -> str:
        if self.kind == "DONE":
            return f"{self.stamp} {CHECKMARK} {self.message}"
        return f"{self.stamp} {self.kind} {self.pid} {self.window} {int(self.sound)} {self.message}"


def clean_message(message: str) -> str:
    """Fold line breaks so a message can never span two records.

    Undecodable argv bytes (surrogate escapes) become ``?`` so the record is valid UTF-8.
    """
    folded = " ".join(message.splitlines())
    return folded.encode("utf-8", errors="replace").decode("utf-8")


def _is_uint(field: str) -> bool:
    return field.isascii() and field.isdigit()


def parse_record(line: str) -> Entry | None:
    """Decode one log line; None for anything unrecognized."""
    head = line.split(" ", 2)
    if len(head) < 3 or not _is_uint(head[0]):
        return None
    stamp, kind = int(head[0]), head[1]

    if kind == CHECKMARK:
        return Entry.completed(head[2], stamp)

    if kind in LIVE_KINDS:
        fields = line.split(" ", 5)
        if len(fields) < 6:
            return None
        _, _, pid, window, sound, message = fields
        if not (_is_uint(pid) and _is_uint(window) and sound in ("0", "1")):
            return None
        return Entry(
            kind=kind,  # type: ignore[arg-type]
            stamp=stamp,
            message=message,
            pid=int(pid),
            window=int(window),
            sound=sound == "1",
        )
    return None


def parse_records(lines: list[str]) -> list[tuple[str, Entry]]:
    """(raw line, entry) pairs in file order; unrecognized lines are skipped."""
    result: list[tuple[str, Entry]] = []
    for line in lines:
        entry = parse_record(line)
        if entry is None:
            log.debug("skipping unrecognized record: %.80s", line)
            continue
        result.append((line, entry))
    return result


def load_entries(now: int | None = None, retention: int = 600) -> list[tuple[str, Entry]]:
    """Prune the log, then decode what is left."""
    return parse_records(cleanup(now, retention))


def append_entry(entry: Entry) -> str:
    record = entry.to_record()
    storage.append(LOG_FILE, record)
    return record


def remove_record(record: str) -> bool:
    return storage.remove_record(LOG_FILE, record)


def _keep(line: str, now: int, retention: int) -> bool:
    entry = parse_record(line)
    if entry is None:
        return True
    if entry.live:
        return entry.stamp > now
    return now - entry.stamp < retention


def cleanup(now: int | None = None, retention: int = 600) -> list[str]:
    """Drop expired timers/alarms and completed entries older than ``retention``.

    Rewrites only when something was dropped; returns the surviving lines.
    """
    now = int(time.time()) if now is None else now
    lines = storage.load(LOG_FILE)
    kept = [line for line in lines if _keep(line, now, retention)]
    if len(kept) != len(lines):
        log.debug("pruned %d stale record(s)", len(lines) - len(kept))
        storage.rewrite(LOG_FILE, kept)
    return kept
