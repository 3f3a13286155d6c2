"""Status-bar rendering of the timer log: compact text, one-per-line, or JSON."""

import json
import time
from dataclasses import dataclass

from timers.entries import CHECKMARK, Entry, load_entries

STOPWATCH = "⏱️"
CALENDAR = "📅"

MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
YEAR = 31536000

SEPARATOR = " | "


def format_remaining(seconds: int) -> str:
    """Coarse natural size: 45s, 12m, 1.5h, 2.0d, 3.1w, 1.2y."""
    if seconds < MINUTE:
        return f"{seconds}s"
    if seconds < HOUR:
        return f"{seconds // MINUTE}m"
    if seconds < DAY:
        return f"{seconds / HOUR:.1f}h"
    if seconds < WEEK:
        return f"{seconds / DAY:.1f}d"
    if seconds < YEAR:
        return f"{seconds / WEEK:.1f}w"
    return f"{seconds / YEAR:.1f}y"


def format_precise(seconds: int) -> str:
    """HH:MM:SS with unbounded hours."""
    return f"{seconds // HOUR:02d}:{seconds % HOUR // MINUTE:02d}:{seconds % MINUTE:02d}"


@dataclass(frozen=True, slots=True)
class ListItem:
    """One visible entry, ready for any output layout."""

    id: int | None
    name: str
    label: str  # "timer", "alarm" or "done"
    emoji: str
    expiration: int
    remaining: int
    sound: bool
    text: str

    def to_json(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "emoji": self.emoji,
            "expiration": self.expiration,
            "remaining": self.remaining,
            "sound": self.sound,
        }


def _done_item(entry: Entry, label: str) -> ListItem:
    return ListItem(
        id=entry.pid,
        name=entry.message,
        label=label,
        emoji=CHECKMARK,
        expiration=entry.stamp,
        remaining=0,
        sound=entry.sound,
        text=f"{entry.message} {CHECKMARK}",
    )


def build_item(entry: Entry, now: int, *, precise: bool = False, show_all: bool = False) -> ListItem | None:
    """Render one entry, or None when its visibility window hides it."""
    if not entry.live:
        return _done_item(entry, "done")

    remaining = entry.stamp - now
    # Fired but not yet rewritten by its waiter.
    if remaining <= 0:
        return _done_item(entry, entry.kind.lower())

    if not show_all and entry.window > 0 and remaining > entry.window:
        return None

    if precise:
        icon, shown = STOPWATCH, format_precise(remaining)
    else:
        icon = CALENDAR if remaining >= DAY else STOPWATCH
        shown = format_remaining(remaining)
    return ListItem(
        id=entry.pid,
        name=entry.message,
        label=entry.kind.lower(),
        emoji=icon,
        expiration=entry.stamp,
        remaining=remaining,
        sound=entry.sound,
        text=f"{icon} {entry.message}: {shown}",
    )


def collect(
    now: int | None = None,
    *,
    retention: int = 600,
    precise: bool = False,
    show_all: bool = False,
) -> list[ListItem]:
    """Prune the log, then build the visible items in file order."""
    now = int(time.time()) if now is None else now
    items = []
    for _line, entry in load_entries(now, retention):
        item = build_item(entry, now, precise=precise, show_all=show_all)
        if item is not None:
            items.append(item)
    return items


def render(items: list[ListItem], *, vertical: bool = False, as_json: bool = False) -> str:
    """Text for stdout without the trailing newline.

    Horizontal always yields exactly one line (empty when nothing is visible);
    vertical yields one line per item and nothing at all when empty.
    """
    if as_json:
        return json.dumps([item.to_json() for item in items], ensure_ascii=False)
    if vertical:
        return "\n".join(item.text for item in items)
    return SEPARATOR.join(item.text for item in items)
