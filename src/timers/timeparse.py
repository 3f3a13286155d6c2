"""Duration and clock-time parsing.

A time spec is first tried as a duration (``1h20m``, ``90s``, ``1.5m``) which
makes a timer; failing that, as a clock time or date which makes an alarm.
"""

import logging
import math
import re
import time
from datetime import datetime, timedelta
from typing import Literal

from timers.config import TZ
from timers.errors import InvalidDate, InvalidDuration, TimeInPast, Unparseable

log = logging.getLogger(__name__)

_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}
_TOKEN = re.compile(r"(\d*\.?\d+)([hms])")
_DURATION = re.compile(r"(?:\d*\.?\d+[hms])+")

_CLOCK_FORMATS = ("%H:%M", "%H:%M:%S")
_DATE_FORMATS = ("%Y-%m-%d",)
_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
)


def parse_duration(spec: str) -> float:
    """Sum ``<number><unit>`` tokens into seconds. Any unparsed text is an error."""
    if not _DURATION.fullmatch(spec):
        raise InvalidDuration(f"could not parse duration {spec!r} (use e.g. 1h30m, 90s, 1.5m)")
    total = sum(float(num) * _UNIT_SECONDS[unit] for num, unit in _TOKEN.findall(spec))
    if not math.isfinite(total):
        raise InvalidDuration(f"duration {spec!r} is too large")
    return total


def representable(stamp: float) -> bool:
    """True if ``stamp`` converts to a local datetime (year 1..9999 on this platform)."""
    try:
        datetime.fromtimestamp(stamp, TZ)
    except (OverflowError, ValueError, OSError):
        return False
    return True


def _strptime(spec: str, formats: tuple[str, ...]) -> datetime | None:
    for fmt in formats:
        try:
            return datetime.strptime(spec, fmt)
        except ValueError:
            continue
    return None


def parse_absolute_time(spec: str, now: float | None = None) -> int:
    """Clock time, date, or date+time to epoch seconds in the configured timezone.

    A bare clock time that has already passed today rolls over to tomorrow.
    """
    now = time.time() if now is None else now
    spec = spec.strip()

    clock = _strptime(spec, _CLOCK_FORMATS)
    if clock is not None:
        today = datetime.fromtimestamp(now, TZ).date()
        target = datetime.combine(today, clock.time(), tzinfo=TZ)
        if target.timestamp() <= now:
            target = datetime.combine(today + timedelta(days=1), clock.time(), tzinfo=TZ)
            log.warning("%s has already passed today, setting it for tomorrow", spec)
        return int(target.timestamp())

    day = _strptime(spec, _DATE_FORMATS)
    if day is not None:
        return int(datetime.combine(day.date(), datetime.min.time(), tzinfo=TZ).timestamp())

    moment = _strptime(spec, _DATETIME_FORMATS)
    if moment is not None:
        return int(moment.replace(tzinfo=TZ).timestamp())

    raise InvalidDate(f"could not parse date {spec!r} (use HH:MM, YYYY-MM-DD or 'YYYY-MM-DD HH:MM')")


def parse_time_spec(spec: str, now: float | None = None) -> tuple[Literal["TIMER", "ALARM"], int]:
    """Infer timer or alarm from one input string; returns the kind and its deadline."""
    now = time.time() if now is None else now
    try:
        seconds = parse_duration(spec)
    except InvalidDuration:
        pass
    else:
        if int(seconds) <= 0:
            raise TimeInPast("duration must be greater than zero")
        deadline = math.ceil(now + seconds)
        if not representable(deadline):
            raise InvalidDuration(f"duration {spec!r} ends too far in the future")
        return "TIMER", deadline

    try:
        return "ALARM", parse_absolute_time(spec, now)
    except InvalidDate:
        raise Unparseable(
            f"{spec!r} is neither a duration (1h30m) nor a time or date (14:30, 2026-01-31 09:00)"
        ) from None
