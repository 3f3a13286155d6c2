"""Detached per-entry process: wait for the deadline, mark it done, then prune.

Runs as ``python -m timers.scheduling.waiter KIND DEADLINE WINDOW SOUND -- MESSAGE``.
Uses a one-off APScheduler BlockingScheduler with DateTriggers; the scheduler
shuts itself down once the completed record has been removed.
"""

import argparse
import logging
import os
import time
from datetime import datetime

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.date import DateTrigger

from timers import entries
from timers.config import LOG_LEVEL, TZ, Settings, load_settings
from timers.entries import LIVE_KINDS, Entry
from timers.notify import notify, play_sound

log = logging.getLogger(__name__)


def fire(entry: Entry, settings: Settings, now: int | None = None) -> Entry:
    """Swap the live record for a completed one and run the expiry side effects."""
    now = int(time.time()) if now is None else now
    if not entries.remove_record(entry.to_record()):
        # Pruned by a concurrent cleanup or removed by a canceller.
        log.info("live record for pid %s already gone", entry.pid)
    done = Entry.completed(entry.message, now)
    entries.append_entry(done)

    if settings.notify_on_expire:
        notify(f"{entry.kind.title()} done", entry.message, urgency="critical")
    if entry.sound:
        play_sound(settings.sound_file)
    return done


def expire(done: Entry, settings: Settings, now: int | None = None) -> None:
    """Drop the completed record at the end of its retention window."""
    entries.remove_record(done.to_record())
    entries.cleanup(now, settings.cleanup_age)


def _at(stamp: int) -> datetime:
    return datetime.fromtimestamp(stamp, TZ)


def run(entry: Entry, settings: Settings) -> None:
    """Block until the entry has fired and its completed record has been pruned."""
    scheduler = BlockingScheduler(timezone=TZ)

    def _on_retention_end(done: Entry) -> None:
        try:
            expire(done, settings)
        except Exception:
            log.exception("Pruning completed %r failed", done.message)
        finally:
            scheduler.shutdown(wait=False)

    def _on_deadline() -> None:
        try:
            done = fire(entry, settings)
        except Exception:
            log.exception("Firing %s %r failed", entry.kind.lower(), entry.message)
            scheduler.shutdown(wait=False)
            return
        scheduler.add_job(
            _on_retention_end,
            DateTrigger(run_date=_at(done.stamp + settings.cleanup_age)),
            args=[done],
            misfire_grace_time=None,
        )

    scheduler.add_job(
        _on_deadline,
        DateTrigger(run_date=_at(entry.stamp)),
        id=f"deadline-{entry.pid}",
        misfire_grace_time=None,
    )
    log.debug("waiting for %s %r until %s", entry.kind.lower(), entry.message, _at(entry.stamp))
    scheduler.start()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="python -m timers.scheduling.waiter")
    parser.add_argument("kind", choices=LIVE_KINDS)
    parser.add_argument("deadline", type=int)
    parser.add_argument("window", type=int)
    parser.add_argument("sound", type=int, choices=(0, 1))
    parser.add_argument("message")
    args = parser.parse_args(argv)

    entries.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=entries.LOG_FILE.parent / "waiter.log",
        level=LOG_LEVEL,
        format="%(asctime)s [%(process)d] %(levelname)s %(name)s: %(message)s",
    )
    entry = Entry(
        kind=args.kind,
        stamp=args.deadline,
        message=args.message,
        pid=os.getpid(),
        window=args.window,
        sound=bool(args.sound),
    )
    run(entry, load_settings())


if __name__ == "__main__":
    main()
