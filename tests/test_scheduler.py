"""Tests for scheduling/scheduler.py — validation, record append, waiter argv."""

import sys

import pytest

from timers.config import Settings
from timers.entries import load_entries
from timers.errors import InvalidDuration, MissingFields, TimeInPast
from timers.scheduling.scheduler import WAITER_MODULE, describe, schedule_entry, waiter_argv

NOW = 1_700_000_000
QUIET = Settings(notify_on_create=False, notify_on_expire=False)


def test_schedule_appends_live_record(log_file, no_spawn):
    entry = schedule_entry("TIMER", NOW + 60, "tea", window=30, settings=QUIET, now=NOW)

    assert entry.pid == 40001
    assert log_file.read_text() == f"{NOW + 60} TIMER 40001 30 0 tea\n"
    assert no_spawn[0].pid is None
    assert no_spawn[0].message == "tea"


def test_schedule_is_pure_append(log_file, no_spawn):
    log_file.parent.mkdir(parents=True)
    log_file.write_text("unrelated line\n")

    schedule_entry("ALARM", NOW + 60, "a", sound=True, settings=QUIET, now=NOW)
    schedule_entry("TIMER", NOW + 90, "b", settings=QUIET, now=NOW)

    assert log_file.read_text().splitlines() == [
        "unrelated line",
        f"{NOW + 60} ALARM 40001 0 1 a",
        f"{NOW + 90} TIMER 40002 0 0 b",
    ]


def test_message_newlines_folded(log_file, no_spawn):
    entry = schedule_entry("TIMER", NOW + 60, "two\nlines", settings=QUIET, now=NOW)

    assert entry.message == "two lines"
    assert len(log_file.read_text().splitlines()) == 1


def test_message_undecodable_bytes_replaced(log_file, no_spawn):
    message = b"caf\xe9".decode("utf-8", "surrogateescape")

    entry = schedule_entry("TIMER", NOW + 60, message, settings=QUIET, now=NOW)

    assert entry.message == "caf?"
    assert len(no_spawn) == 1
    assert log_file.read_text(encoding="utf-8") == f"{NOW + 60} TIMER 40001 0 0 caf?\n"


def test_deadline_beyond_calendar_rejected_without_trace(log_file, no_spawn):
    with pytest.raises(InvalidDuration):
        schedule_entry("TIMER", NOW + 10**12, "forever", settings=QUIET, now=NOW)

    assert no_spawn == []
    assert not log_file.exists()


@pytest.mark.parametrize("deadline", [NOW, NOW - 1])
def test_past_deadline_rejected_without_trace(log_file, no_spawn, deadline):
    with pytest.raises(TimeInPast):
        schedule_entry("ALARM", deadline, "late", settings=QUIET, now=NOW)

    assert no_spawn == []
    assert not log_file.exists()


def test_blank_message_rejected(log_file, no_spawn):
    with pytest.raises(MissingFields):
        schedule_entry("TIMER", NOW + 60, "   ", settings=QUIET, now=NOW)

    assert no_spawn == []


def test_notify_on_create(log_file, no_spawn, monkeypatch):
    import timers.scheduling.scheduler as scheduler_mod

    sent = []
    monkeypatch.setattr(scheduler_mod, "notify", lambda title, body, **kw: sent.append((title, body)))

    schedule_entry("TIMER", NOW + 60, "tea", settings=Settings(notify_on_create=True), now=NOW)

    assert sent[0][0] == "Timer set"
    assert "tea" in sent[0][1]


def test_waiter_argv_passes_message_after_separator(log_file, no_spawn):
    entry = schedule_entry("TIMER", NOW + 60, "-v --weird msg", settings=QUIET, now=NOW)

    argv = waiter_argv(entry)

    assert argv[:3] == [sys.executable, "-m", WAITER_MODULE]
    assert argv[3:] == ["TIMER", str(NOW + 60), "0", "0", "--", "-v --weird msg"]


def test_describe(log_file, no_spawn):
    entry = schedule_entry("ALARM", NOW + 60, "standup", settings=QUIET, now=NOW)

    assert describe(entry).startswith("alarm set: standup -- ")


def test_scheduled_entry_listed(log_file, no_spawn):
    schedule_entry("TIMER", NOW + 60, "tea", settings=QUIET, now=NOW)

    [(line, entry)] = load_entries(NOW)

    assert entry.message == "tea"
    assert entry.kind == "TIMER"
