"""Tests for scheduling/waiter.py — firing and retention-end pruning."""

import timers.scheduling.waiter as waiter_mod
from timers.config import Settings
from timers.entries import CHECKMARK, Entry, append_entry
from timers.scheduling.waiter import expire, fire

NOW = 1_700_000_000


def _quiet(monkeypatch):
    calls = []
    monkeypatch.setattr(waiter_mod, "notify", lambda *a, **kw: calls.append(("notify", a)))
    monkeypatch.setattr(waiter_mod, "play_sound", lambda path: calls.append(("sound", path)))
    return calls


def test_fire_swaps_live_for_completed(log_file, monkeypatch):
    _quiet(monkeypatch)
    entry = Entry(kind="TIMER", stamp=NOW, message="foo|bar", pid=77)
    other = append_entry(Entry(kind="TIMER", stamp=NOW + 50, message="foo", pid=78))
    append_entry(entry)

    done = fire(entry, Settings(notify_on_expire=False), now=NOW + 1)

    assert done == Entry.completed("foo|bar", NOW + 1)
    assert log_file.read_text().splitlines() == [other, f"{NOW + 1} {CHECKMARK} foo|bar"]


def test_fire_after_cancel_still_records_completion(log_file, monkeypatch):
    _quiet(monkeypatch)
    entry = Entry(kind="ALARM", stamp=NOW, message="gone", pid=5)

    fire(entry, Settings(notify_on_expire=False), now=NOW)

    assert log_file.read_text() == f"{NOW} {CHECKMARK} gone\n"


def test_fire_side_effects(log_file, monkeypatch):
    calls = _quiet(monkeypatch)
    entry = Entry(kind="TIMER", stamp=NOW, message="tea", pid=5, sound=True)

    fire(entry, Settings(notify_on_expire=True, sound_file="/tmp/ding.oga"), now=NOW)

    assert calls == [("notify", ("Timer done", "tea")), ("sound", "/tmp/ding.oga")]


def test_fire_without_sound_or_notify(log_file, monkeypatch):
    calls = _quiet(monkeypatch)

    fire(Entry(kind="TIMER", stamp=NOW, message="tea", pid=5), Settings(notify_on_expire=False), now=NOW)

    assert calls == []


def test_expire_removes_completed_and_prunes(log_file, monkeypatch):
    _quiet(monkeypatch)
    live = append_entry(Entry(kind="TIMER", stamp=NOW + 900, message="later", pid=9))
    append_entry(Entry(kind="TIMER", stamp=NOW + 100, message="expired meanwhile", pid=10))
    done = Entry.completed("tea", NOW)
    append_entry(done)

    expire(done, Settings(cleanup_age=600), now=NOW + 600)

    assert log_file.read_text().splitlines() == [live]
