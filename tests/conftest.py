"""Shared fixtures for timers tests."""

import pytest


@pytest.fixture()
def log_file(tmp_path, monkeypatch):
    """Redirect the timer log and config file to a temp directory."""
    import timers.config as config_mod
    import timers.entries as entries_mod

    path = tmp_path / "cache" / "timers.log"
    monkeypatch.setattr(entries_mod, "LOG_FILE", path)
    monkeypatch.setattr(config_mod, "LOG_FILE", path)
    monkeypatch.setattr(config_mod, "CONFIG_FILE", tmp_path / "config" / "timers")
    return path


@pytest.fixture()
def no_spawn(monkeypatch):
    """Replace waiter spawning with fake, increasing pids; returns the spawned entries."""
    import timers.scheduling.scheduler as scheduler_mod

    spawned = []

    def fake_spawn(entry):
        spawned.append(entry)
        return 40000 + len(spawned)

    monkeypatch.setattr(scheduler_mod, "_spawn_waiter", fake_spawn)
    return spawned
