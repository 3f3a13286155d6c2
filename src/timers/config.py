"""Paths, timezone, and user settings loaded from the environment and config file."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import dotenv_values

log = logging.getLogger(__name__)


def _xdg_dir(var: str, fallback: str) -> Path:
    value = os.environ.get(var)
    return Path(value) if value else Path.home() / fallback


LOG_FILE: Path = Path(
    os.environ.get("TIMERS_LOG") or _xdg_dir("XDG_CACHE_HOME", ".cache") / "timers" / "timers.log"
)
CONFIG_FILE: Path = Path(
    os.environ.get("TIMERS_CONFIG") or _xdg_dir("XDG_CONFIG_HOME", ".config") / "timers" / "config"
)
LOG_LEVEL: str = os.environ.get("TIMERS_LOG_LEVEL", "WARNING").upper()


def _detect_local_tz() -> str:
    """Detect the system's IANA timezone name. Falls back to UTC."""
    # Debian/Ubuntu: plain text file with IANA name
    etc_tz = Path("/etc/timezone")
    if etc_tz.exists():
        name = etc_tz.read_text().strip()
        if name:
            return name

    # Most Linux/WSL: /etc/localtime is a symlink into zoneinfo
    localtime = Path("/etc/localtime")
    if localtime.is_symlink():
        target = str(localtime.resolve())
        marker = "/zoneinfo/"
        idx = target.find(marker)
        if idx != -1:
            return target[idx + len(marker) :]

    return "UTC"


def _load_tz(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("Unknown timezone %r, falling back to UTC", name)
        return ZoneInfo("UTC")


TZ: ZoneInfo = _load_tz(os.environ.get("TIMERS_TIMEZONE") or _detect_local_tz())

DEFAULT_CONFIG = """\
# timers configuration (key=value, 0/1 for switches)
notify_on_create=0
notify_on_expire=1
sound_on_expire=0
# sound_file=/usr/share/sounds/freedesktop/stereo/complete.oga
# seconds a finished timer stays listed
cleanup_age=600
"""


@dataclass(frozen=True, slots=True)
class Settings:
    notify_on_create: bool = False
    notify_on_expire: bool = True
    sound_on_expire: bool = False
    sound_file: str | None = None
    cleanup_age: int = 600  # seconds a completed entry stays listed


_SWITCHES = ("notify_on_create", "notify_on_expire", "sound_on_expire")


def _parse_switch(key: str, raw: str, default: bool) -> bool:
    if raw.strip() in ("0", "1"):
        return raw.strip() == "1"
    log.warning("Ignoring %s=%r in config (expected 0 or 1)", key, raw)
    return default


def load_settings(path: Path | None = None) -> Settings:
    """Read key=value settings; unknown keys are ignored, a missing file yields defaults."""
    path = path or CONFIG_FILE
    if not path.exists():
        return Settings()
    values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    defaults = Settings()
    overrides: dict[str, object] = {}

    for key in _SWITCHES:
        if key in values:
            overrides[key] = _parse_switch(key, values[key], getattr(defaults, key))

    sound_file = values.get("sound_file", "").strip()
    if sound_file:
        overrides["sound_file"] = os.path.expanduser(sound_file)

    if "cleanup_age" in values:
        try:
            age = int(values["cleanup_age"])
        except ValueError:
            log.warning("Ignoring cleanup_age=%r in config (expected seconds)", values["cleanup_age"])
        else:
            if age >= 0:
                overrides["cleanup_age"] = age
            else:
                log.warning("Ignoring negative cleanup_age=%d in config", age)

    return Settings(**overrides)  # type: ignore[arg-type]


def ensure_config_file(path: Path | None = None) -> Path:
    """Create the settings file with commented defaults if it does not exist yet."""
    path = path or CONFIG_FILE
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG)
    return path
