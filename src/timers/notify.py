"""Desktop notification, sound playback, and editor launch. All best effort."""

import logging
import os
import shutil
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)

APP_NAME = "timers"
_PLAYERS = ("paplay", "pw-play", "aplay", "afplay")


def notify(title: str, body: str, *, urgency: str = "normal") -> None:
    if shutil.which("notify-send") is None:
        log.debug("notify-send not found, skipping notification: %s", title)
        return
    cmd = ["notify-send", f"--app-name={APP_NAME}", f"--urgency={urgency}", title, body]
    try:
        subprocess.run(cmd, check=False, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError:
        log.warning("notification failed: %s", title, exc_info=True)


def play_sound(sound_file: str | None) -> None:
    """Play ``sound_file`` with the first available player."""
    if not sound_file:
        log.debug("no sound_file configured")
        return
    if not Path(sound_file).exists():
        log.warning("sound file not found: %s", sound_file)
        return
    player = next((p for p in _PLAYERS if shutil.which(p)), None)
    if player is None:
        log.warning("no audio player found (tried %s)", ", ".join(_PLAYERS))
        return
    try:
        subprocess.run([player, sound_file], check=False, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError:
        log.warning("sound playback failed: %s", sound_file, exc_info=True)


def open_in_editor(path: Path) -> int:
    """Block on $VISUAL/$EDITOR (falling back to vi); returns its exit code."""
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
    return subprocess.run([*editor.split(), str(path)], check=False).returncode
