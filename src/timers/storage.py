"""Line-oriented I/O for the shared timer log.

Every process reads and writes the same file without a lock. Appends are a
single write in append mode; anything that drops lines goes through a full
rewrite via temp file + rename so readers never see a torn file.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)


def load(filepath: Path) -> list[str]:
    """Non-empty lines in file order. Creates the file and its directory if missing."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.touch(exist_ok=True)
    return [line for line in filepath.read_text(encoding="utf-8").splitlines() if line.strip()]


def rewrite(filepath: Path, records: list[str]) -> None:
    """Atomic write (temp file + rename) to prevent torn reads on concurrent access."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    content = "".join(record + "\n" for record in records)
    fd, tmp = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, filepath)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def append(filepath: Path, record: str) -> None:
    """Pure append; never reads prior state, so concurrent creations don't clobber each other."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("a", encoding="utf-8") as f:
        f.write(record + "\n")


def remove_record(filepath: Path, record: str) -> bool:
    """Drop the first line equal to ``record``. Literal comparison, never a pattern."""
    records = load(filepath)
    try:
        records.remove(record)
    except ValueError:
        log.debug("record already gone: %.80s", record)
        return False
    rewrite(filepath, records)
    return True
