"""Entry point for timers."""

import argparse
import logging
import sys

from timers import config, entries
from timers.errors import InvalidDuration, InvalidWindow, MissingFields, TimersError
from timers.listing import collect, render
from timers.notify import open_in_editor
from timers.scheduling import cancel, describe, schedule_entry
from timers.timeparse import parse_duration, parse_time_spec

VERSION = "0.1.0"

EPILOG = """\
time formats:
  duration     1h30m, 25m, 90s, 1.5h   (starts a timer)
  clock time   14:30, 07:05:30         (alarm today, or tomorrow if passed)
  date         2026-01-31, "2026-01-31 09:00"

examples:
  timers                      show pending timers on one line
  timers tea 5m               5 minute timer labelled "tea"
  timers -m standup 09:30     alarm at 09:30
  timers -n 10m review 2h     hidden until the last 10 minutes
  timers -1 --all             one per line, including hidden ones
  timers -c                   cancel one interactively
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timers",
        description="Countdown timers and clock alarms, rendered for status bars.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "words",
        nargs="*",
        metavar="ARG",
        help="MESSAGE... TIME to schedule (or just TIME with -m); nothing to list",
    )
    parser.add_argument("-m", "--message", help="Label for the new timer or alarm")
    parser.add_argument(
        "-n",
        "--window",
        metavar="DURATION",
        help="Hide the new entry from listings until this much time remains",
    )
    parser.add_argument("--sound", action="store_true", help="Play sound_file when it fires")
    parser.add_argument("-c", "--cancel", action="store_true", help="Cancel a timer interactively")
    parser.add_argument("-s", "--seconds", action="store_true", help="List with HH:MM:SS")
    parser.add_argument("-1", dest="vertical", action="store_true", help="List one entry per line")
    parser.add_argument("-a", "--all", action="store_true", help="List entries hidden by -n too")
    parser.add_argument("--json", action="store_true", help="List as a JSON array")
    parser.add_argument("--config", action="store_true", help="Edit the config file")
    parser.add_argument("-V", "--version", action="version", version=f"timers {VERSION}")
    return parser


def _split_request(args: argparse.Namespace) -> tuple[str, str] | None:
    """(message, time spec) for a schedule request, None for a listing."""
    words: list[str] = args.words
    if args.message is not None:
        if not words:
            raise MissingFields("a time is required (e.g. 25m or 14:30)")
        return args.message, " ".join(words)
    if not words:
        if args.window is not None or args.sound:
            raise MissingFields("a message and a time are required")
        return None
    if len(words) == 1:
        raise MissingFields("a message and a time are both required")
    return " ".join(words[:-1]), words[-1]


def _parse_window(spec: str | None) -> int:
    if spec is None:
        return 0
    try:
        return int(parse_duration(spec))
    except InvalidDuration:
        raise InvalidWindow(f"invalid -n window {spec!r} (use e.g. 10m or 1h30m)") from None


def _edit_config() -> None:
    path = config.ensure_config_file()
    try:
        open_in_editor(path)
    except OSError as e:
        print(f"timers: cannot start editor: {e}", file=sys.stderr)
        raise SystemExit(1) from None


def _run(args: argparse.Namespace) -> None:
    if args.config:
        _edit_config()
        return

    settings = config.load_settings()
    if args.cancel:
        cancel(retention=settings.cleanup_age)
        return

    request = _split_request(args)
    if request is None:
        items = collect(retention=settings.cleanup_age, precise=args.seconds, show_all=args.all)
        text = render(items, vertical=args.vertical, as_json=args.json)
        if text or args.json or not args.vertical:
            print(text)
        return

    message, spec = request
    window = _parse_window(args.window)
    kind, deadline = parse_time_spec(spec)
    entries.cleanup(retention=settings.cleanup_age)
    entry = schedule_entry(
        kind,
        deadline,
        message,
        window=window,
        sound=args.sound or settings.sound_on_expire,
        settings=settings,
    )
    print(describe(entry))


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="timers: %(message)s")
    try:
        _run(args)
    except TimersError as e:
        print(f"timers: {e}", file=sys.stderr)
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
