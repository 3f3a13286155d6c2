"""Validation failures. All are raised before the log is touched or a waiter is spawned."""


class TimersError(Exception):
    """Base class for rejected requests; the CLI prints the message and exits 1."""


class InvalidDuration(TimersError):
    pass


class InvalidDate(TimersError):
    pass


class Unparseable(TimersError):
    """Input is neither a duration nor a clock time or date."""


class MissingFields(TimersError):
    pass


class TimeInPast(TimersError):
    pass


class InvalidWindow(TimersError):
    pass
