"""Errors raised while loading the bus schedule."""


class ScheduleError(Exception):
    """Base class for schedule errors."""


class ScheduleLoadError(ScheduleError):
    """The schedule source is missing, unreadable, or not shaped like bus lines."""


class ScheduleConfigurationError(ScheduleError):
    """A bus line carries an invalid departure anchor or frequency.

    Not retriable: the data itself must be fixed. The whole batch is rejected.
    """
