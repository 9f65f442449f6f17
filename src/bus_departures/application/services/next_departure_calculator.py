"""Next departure calculation for daily repeating schedules."""

from datetime import datetime, time, timedelta

# Last instant of a day on which a departure may still be scheduled.
END_OF_DAY = time(23, 59, 59)

_MICROSECOND = timedelta(microseconds=1)


def calculate_next_departure(
    now: datetime, first_departure_time: time, frequency_minutes: int
) -> datetime:
    """Return the soonest departure at or after ``now``.

    Departures run every ``frequency_minutes`` starting at ``first_departure_time``
    and restart at ``first_departure_time`` on each calendar day. A step that would
    cross midnight is not carried over: once today's departures are exhausted, the
    next one is tomorrow's first departure. This leaves a gap at the end of the day
    when the frequency does not divide the remaining span.

    Date arithmetic happens in the zone of ``now``.

    Args:
        now: The current instant.
        first_departure_time: The daily departure anchor.
        frequency_minutes: Minutes between departures, must be positive.

    Returns:
        The next departure in the same zone as ``now``.
    """
    if frequency_minutes <= 0:
        raise ValueError(f"frequency_minutes must be positive, got {frequency_minutes}")

    today = now.date()
    departure = datetime.combine(today, first_departure_time, tzinfo=now.tzinfo)
    if departure >= now:
        return departure

    # Integer microsecond offsets from the anchor, checked before any datetime is built
    frequency_us = frequency_minutes * 60 * 1_000_000
    elapsed_us = (now - departure) // _MICROSECOND
    offset_us = -(-elapsed_us // frequency_us) * frequency_us

    end_of_day = datetime.combine(today, END_OF_DAY, tzinfo=now.tzinfo)
    if offset_us > (end_of_day - departure) // _MICROSECOND:
        return datetime.combine(today + timedelta(days=1), first_departure_time, tzinfo=now.tzinfo)
    return departure + timedelta(microseconds=offset_us)
