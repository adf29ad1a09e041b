from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True)
class Appointment:
    """A titled half-open time interval [start, end).

    Values are compared by (title, start, end); the store uses that equality
    to find the appointment to remove or edit.
    """

    title: str
    start: dt.datetime
    end: dt.datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidIntervalError(self.start, self.end)

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start


def overlaps(start_a: dt.datetime, end_a: dt.datetime, start_b: dt.datetime, end_b: dt.datetime) -> bool:
    # Touching endpoints are not a conflict.
    return start_a < end_b and start_b < end_a


def within_range(appointment: Appointment, range_start: dt.datetime, range_end: dt.datetime) -> bool:
    # Inclusive on both sides, unlike overlaps().
    return appointment.start <= range_end and appointment.end >= range_start


class InvalidIntervalError(ValueError):
    """Raised for an interval whose start is not strictly before its end."""

    def __init__(self, start: object, end: object):
        super().__init__(f"Invalid interval: start ({start}) must be before end ({end})")
        self.start = start
        self.end = end


class NoSlotFoundError(LookupError):
    """The slot search ran past its horizon without finding a free window."""

    def __init__(self, start: dt.datetime, duration_minutes: int, horizon_minutes: int):
        super().__init__(
            f"No free {duration_minutes}-minute slot within {horizon_minutes} minutes of {start:%Y-%m-%d %H:%M}"
        )
        self.start = start
        self.duration_minutes = duration_minutes
        self.horizon_minutes = horizon_minutes
