from __future__ import annotations

import datetime as dt
import logging
from typing import Iterator

from apptbook.domain import Appointment, InvalidIntervalError, NoSlotFoundError, overlaps, within_range

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_HORIZON_MINUTES = 7 * 24 * 60

_ONE_MINUTE = dt.timedelta(minutes=1)


def _day_window(day: dt.date) -> tuple[dt.datetime, dt.datetime]:
    # A day spans [00:00, 23:59]; the last minute of the day is not part of it.
    start_of_day = dt.datetime.combine(day, dt.time.min)
    return start_of_day, start_of_day + dt.timedelta(hours=23, minutes=59)


def _as_date(value: dt.date | dt.datetime) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


class IntervalStore:
    """In-memory collection of non-overlapping appointments.

    Appointments are kept in insertion order. Conflicts use the exclusive
    overlap test (touching endpoints are allowed), while range queries are
    inclusive on both ends.

    The store is not thread-safe: a host sharing one instance between
    threads must guard every call with a single lock.
    """

    def __init__(self, *, search_horizon_minutes: int = DEFAULT_SEARCH_HORIZON_MINUTES):
        if search_horizon_minutes < 1:
            raise ValueError("search_horizon_minutes must be >= 1")
        self._appointments: list[Appointment] = []
        self._search_horizon_minutes = search_horizon_minutes

    def __len__(self) -> int:
        return len(self._appointments)

    def __iter__(self) -> Iterator[Appointment]:
        return iter(self.get_all())

    def __contains__(self, appointment: object) -> bool:
        return appointment in self._appointments

    def _find_conflict(self, start: dt.datetime, end: dt.datetime) -> Appointment | None:
        for existing in self._appointments:
            if overlaps(start, end, existing.start, existing.end):
                return existing
        return None

    def add(self, appointment: Appointment) -> bool:
        conflict = self._find_conflict(appointment.start, appointment.end)
        if conflict is not None:
            logger.info("Rejected %r: overlaps %r", appointment.title, conflict.title)
            return False

        self._appointments.append(appointment)
        logger.debug("Added %r (%s - %s)", appointment.title, appointment.start, appointment.end)
        return True

    def remove(self, appointment: Appointment) -> bool:
        try:
            self._appointments.remove(appointment)
        except ValueError:
            logger.info("Cannot remove %r: not found", appointment.title)
            return False

        logger.debug("Removed %r", appointment.title)
        return True

    def edit(self, old: Appointment, new: Appointment) -> bool:
        """Replace ``old`` with ``new``; on any failure the store is left as it was."""
        try:
            index = self._appointments.index(old)
        except ValueError:
            logger.info("Cannot edit %r: not found", old.title)
            return False

        del self._appointments[index]
        if self.add(new):
            logger.debug("Edited %r -> %r", old.title, new.title)
            return True

        # Put the old value back where it was.
        self._appointments.insert(index, old)
        logger.info("Edit of %r rolled back", old.title)
        return False

    def query(self, range_start: dt.datetime, range_end: dt.datetime) -> list[Appointment]:
        return [a for a in self._appointments if within_range(a, range_start, range_end)]

    def is_available(self, start: dt.datetime, end: dt.datetime) -> bool:
        return self._find_conflict(start, end) is None

    def find_next_available_slot(
        self,
        start: dt.datetime,
        duration_minutes: int,
        *,
        horizon_minutes: int | None = None,
    ) -> dt.datetime:
        """Return the first minute-aligned start from ``start`` with a free window.

        Candidates are probed one minute apart. The search gives up after
        ``horizon_minutes`` (the store's default when omitted) and raises
        NoSlotFoundError, as does a window that runs past datetime.max.
        """
        if duration_minutes <= 0:
            raise InvalidIntervalError(start, f"start {duration_minutes:+d} min")

        horizon = self._search_horizon_minutes if horizon_minutes is None else horizon_minutes
        if horizon < 1:
            raise ValueError("horizon_minutes must be >= 1")

        try:
            duration = dt.timedelta(minutes=duration_minutes)
            candidate = start
            for _ in range(horizon + 1):
                if self.is_available(candidate, candidate + duration):
                    return candidate
                candidate += _ONE_MINUTE
        except OverflowError as e:
            logger.warning("Slot search from %s left the supported date range (%s)", start, e)
            raise NoSlotFoundError(start, duration_minutes, horizon) from e

        logger.warning("No %d-minute slot within %d minutes of %s", duration_minutes, horizon, start)
        raise NoSlotFoundError(start, duration_minutes, horizon)

    def count_in_range(self, start: dt.datetime, end: dt.datetime) -> int:
        return len(self.query(start, end))

    def cancel_day(self, day: dt.date | dt.datetime) -> int:
        """Remove appointments lying strictly inside ``day``'s [00:00, 23:59] window.

        Appointments starting exactly at midnight or ending exactly at 23:59
        are kept.
        """
        start_of_day, end_of_day = _day_window(_as_date(day))

        kept = [a for a in self._appointments if not (a.start > start_of_day and a.end < end_of_day)]
        removed = len(self._appointments) - len(kept)
        self._appointments = kept

        logger.info("Canceled %d appointment(s) on %s", removed, start_of_day.date().isoformat())
        return removed

    def summary_by_day(self, start: dt.datetime, end: dt.datetime) -> dict[str, int]:
        summary: dict[str, int] = {}
        day = _as_date(start)
        last_day = _as_date(end)
        while day <= last_day:
            summary[day.isoformat()] = self.count_in_range(*_day_window(day))
            day += dt.timedelta(days=1)
        return summary

    def find_longest_free_slot(
        self, start: dt.datetime, end: dt.datetime
    ) -> tuple[dt.datetime, dt.datetime] | None:
        """Return the longest gap between appointments inside [start, end].

        Ties go to the earliest gap. Returns None when the range has no gap
        of positive length.
        """
        gaps: list[tuple[dt.datetime, dt.datetime]] = []
        previous_end = start
        for appointment in sorted(self.query(start, end), key=lambda a: a.start):
            if previous_end < appointment.start:
                gaps.append((previous_end, appointment.start))
            previous_end = max(previous_end, appointment.end)

        if previous_end < end:
            gaps.append((previous_end, end))

        best: tuple[dt.datetime, dt.datetime] | None = None
        best_duration = dt.timedelta(0)
        for gap_start, gap_end in gaps:
            if gap_end - gap_start > best_duration:
                best = (gap_start, gap_end)
                best_duration = gap_end - gap_start
        return best

    def get_all(self) -> list[Appointment]:
        return list(self._appointments)
