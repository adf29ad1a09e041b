"""Interactive demo session over IntervalStore.

Only sequencing and console formatting live here; every decision is made by
the store.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable

from apptbook.config import Settings
from apptbook.domain import Appointment, InvalidIntervalError, NoSlotFoundError
from apptbook.prompts import DATETIME_FORMAT, InputFn, OutputFn, read_date, read_datetime, read_int, read_line
from apptbook.store import IntervalStore

logger = logging.getLogger(__name__)

SAMPLE_APPOINTMENTS: tuple[Appointment, ...] = (
    Appointment("Meeting", dt.datetime(2024, 3, 1, 10, 0), dt.datetime(2024, 3, 1, 11, 0)),
    Appointment("Lunch", dt.datetime(2024, 3, 1, 12, 0), dt.datetime(2024, 3, 1, 13, 0)),
    Appointment("Presentation", dt.datetime(2024, 3, 1, 14, 0), dt.datetime(2024, 3, 1, 15, 0)),
    Appointment("Review", dt.datetime(2024, 3, 1, 16, 0), dt.datetime(2024, 3, 1, 17, 0)),
    Appointment("Workshop", dt.datetime(2024, 3, 1, 17, 30), dt.datetime(2024, 3, 1, 18, 30)),
)

# The appointment the session offers to edit.
EDIT_TARGET = SAMPLE_APPOINTMENTS[1]


def format_timestamp(value: dt.datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


def format_appointment(appointment: Appointment) -> str:
    return (
        f"Title: {appointment.title}, "
        f"Start Time: {format_timestamp(appointment.start)}, "
        f"End Time: {format_timestamp(appointment.end)}"
    )


def seed_sample_data(store: IntervalStore) -> int:
    added = sum(1 for a in SAMPLE_APPOINTMENTS if store.add(a))
    logger.info("Seeded %d sample appointment(s)", added)
    return added


def _whole_days(first: dt.date, last: dt.date) -> tuple[dt.datetime, dt.datetime]:
    # [first 00:00, last 23:59:59]
    start = dt.datetime.combine(first, dt.time.min)
    end = dt.datetime.combine(last + dt.timedelta(days=1), dt.time.min) - dt.timedelta(seconds=1)
    return start, end


def _print_appointments(output: OutputFn, header: str, appointments: Iterable[Appointment]) -> None:
    output(header)
    for appointment in appointments:
        output(format_appointment(appointment))


def run_session(
    store: IntervalStore,
    settings: Settings,
    *,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> None:
    prompt_kwargs = {"attempts": settings.input_retry_attempts, "input_fn": input_fn, "output": output}

    # Range query
    start = read_datetime("Enter start date and time (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    end = read_datetime("Enter end date and time (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    range_label = f"{format_timestamp(start)} to {format_timestamp(end)}"
    _print_appointments(output, f"Appointments for {range_label}:", store.query(start, end))

    # Edit
    output("Enter details for the new appointment:")
    title = read_line("Title: ", input_fn=input_fn)
    new_start = read_datetime("Enter new start time (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    new_end = read_datetime("Enter new end time (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    if not title:
        output("Failed to edit appointment: title must not be empty.")
    else:
        try:
            replacement = Appointment(title, new_start, new_end)
        except InvalidIntervalError as e:
            output(f"Failed to edit appointment: {e}")
        else:
            if store.edit(EDIT_TARGET, replacement):
                output("Appointment edited successfully.")
            elif EDIT_TARGET not in store:
                output("Failed to edit appointment: original appointment not found.")
            else:
                output("Failed to edit appointment due to conflict.")

    _print_appointments(output, f"Updated appointments for {range_label}:", store.query(start, end))

    # Availability
    check_start = read_datetime("Enter start time to check availability (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    check_end = read_datetime("Enter end time to check availability (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    check_label = f"{format_timestamp(check_start)} to {format_timestamp(check_end)}"
    if store.is_available(check_start, check_end):
        output(f"The time slot from {check_label} is available.")
    else:
        output(f"The time slot from {check_label} is not available.")

    # Next free slot
    search_start = read_datetime("Enter start time to find next available slot (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    duration_minutes = read_int("Enter duration of the slot in minutes: ", **prompt_kwargs)
    try:
        slot = store.find_next_available_slot(search_start, duration_minutes)
    except (NoSlotFoundError, InvalidIntervalError) as e:
        logger.info("Slot search failed (%s)", e)
        output("No available time slot found.")
    else:
        output(f"The next available time slot is at {format_timestamp(slot)}.")

    # Count for one day
    count_day = read_date("Enter date to count appointments (yyyy-MM-dd): ", **prompt_kwargs)
    count = store.count_in_range(*_whole_days(count_day, count_day))
    output(f"Number of appointments on {count_day.isoformat()}: {count}")

    # Cancel a day
    cancel_day = read_date("Enter date to cancel all appointments (yyyy-MM-dd): ", **prompt_kwargs)
    removed = store.cancel_day(cancel_day)
    output(f"All appointments for {cancel_day.isoformat()} have been canceled ({removed} removed).")

    # Summary by day
    summary_first = read_date("Enter start date to get appointment summary (yyyy-MM-dd): ", **prompt_kwargs)
    summary_last = read_date("Enter end date to get appointment summary (yyyy-MM-dd): ", **prompt_kwargs)
    output("Appointment summary by day:")
    for day_key, day_count in store.summary_by_day(*_whole_days(summary_first, summary_last)).items():
        output(f"{day_key}: {day_count} appointments")

    # Longest gap
    gap_start = read_datetime("Enter start date to find longest free slot (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    gap_end = read_datetime("Enter end date to find longest free slot (yyyy-MM-dd HH:mm): ", **prompt_kwargs)
    longest = store.find_longest_free_slot(gap_start, gap_end)
    if longest is not None:
        output(f"The longest free slot is from {format_timestamp(longest[0])} to {format_timestamp(longest[1])}.")
    else:
        output("No free slot found.")

    _print_appointments(output, "All appointments:", store)
