from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Callable, TypeVar

from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"
DATE_FORMAT = "%Y-%m-%d"

INVALID_DATETIME_MESSAGE = "Invalid date/time format. Please enter again."
INVALID_INTEGER_MESSAGE = "Invalid input. Please enter a valid integer."

# strptime alone accepts unpadded fields ("2024-3-1 9:5") and int() accepts "1_000".
_DATETIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_INT_RE = re.compile(r"[+-]?[0-9]+")

T = TypeVar("T")

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def parse_datetime(text: str) -> dt.datetime:
    raw = text.strip()
    if not _DATETIME_RE.fullmatch(raw):
        raise ValueError(f"Expected yyyy-MM-dd HH:mm, got {raw!r}")
    return dt.datetime.strptime(raw, DATETIME_FORMAT)


def parse_date(text: str) -> dt.date:
    # Both "2024-03-01" and "2024-03-01 09:30" are accepted; the time part is dropped.
    raw = text.strip()
    if _DATE_RE.fullmatch(raw):
        return dt.datetime.strptime(raw, DATE_FORMAT).date()
    return parse_datetime(raw).date()


def parse_int(text: str) -> int:
    raw = text.strip()
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"Expected an integer, got {raw!r}")
    return int(raw)


def _log_before_reprompt(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome is not None else None
    logger.debug("Input attempt %s rejected (%s)", retry_state.attempt_number, exc)


def _prompt(
    message: str,
    parse: Callable[[str], T],
    error_message: str,
    *,
    attempts: int,
    input_fn: InputFn,
    output: OutputFn,
) -> T:
    def _report_invalid(retry_state: RetryCallState) -> None:
        if retry_state.outcome is not None and retry_state.outcome.failed:
            output(error_message)

    @retry(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(ValueError),
        after=_report_invalid,
        before_sleep=_log_before_reprompt,
        reraise=True,
    )
    def _read() -> T:
        return parse(input_fn(message))

    return _read()


def read_datetime(message: str, *, attempts: int = 5, input_fn: InputFn = input, output: OutputFn = print) -> dt.datetime:
    return _prompt(message, parse_datetime, INVALID_DATETIME_MESSAGE, attempts=attempts, input_fn=input_fn, output=output)


def read_date(message: str, *, attempts: int = 5, input_fn: InputFn = input, output: OutputFn = print) -> dt.date:
    return _prompt(message, parse_date, INVALID_DATETIME_MESSAGE, attempts=attempts, input_fn=input_fn, output=output)


def read_int(message: str, *, attempts: int = 5, input_fn: InputFn = input, output: OutputFn = print) -> int:
    return _prompt(message, parse_int, INVALID_INTEGER_MESSAGE, attempts=attempts, input_fn=input_fn, output=output)


def read_line(message: str, *, input_fn: InputFn = input) -> str:
    return input_fn(message).strip()
