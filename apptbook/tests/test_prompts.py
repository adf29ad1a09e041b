from __future__ import annotations

import datetime as dt
from typing import Callable, Iterable

import pytest

from apptbook.prompts import (
    INVALID_DATETIME_MESSAGE,
    INVALID_INTEGER_MESSAGE,
    parse_date,
    parse_datetime,
    parse_int,
    read_date,
    read_datetime,
    read_int,
)


def _scripted(answers: Iterable[str]) -> tuple[Callable[[str], str], list[str]]:
    """Fake input(): replays answers and records the prompts it was shown."""
    pending = list(answers)
    prompts: list[str] = []

    def _input(message: str) -> str:
        prompts.append(message)
        if not pending:
            raise EOFError
        return pending.pop(0)

    return _input, prompts


def test_parse_datetime_accepts_expected_pattern() -> None:
    assert parse_datetime(" 2024-03-01 09:05 ") == dt.datetime(2024, 3, 1, 9, 5)


@pytest.mark.parametrize("text", ["2024-03-01", "01/03/2024 09:00", "2024-03-01T09:00", "", "2024-13-01 09:00"])
def test_parse_datetime_rejects_other_patterns(text: str) -> None:
    with pytest.raises(ValueError):
        parse_datetime(text)


def test_parse_date_accepts_date_or_datetime() -> None:
    assert parse_date("2024-03-01") == dt.date(2024, 3, 1)
    assert parse_date("2024-03-01 18:30") == dt.date(2024, 3, 1)


def test_read_datetime_reprompts_until_valid() -> None:
    input_fn, prompts = _scripted(["nope", "2024-03-01 10:00"])
    printed: list[str] = []

    value = read_datetime("When? ", attempts=5, input_fn=input_fn, output=printed.append)

    assert value == dt.datetime(2024, 3, 1, 10, 0)
    assert prompts == ["When? ", "When? "]
    assert printed == [INVALID_DATETIME_MESSAGE]


def test_read_int_gives_up_after_configured_attempts() -> None:
    input_fn, prompts = _scripted(["a", "b", "c", "4"])
    printed: list[str] = []

    with pytest.raises(ValueError):
        read_int("How long? ", attempts=3, input_fn=input_fn, output=printed.append)

    assert len(prompts) == 3
    assert set(printed) == {INVALID_INTEGER_MESSAGE}


def test_read_int_parses_integer() -> None:
    input_fn, _ = _scripted([" 45 "])
    assert read_int("How long? ", input_fn=input_fn, output=lambda _: None) == 45


def test_read_date_propagates_eof_without_retrying() -> None:
    input_fn, prompts = _scripted([])

    with pytest.raises(EOFError):
        read_date("Day? ", attempts=5, input_fn=input_fn, output=lambda _: None)
    assert len(prompts) == 1


@pytest.mark.parametrize("text", ["2024-3-1 9:5", "2024-03-01 9:05", "2024-03-01  09:05"])
def test_parse_datetime_requires_zero_padded_fields(text: str) -> None:
    with pytest.raises(ValueError):
        parse_datetime(text)


def test_parse_date_rejects_unpadded_date() -> None:
    with pytest.raises(ValueError):
        parse_date("2024-3-1")


@pytest.mark.parametrize("text, expected", [("90", 90), ("-5", -5), ("+15", 15)])
def test_parse_int_accepts_signed_digits(text: str, expected: int) -> None:
    assert parse_int(text) == expected


@pytest.mark.parametrize("text", ["1_000", "1.5", "", "٣"])
def test_parse_int_rejects_non_plain_integers(text: str) -> None:
    with pytest.raises(ValueError):
        parse_int(text)


def test_rejected_input_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    input_fn, _ = _scripted(["soon", "2024-03-01 10:00"])

    with caplog.at_level("DEBUG", logger="apptbook.prompts"):
        read_datetime("When? ", input_fn=input_fn, output=lambda _: None)

    assert "Input attempt 1 rejected" in caplog.text
