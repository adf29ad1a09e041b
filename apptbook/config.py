from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    # How far ahead (in minutes) find_next_available_slot probes before giving up.
    slot_search_horizon_minutes: int = 7 * 24 * 60

    # How many times an interactive prompt is shown before invalid input aborts the session.
    input_retry_attempts: int = 5

    log_level: str = "INFO"
    seed_sample_data: bool = True


def _parse_positive_int(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected an integer.") from e

    if value < 1:
        raise RuntimeError(f"{name} must be >= 1")
    return value


def _parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise RuntimeError(f"Invalid LOG_LEVEL value: {raw!r}. Expected one of {', '.join(_LOG_LEVELS)}.")
    return level


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Prefer .env in repo root; dotenv_path allows overriding in tests.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    seed_raw = os.getenv("SEED_SAMPLE_DATA", "1").strip().lower()
    seed_sample_data = seed_raw not in {"0", "false", "no"}

    return Settings(
        slot_search_horizon_minutes=_parse_positive_int("SLOT_SEARCH_HORIZON_MINUTES", "10080"),
        input_retry_attempts=_parse_positive_int("INPUT_RETRY_ATTEMPTS", "5"),
        log_level=_parse_log_level(os.getenv("LOG_LEVEL", "INFO")),
        seed_sample_data=seed_sample_data,
    )
