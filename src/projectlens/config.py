"""Settings read from the environment (and a ``.env`` file, when present)."""

import os
from dataclasses import dataclass
from datetime import datetime, time
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv
from loguru import logger

ENV_PREFIX = "PROJECTLENS_"

T = TypeVar("T")


@dataclass
class Settings:
    """Runtime settings. CLI options take precedence over these."""

    repo_path: str = "."
    log_level: str = "INFO"
    work_day_start: time = time(9, 0)
    work_day_end: time = time(17, 0)
    hourly_rate: float = 0.0
    hours_per_day: float = 8.0
    limit: int = 5


def parse_time(text: str) -> time:
    """Parse ``HH:MM``."""
    try:
        return datetime.strptime(text.strip(), "%H:%M").time()
    except ValueError as cause:
        raise ValueError(f"Time [{text}] is not valid; expected HH:MM") from cause


def parse_log_level(text: str) -> str:
    """Upper-cased loguru level name, e.g. ``DEBUG``."""
    name = text.strip().upper()
    logger.level(name)
    return name


def _read(name: str, convert: Callable[[str], T], default: T) -> T:
    variable = f"{ENV_PREFIX}{name}"
    value = os.getenv(variable)
    if value is None or not value.strip():
        return default
    try:
        return convert(value.strip())
    except ValueError as cause:
        raise ValueError(f"{variable} [{value}] is not valid") from cause


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Load settings from ``PROJECTLENS_*`` environment variables."""
    load_dotenv(dotenv_path)

    defaults = Settings()
    settings = Settings(
        repo_path=_read("REPO_PATH", str, defaults.repo_path),
        log_level=_read("LOG_LEVEL", parse_log_level, defaults.log_level),
        work_day_start=_read("WORK_DAY_START", parse_time, defaults.work_day_start),
        work_day_end=_read("WORK_DAY_END", parse_time, defaults.work_day_end),
        hourly_rate=_read("HOURLY_RATE", float, defaults.hourly_rate),
        hours_per_day=_read("HOURS_PER_DAY", float, defaults.hours_per_day),
        limit=_read("LIMIT", int, defaults.limit),
    )

    if settings.work_day_start >= settings.work_day_end:
        raise ValueError(
            f"{ENV_PREFIX}WORK_DAY_START [{settings.work_day_start}] must be before"
            f" {ENV_PREFIX}WORK_DAY_END [{settings.work_day_end}]"
        )

    return settings
