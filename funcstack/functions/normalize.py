"""Normalize size and duration props into template units."""

import re
from typing import Optional, Union

from funcstack.errors import FunctionConfigurationError

DEFAULT_MEMORY_MB = 1024
DEFAULT_DISK_MB = 512
DEFAULT_TIMEOUT_SECONDS = 10
MAX_TIMEOUT_SECONDS = 900

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(MB|GB)\s*$", re.IGNORECASE)
_DURATION_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(second|minute|hour|day)s?\s*$", re.IGNORECASE
)

_DURATION_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}

# log_retention name -> days
RETENTION_DAYS = {
    "one_day": 1,
    "three_days": 3,
    "five_days": 5,
    "one_week": 7,
    "two_weeks": 14,
    "one_month": 30,
    "two_months": 60,
    "three_months": 90,
    "four_months": 120,
    "five_months": 150,
    "six_months": 180,
    "one_year": 365,
    "thirteen_months": 400,
    "eighteen_months": 545,
    "two_years": 731,
    "five_years": 1827,
    "ten_years": 3653,
    "infinite": None,
}


def to_mebibytes(size: Union[int, str]) -> int:
    """Parse "512 MB" / "2 GB" into MB; ints are taken as MB."""
    if isinstance(size, int):
        return size
    match = _SIZE_RE.match(size)
    if not match:
        raise FunctionConfigurationError(f"Invalid size: '{size}' (expected e.g. '512 MB' or '2 GB')")
    value = float(match.group(1))
    if match.group(2).upper() == "GB":
        value *= 1024
    return int(value)


def to_seconds(duration: Union[int, str]) -> int:
    """Parse "30 seconds" / "5 minutes" into seconds; ints are taken as seconds."""
    if isinstance(duration, int):
        return duration
    match = _DURATION_RE.match(duration)
    if not match:
        raise FunctionConfigurationError(
            f"Invalid duration: '{duration}' (expected e.g. '30 seconds' or '5 minutes')"
        )
    return int(float(match.group(1)) * _DURATION_SECONDS[match.group(2).lower()])


def normalize_memory_size(memory_size: Optional[Union[int, str]]) -> int:
    if memory_size is None:
        return DEFAULT_MEMORY_MB
    return to_mebibytes(memory_size)


def normalize_disk_size(disk_size: Optional[Union[int, str]]) -> int:
    if disk_size is None:
        return DEFAULT_DISK_MB
    return to_mebibytes(disk_size)


def normalize_timeout(timeout: Optional[Union[int, str]]) -> int:
    if timeout is None:
        return DEFAULT_TIMEOUT_SECONDS
    return to_seconds(timeout)


def normalize_log_retention(log_retention: Optional[str]) -> Optional[int]:
    """Days for a retention name; None for unset or infinite."""
    if log_retention is None:
        return None
    key = log_retention.lower()
    if key not in RETENTION_DAYS:
        raise FunctionConfigurationError(f"Invalid log retention: '{log_retention}'")
    return RETENTION_DAYS[key]
