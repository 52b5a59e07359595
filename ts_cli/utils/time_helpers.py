"""Time and date utilities for the ts CLI.

Everything that depends on the host clock or the host's local timezone lives
here, so the rest of the package can stay pure.
"""

import time
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000


def now_nanos() -> int:
    """Sample the system clock as nanoseconds since the Unix epoch."""
    return time.time_ns()


def _local_datetime(seconds: int) -> datetime:
    return (EPOCH + timedelta(seconds=seconds)).astimezone()


def local_offset(seconds: int) -> int:
    """Return the host's UTC offset (seconds east of UTC) at an instant.

    Args:
        seconds: Whole seconds since the Unix epoch

    Returns:
        Offset in seconds, negative west of Greenwich
    """
    offset = _local_datetime(seconds).utcoffset()
    return int(offset.total_seconds())


def local_zone_name(seconds: int) -> str:
    """Return the host's zone abbreviation (e.g. 'CET') at an instant."""
    return _local_datetime(seconds).tzname() or ""
