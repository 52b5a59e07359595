"""Timestamp value type shared by every format."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from ts_cli.utils.time_helpers import (
    EPOCH,
    NANOS_PER_MILLI,
    NANOS_PER_SECOND,
    local_offset,
    now_nanos,
)

# One day inside datetime's range on both ends, so the wall clock at any
# UTC offset is still a valid datetime.
MIN_SECONDS = (datetime(1, 1, 2, tzinfo=timezone.utc) - EPOCH) // timedelta(seconds=1)
MAX_SECONDS = (datetime(9999, 12, 31, tzinfo=timezone.utc) - EPOCH) // timedelta(seconds=1)


@dataclass(frozen=True, order=True)
class Timestamp:
    """An absolute instant with nanosecond resolution.

    ``offset`` only affects how the instant is rendered; two timestamps are
    equal when they name the same instant, whatever their offsets.
    """

    seconds: int
    nanos: int = 0
    offset: int = field(default=0, compare=False)

    def __post_init__(self):
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos must be in [0, {NANOS_PER_SECOND}), got {self.nanos}")
        if not MIN_SECONDS <= self.seconds < MAX_SECONDS:
            raise ValueError("timestamp out of supported range (years 1-9999)")
        if abs(self.offset) >= 86400:
            raise ValueError(f"UTC offset out of range: {self.offset}s")

    @classmethod
    def from_unix_nanos(cls, nanos: int, offset: int = 0) -> "Timestamp":
        seconds, remainder = divmod(nanos, NANOS_PER_SECOND)
        return cls(seconds, remainder, offset)

    @classmethod
    def from_unix_millis(cls, millis: int, offset: int = 0) -> "Timestamp":
        return cls.from_unix_nanos(millis * NANOS_PER_MILLI, offset)

    @classmethod
    def from_datetime(cls, dt: datetime, nanos: int = 0) -> "Timestamp":
        """Build from an aware datetime whose sub-second part is ``nanos``.

        The datetime's own microseconds are ignored.
        """
        if dt.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")
        seconds = (dt.replace(microsecond=0) - EPOCH) // timedelta(seconds=1)
        return cls(seconds, nanos, int(dt.utcoffset().total_seconds()))

    @classmethod
    def now(cls) -> "Timestamp":
        """Current time, carrying the host's local offset."""
        seconds, remainder = divmod(now_nanos(), NANOS_PER_SECOND)
        return cls(seconds, remainder, local_offset(seconds))

    @property
    def unix_nanos(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanos

    @property
    def unix_millis(self) -> int:
        """Milliseconds since the epoch, floored."""
        return self.unix_nanos // NANOS_PER_MILLI

    def with_offset(self, offset: int) -> "Timestamp":
        return Timestamp(self.seconds, self.nanos, offset)

    def local(self) -> "Timestamp":
        """The same instant, rendered in the host's local zone."""
        return self.with_offset(local_offset(self.seconds))

    def to_datetime(self) -> datetime:
        """Wall clock at ``offset`` as an aware datetime (whole seconds)."""
        tz = timezone(timedelta(seconds=self.offset))
        return (EPOCH + timedelta(seconds=self.seconds)).astimezone(tz)

    def nanos_since(self, other: "Timestamp") -> int:
        return self.unix_nanos - other.unix_nanos


def millis_between(start: Timestamp, end: Timestamp) -> int:
    """Whole milliseconds from ``start`` to ``end``, truncated toward zero."""
    delta = end.nanos_since(start)
    millis = abs(delta) // NANOS_PER_MILLI
    return -millis if delta < 0 else millis
