"""Timestamp format registry.

Each format name maps to a parse function (text -> Timestamp, may raise
ParseError) and a format function (Timestamp -> text, never fails). Adding a
format means adding one entry to FORMATS.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, NamedTuple

from google.protobuf import timestamp_pb2

from ts_cli.errors import ParseError, UnknownFormatError
from ts_cli.timestamp import Timestamp
from ts_cli.utils.time_helpers import NANOS_PER_MILLI, local_offset, local_zone_name

ParseFunc = Callable[[str], Timestamp]
FormatFunc = Callable[[Timestamp], str]

RFC3339 = "rfc3339"
DB = "db"
PB = "pb"
MS = "ms"

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?"
    r"(?:(Z)|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)

# Default display of "timestamp with time zone" columns in DBeaver
_DB_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})\.(\d{3}) ([+-])(\d{2})(\d{2})",
    re.ASCII,
)

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class TimestampFormat(NamedTuple):
    """A registered format: how to read it, how to write it."""

    name: str
    parse: ParseFunc
    format: FormatFunc
    description: str


# Rendering helpers


def _offset_text(offset: int, colon: bool) -> str:
    sign = "-" if offset < 0 else "+"
    hours, minutes = divmod(abs(offset) // 60, 60)
    sep = ":" if colon else ""
    return f"{sign}{hours:02d}{sep}{minutes:02d}"


def _wall_clock(dt: datetime, date_sep: str) -> str:
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}{date_sep}"
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )


def describe_instant(ts: Timestamp, zone: str) -> str:
    """Render like '2021-01-01 00:00:00.5 +0000 UTC'.

    The fraction keeps only significant digits and is left out when zero.
    """
    text = _wall_clock(ts.to_datetime(), " ")
    if ts.nanos:
        text += "." + f"{ts.nanos:09d}".rstrip("0")
    return f"{text} {_offset_text(ts.offset, colon=False)} {zone}".rstrip()


# Parsing helpers


def _build(raw: str, name: str, fields, nanos: int, offset: int) -> Timestamp:
    """Assemble a Timestamp from matched fields, mapping range errors."""
    year, month, day, hour, minute, second = (int(f) for f in fields)
    try:
        tz = timezone(timedelta(seconds=offset))
        dt = datetime(year, month, day, hour, minute, second, tzinfo=tz)
        return Timestamp.from_datetime(dt, nanos)
    except (ValueError, OverflowError) as e:
        raise ParseError(raw, name, str(e), wrapped=e)


def _offset_seconds(sign: str, hours: str, minutes: str) -> int:
    offset = int(hours) * 3600 + int(minutes) * 60
    return -offset if sign == "-" else offset


def parse_rfc3339(text: str) -> Timestamp:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ParseError(text, RFC3339, "expected YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM)")
    fraction, zulu, sign, off_hours, off_minutes = match.group(7, 8, 9, 10, 11)
    if zulu:
        offset = 0
    else:
        if int(off_hours) >= 24 or int(off_minutes) >= 60:
            raise ParseError(text, RFC3339, f"time zone offset out of range: {sign}{off_hours}:{off_minutes}")
        offset = _offset_seconds(sign, off_hours, off_minutes)
    nanos = int(fraction.ljust(9, "0")) if fraction else 0
    return _build(text, RFC3339, match.group(1, 2, 3, 4, 5, 6), nanos, offset)


def format_rfc3339(ts: Timestamp) -> str:
    zone = "Z" if ts.offset == 0 else _offset_text(ts.offset, colon=True)
    return _wall_clock(ts.to_datetime(), "T") + zone


def _parse_db_layout(text: str, name: str) -> Timestamp:
    match = _DB_RE.fullmatch(text)
    if match is None:
        raise ParseError(text, name, "expected YYYY-MM-DD HH:MM:SS.mmm +HHMM")
    millis, sign, off_hours, off_minutes = match.group(7, 8, 9, 10)
    if int(off_hours) >= 24 or int(off_minutes) >= 60:
        raise ParseError(text, name, f"time zone offset out of range: {sign}{off_hours}{off_minutes}")
    offset = _offset_seconds(sign, off_hours, off_minutes)
    return _build(text, name, match.group(1, 2, 3, 4, 5, 6), int(millis) * NANOS_PER_MILLI, offset)


def parse_db(text: str) -> Timestamp:
    return _parse_db_layout(text, DB)


def format_db(ts: Timestamp) -> str:
    millis = ts.nanos // NANOS_PER_MILLI
    return f"{_wall_clock(ts.to_datetime(), ' ')}.{millis:03d} {_offset_text(ts.offset, colon=False)}"


def parse_pb(text: str) -> Timestamp:
    """The pb format reads the db layout; only its rendering differs."""
    return _parse_db_layout(text, PB)


def format_pb(ts: Timestamp) -> str:
    """Break a timestamp into its protobuf seconds/nanos components.

    Produces four lines: the instant in UTC, the same instant in the host's
    local zone, whole seconds since the epoch and the nanosecond remainder.
    """
    message = timestamp_pb2.Timestamp()
    message.FromNanoseconds(ts.unix_nanos)
    utc = Timestamp(message.seconds, message.nanos)
    local = utc.with_offset(local_offset(utc.seconds))
    return "\n".join(
        [
            f"UTC Timestamp {describe_instant(utc, 'UTC')}",
            f"Local Timestamp {describe_instant(local, local_zone_name(utc.seconds))}",
            f"Seconds {message.seconds}",
            f"Nanos {message.nanos}",
        ]
    )


def parse_ms(text: str) -> Timestamp:
    """Parse Unix milliseconds; the result renders in the host's local zone."""
    if _INT_RE.fullmatch(text) is None:
        raise ParseError(text, MS, "expected a base-10 integer")
    millis = int(text)
    if not _INT64_MIN <= millis <= _INT64_MAX:
        raise ParseError(text, MS, "value out of range")
    try:
        return Timestamp.from_unix_millis(millis).local()
    except (ValueError, OverflowError, OSError) as e:
        raise ParseError(text, MS, str(e), wrapped=e)


def format_ms(ts: Timestamp) -> str:
    return str(ts.unix_millis)


FORMATS: Dict[str, TimestampFormat] = {
    fmt.name: fmt
    for fmt in (
        TimestampFormat(RFC3339, parse_rfc3339, format_rfc3339, "RFC 3339 with UTC offset"),
        TimestampFormat(DB, parse_db, format_db, "DB style with milliseconds and numeric offset"),
        TimestampFormat(PB, parse_pb, format_pb, "Protobuf seconds/nanos breakdown (reads db style)"),
        TimestampFormat(MS, parse_ms, format_ms, "Milliseconds since the Unix epoch"),
    )
}


def available_formats() -> List[str]:
    """Registered format names, in registration order."""
    return list(FORMATS)


def get_format(name: str, role: str = "") -> TimestampFormat:
    """Look up a format by name.

    Args:
        name: Format name, e.g. 'rfc3339'
        role: 'input' or 'output', used in the error message

    Raises:
        UnknownFormatError: If no format is registered under ``name``
    """
    try:
        return FORMATS[name]
    except KeyError:
        raise UnknownFormatError(role or "timestamp", name, available_formats()) from None


def get_parser(name: str) -> ParseFunc:
    return get_format(name, "input").parse


def get_formatter(name: str) -> FormatFunc:
    return get_format(name, "output").format
