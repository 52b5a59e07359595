"""Tests for the timestamp format registry."""

import pytest

from ts_cli.errors import ParseError, UnknownFormatError
from ts_cli.formats import (
    FORMATS,
    available_formats,
    describe_instant,
    format_db,
    format_ms,
    format_pb,
    format_rfc3339,
    get_format,
    get_formatter,
    get_parser,
    parse_db,
    parse_ms,
    parse_pb,
    parse_rfc3339,
)
from ts_cli.timestamp import Timestamp

NEW_YEAR_2021 = 1609459200


class TestRegistry:
    """Test format lookups."""

    def test_available_formats(self):
        """Test the registered names and their order."""
        assert available_formats() == ["rfc3339", "db", "pb", "ms"]

    def test_get_format(self):
        """Test a registered format resolves to its functions."""
        fmt = get_format("db")
        assert fmt.name == "db"
        assert fmt.parse is parse_db
        assert fmt.format is format_db

    def test_get_parser_unknown(self):
        """Test unknown input formats are rejected, not defaulted."""
        with pytest.raises(UnknownFormatError) as exc_info:
            get_parser("xml")
        assert exc_info.value.role == "input"
        assert exc_info.value.name == "xml"
        assert "rfc3339" in exc_info.value.internal_details

    def test_get_formatter_unknown(self):
        """Test unknown output formats are rejected."""
        with pytest.raises(UnknownFormatError) as exc_info:
            get_formatter("3339")
        assert exc_info.value.role == "output"

    def test_lookup_is_case_sensitive(self):
        """Test format names must match exactly."""
        with pytest.raises(UnknownFormatError):
            get_format("RFC3339")

    def test_every_format_has_description(self):
        """Test registry entries are complete."""
        for name, fmt in FORMATS.items():
            assert fmt.name == name
            assert fmt.description


class TestRFC3339:
    """Test the rfc3339 format."""

    def test_parse_utc(self):
        """Test parsing a Zulu timestamp."""
        ts = parse_rfc3339("2021-01-01T00:00:00Z")
        assert ts == Timestamp(NEW_YEAR_2021)
        assert ts.offset == 0

    def test_parse_offset(self):
        """Test parsing keeps the instant and remembers the offset."""
        ts = parse_rfc3339("2021-01-01T01:00:00+01:00")
        assert ts == Timestamp(NEW_YEAR_2021)
        assert ts.offset == 3600

    def test_parse_negative_offset(self):
        """Test parsing a western offset."""
        ts = parse_rfc3339("2020-12-31T19:00:00-05:00")
        assert ts == Timestamp(NEW_YEAR_2021)
        assert ts.offset == -18000

    def test_parse_fraction(self):
        """Test fractional seconds are kept to the nanosecond."""
        assert parse_rfc3339("2021-01-01T00:00:00.5Z").nanos == 500_000_000
        assert parse_rfc3339("2021-01-01T00:00:00.123456789Z").nanos == 123_456_789

    @pytest.mark.parametrize(
        "text",
        [
            "not-a-timestamp",
            "",
            "2021-01-01 00:00:00Z",
            "2021-01-01T00:00:00",
            "2021-01-01T00:00:00+0100",
            "2021-01-01T00:00:00+24:00",
            "2021-01-01T00:00:00+01:60",
            "2021-01-01t00:00:00z",
            "2021-13-01T00:00:00Z",
            "2021-02-30T00:00:00Z",
            "2021-01-01T00:00:60Z",
            "2021-01-01T00:00:00.Z",
            "2021-01-01T00:00:00.1234567890Z",
            " 2021-01-01T00:00:00Z",
            "0001-01-01T00:00:00Z",
        ],
    )
    def test_parse_invalid(self, text):
        """Test any deviation from the grammar fails."""
        with pytest.raises(ParseError) as exc_info:
            parse_rfc3339(text)
        assert exc_info.value.raw == text
        assert exc_info.value.format_name == "rfc3339"
        assert exc_info.value.reason

    def test_format_utc(self):
        """Test a zero offset renders as Z."""
        assert format_rfc3339(Timestamp(NEW_YEAR_2021)) == "2021-01-01T00:00:00Z"

    def test_format_offset(self):
        """Test non-zero offsets render with a colon."""
        assert format_rfc3339(Timestamp(NEW_YEAR_2021, offset=19800)) == "2021-01-01T05:30:00+05:30"
        assert format_rfc3339(Timestamp(NEW_YEAR_2021, offset=-18000)) == "2020-12-31T19:00:00-05:00"

    def test_format_drops_fraction(self):
        """Test fractional seconds are not rendered."""
        assert format_rfc3339(Timestamp(NEW_YEAR_2021, 999_000_000)) == "2021-01-01T00:00:00Z"

    def test_format_pads_early_years(self):
        """Test years below 1000 keep four digits."""
        ts = parse_rfc3339("0099-03-04T05:06:07Z")
        assert format_rfc3339(ts) == "0099-03-04T05:06:07Z"


class TestDB:
    """Test the db format."""

    def test_parse(self):
        """Test parsing the DB layout."""
        ts = parse_db("2021-01-01 00:00:00.000 +0000")
        assert ts == Timestamp(NEW_YEAR_2021)

    def test_parse_offset_and_millis(self):
        """Test milliseconds and a half-hour offset."""
        ts = parse_db("2021-01-01 05:30:00.250 +0530")
        assert ts == Timestamp(NEW_YEAR_2021, 250_000_000)
        assert ts.offset == 19800

    @pytest.mark.parametrize(
        "text",
        [
            "2021-01-01 00:00:00 +0000",
            "2021-01-01 00:00:00.12 +0000",
            "2021-01-01 00:00:00.1234 +0000",
            "2021-01-01 00:00:00.123 +00:00",
            "2021-01-01 00:00:00.123 Z",
            "2021-01-01T00:00:00.123 +0000",
            "2021-01-01 00:00:00.123 +2500",
            "2021-01-32 00:00:00.123 +0000",
        ],
    )
    def test_parse_invalid(self, text):
        """Test near misses of the DB layout fail."""
        with pytest.raises(ParseError) as exc_info:
            parse_db(text)
        assert exc_info.value.format_name == "db"

    def test_format(self):
        """Test rendering the DB layout."""
        assert format_db(Timestamp(NEW_YEAR_2021)) == "2021-01-01 00:00:00.000 +0000"
        assert format_db(Timestamp(NEW_YEAR_2021, 250_000_000, 19800)) == "2021-01-01 05:30:00.250 +0530"

    def test_format_truncates_millis(self):
        """Test sub-millisecond digits are dropped, not rounded."""
        assert format_db(Timestamp(NEW_YEAR_2021, 999_999_999)) == "2021-01-01 00:00:00.999 +0000"


class TestMS:
    """Test the ms format."""

    def test_parse(self, utc_zone):
        """Test parsing Unix milliseconds."""
        ts = parse_ms("1609459200000")
        assert ts == Timestamp(NEW_YEAR_2021)
        assert ts.offset == 0

    def test_parse_uses_local_zone(self, est_zone):
        """Test parsed milliseconds render in the host's zone."""
        ts = parse_ms("1609459200000")
        assert ts.offset == -18000
        assert format_db(ts) == "2020-12-31 19:00:00.000 -0500"

    def test_parse_signed(self, utc_zone):
        """Test explicit signs."""
        assert parse_ms("+1000") == Timestamp(1)
        assert parse_ms("-1") == Timestamp(-1, 999_000_000)

    @pytest.mark.parametrize(
        "text",
        ["", "1.5", " 1", "1 ", "1_000", "0x10", "1e3", "abc", "9223372036854775808"],
    )
    def test_parse_invalid(self, text):
        """Test anything but a plain base-10 integer fails."""
        with pytest.raises(ParseError) as exc_info:
            parse_ms(text)
        assert exc_info.value.format_name == "ms"

    def test_parse_out_of_range(self):
        """Test a valid int64 outside the supported years fails."""
        with pytest.raises(ParseError):
            parse_ms("9223372036854775807")

    def test_format(self):
        """Test rendering Unix milliseconds."""
        assert format_ms(Timestamp(NEW_YEAR_2021, 123_456_789)) == "1609459200123"

    def test_format_floors_before_epoch(self):
        """Test sub-millisecond precision floors toward negative infinity."""
        assert format_ms(Timestamp.from_unix_nanos(-1)) == "-1"
        assert format_ms(Timestamp.from_unix_nanos(-1_000_000)) == "-1"


class TestPB:
    """Test the pb format."""

    def test_parse_reads_db_layout(self):
        """Test pb parses the DB layout."""
        assert parse_pb("2021-01-01 00:00:00.000 +0000") == Timestamp(NEW_YEAR_2021)

    def test_parse_error_names_pb(self):
        """Test pb parse errors report the pb format."""
        with pytest.raises(ParseError) as exc_info:
            parse_pb("2021-01-01T00:00:00Z")
        assert exc_info.value.format_name == "pb"

    def test_format(self, utc_zone):
        """Test the four-line breakdown."""
        assert format_pb(Timestamp(NEW_YEAR_2021, 500_000_000)) == (
            "UTC Timestamp 2021-01-01 00:00:00.5 +0000 UTC\n"
            "Local Timestamp 2021-01-01 00:00:00.5 +0000 UTC\n"
            "Seconds 1609459200\n"
            "Nanos 500000000"
        )

    def test_format_local_zone(self, est_zone):
        """Test the local line follows the host's zone."""
        lines = format_pb(Timestamp(NEW_YEAR_2021, offset=3600)).splitlines()
        assert lines[0] == "UTC Timestamp 2021-01-01 00:00:00 +0000 UTC"
        assert lines[1] == "Local Timestamp 2020-12-31 19:00:00 -0500 EST"

    def test_format_before_epoch(self, utc_zone):
        """Test nanos stay non-negative before the epoch."""
        lines = format_pb(Timestamp.from_unix_nanos(-1)).splitlines()
        assert lines[0] == "UTC Timestamp 1969-12-31 23:59:59.999999999 +0000 UTC"
        assert lines[2] == "Seconds -1"
        assert lines[3] == "Nanos 999999999"

    def test_describe_instant(self):
        """Test instant rendering trims the fraction."""
        assert describe_instant(Timestamp(0, 120_000_000), "UTC") == "1970-01-01 00:00:00.12 +0000 UTC"
        assert describe_instant(Timestamp(0), "") == "1970-01-01 00:00:00 +0000"


class TestRoundTrip:
    """Test parse(format(t)) == t within each format's precision."""

    @pytest.mark.parametrize(
        "name,ts",
        [
            ("rfc3339", Timestamp(NEW_YEAR_2021, offset=-12600)),
            ("rfc3339", Timestamp(-86400 * 365)),
            ("db", Timestamp(NEW_YEAR_2021, 7_000_000, 20700)),
            ("db", Timestamp(-1, 999_000_000)),
            ("ms", Timestamp(NEW_YEAR_2021, 123_000_000)),
            ("ms", Timestamp(-1, 999_000_000)),
        ],
    )
    def test_round_trip(self, utc_zone, name, ts):
        """Test formatting then parsing returns the same instant."""
        fmt = get_format(name)
        assert fmt.parse(fmt.format(ts)) == ts

    @pytest.mark.parametrize(
        "name,text",
        [
            ("rfc3339", "2021-06-15T12:34:56+02:00"),
            ("db", "2021-06-15 12:34:56.789 -0330"),
            ("ms", "1623760496789"),
        ],
    )
    def test_same_format_is_identity(self, utc_zone, name, text):
        """Test converting a string to its own format leaves it unchanged."""
        fmt = get_format(name)
        assert fmt.format(fmt.parse(text)) == text
