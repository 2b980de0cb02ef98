"""Unit tests for the feed parser."""

import pytest

from src.feed.constants import HOST_SUFFIX
from src.feed.models import LatencyStatus
from src.feed.parser import (
    FeedLineError,
    FeedParser,
    fix_host_suffix,
    is_metadata_line,
    parse_feed,
    parse_int,
)
from tests.helpers.feeds import FEED_HEADER, SAMPLE_FEED


SCENARIO_LINE = "a.example,1.2.3.4,_,50,10000000,US,US,9,_,_,_,_,_,_,_"


class TestFixHostSuffix:
    """Tests for canonical host suffix handling."""

    def test_appends_missing_suffix(self) -> None:
        """Bare hosts get the canonical suffix."""
        assert fix_host_suffix("a.example") == "a.example.opengw.net"

    def test_keeps_existing_suffix(self) -> None:
        """Already suffixed hosts are unchanged."""
        assert fix_host_suffix("vpn123.opengw.net") == "vpn123.opengw.net"

    def test_suffix_check_ignores_case(self) -> None:
        """A differently cased suffix is not duplicated."""
        assert fix_host_suffix("VPN1.OPENGW.NET") == "VPN1.OPENGW.NET"

    @pytest.mark.parametrize("host", ["a", "a.example", "b.opengw.net", "x.OpenGW.net"])
    def test_idempotent(self, host: str) -> None:
        """Applying the fix twice equals applying it once."""
        once = fix_host_suffix(host)
        assert fix_host_suffix(once) == once


class TestParseInt:
    """Tests for tolerant integer parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("42", 42),
            (" 42 ", 42),
            ("-1", -1),
            ("+7", 7),
            ("", 0),
            ("_", 0),
            ("12.5", 0),
            ("1_000", 0),
            (None, 0),
        ],
    )
    def test_values(self, raw: str | None, expected: int) -> None:
        """Only plain base-10 integers are accepted."""
        assert parse_int(raw) == expected

    def test_custom_default(self) -> None:
        """The fallback value is configurable."""
        assert parse_int("n/a", default=-5) == -5

    @pytest.mark.parametrize(
        "raw",
        ["9" * 400, "9223372036854775808", "-9223372036854775809"],
    )
    def test_out_of_64_bit_range(self, raw: str) -> None:
        """Values that do not fit a signed 64-bit integer fall back."""
        assert parse_int(raw) == 0

    def test_64_bit_bounds_accepted(self) -> None:
        """The signed 64-bit extremes still parse."""
        assert parse_int("9223372036854775807") == 2**63 - 1
        assert parse_int("-9223372036854775808") == -(2**63)
        assert parse_int("0009223372036854775807") == 2**63 - 1

    def test_custom_range(self) -> None:
        """Values outside an explicit range fall back."""
        assert parse_int("2147483648", minimum=-(2**31), maximum=2**31 - 1) == 0
        assert parse_int("2147483647", minimum=-(2**31), maximum=2**31 - 1) == 2**31 - 1


class TestMetadataLines:
    """Tests for header and comment detection."""

    @pytest.mark.parametrize(
        "line",
        ["*vpn_servers", "#HostName,IP", "HostName,IP,Score", "xx,HOSTNAME,yy", "*"],
    )
    def test_metadata(self, line: str) -> None:
        """Comment markers and the header token mark non-data lines."""
        assert is_metadata_line(line) is True

    def test_data_line(self) -> None:
        """Regular records are data lines."""
        assert is_metadata_line(SCENARIO_LINE) is False


class TestParseLine:
    """Tests for single-line parsing."""

    def test_scenario_line(self) -> None:
        """The reference line parses with the suffix appended."""
        record = FeedParser().parse_line(SCENARIO_LINE)

        assert record.host_identifier == "a.example" + HOST_SUFFIX
        assert record.address == "1.2.3.4"
        assert record.latency == 50
        assert record.latency_status == LatencyStatus.MEASURED
        assert record.throughput == 10_000_000
        assert record.region_name == "US"
        assert record.region_code == "US"
        assert record.load == 9
        assert record.effective_capacity == 1_000_000

    def test_fields_are_trimmed(self) -> None:
        """Whitespace around fields is removed."""
        record = FeedParser().parse_line(
            "  host1 , 10.0.0.1 ,x, 30 , 100 , Japan , jp , 2 "
        )

        assert record.host_identifier == "host1.opengw.net"
        assert record.address == "10.0.0.1"
        assert record.region_name == "Japan"
        assert record.region_code == "jp"
        assert record.latency == 30
        assert record.load == 2

    def test_too_few_fields(self) -> None:
        """Fewer than eight fields is rejected."""
        with pytest.raises(FeedLineError) as exc_info:
            FeedParser().parse_line("h,1.1.1.1,x,10,100,JP,JP")

        assert exc_info.value.reason == "insufficient_columns"

    def test_empty_host(self) -> None:
        """A blank host field is rejected."""
        with pytest.raises(FeedLineError) as exc_info:
            FeedParser().parse_line(" ,1.1.1.1,x,10,100,Japan,JP,0")

        assert exc_info.value.reason == "empty_host"

    def test_empty_address(self) -> None:
        """A blank address field is rejected."""
        with pytest.raises(FeedLineError) as exc_info:
            FeedParser().parse_line("h, ,x,10,100,Japan,JP,0")

        assert exc_info.value.reason == "empty_address"

    def test_unparseable_numbers_default_to_zero(self) -> None:
        """Non-numeric latency, throughput and load become 0."""
        record = FeedParser().parse_line("h,1.1.1.1,x,fast,lots,Japan,JP,many")

        assert record.latency == 0
        assert record.latency_status == LatencyStatus.UNKNOWN
        assert record.throughput == 0
        assert record.load == 0

    def test_negative_latency_is_unreachable(self) -> None:
        """The -1 sentinel is kept and classified as unreachable."""
        record = FeedParser().parse_line("h,1.1.1.1,x,-1,100,Japan,JP,0")

        assert record.latency == -1
        assert record.latency_status == LatencyStatus.UNREACHABLE
        assert record.is_reachable is False

    def test_negative_counts_clamped(self) -> None:
        """Negative throughput and load cannot produce negative capacity."""
        record = FeedParser().parse_line("h,1.1.1.1,x,10,-100,Japan,JP,-3")

        assert record.throughput == 0
        assert record.load == 0

    def test_oversized_numbers_default_to_zero(self) -> None:
        """Throughput, load and latency too large for their range become 0."""
        huge = "9" * 400
        record = FeedParser().parse_line(
            f"h,1.1.1.1,x,{2**31},{huge},Japan,JP,{huge}"
        )

        assert record.throughput == 0
        assert record.load == 0
        assert record.latency == 0
        assert record.latency_status == LatencyStatus.UNKNOWN

    def test_custom_suffix(self) -> None:
        """The parser honours a configured suffix."""
        record = FeedParser(host_suffix=".example.org").parse_line(
            "h,1.1.1.1,x,10,100,Japan,JP,0"
        )

        assert record.host_identifier == "h.example.org"


class TestParse:
    """Tests for whole-feed parsing."""

    def test_empty_input(self) -> None:
        """Empty text yields no records."""
        assert parse_feed("") == []
        assert FeedParser().parse("").lines_total == 0

    def test_blank_lines_skipped(self) -> None:
        """Whitespace-only lines are not counted."""
        result = FeedParser().parse("\n   \n\t\n")

        assert result.records == []
        assert result.lines_total == 0

    def test_sample_feed_accounting(self) -> None:
        """Metadata is skipped, malformed lines rejected, the rest kept."""
        result = FeedParser().parse(SAMPLE_FEED)

        assert result.lines_total == 9
        assert result.lines_skipped == 3
        assert result.lines_rejected == 1
        assert [r.host_identifier for r in result.records] == [
            "alpha.opengw.net",
            "beta.opengw.net",
            "gamma.opengw.net",
            "delta.opengw.net",
            "epsilon.opengw.net",
        ]

    def test_parser_does_not_filter(self) -> None:
        """Excluded regions and unreachable hosts are left to the filter."""
        records = parse_feed(SAMPLE_FEED)
        by_host = {r.host_identifier: r for r in records}

        assert by_host["delta.opengw.net"].region_code == "IR"
        assert by_host["epsilon.opengw.net"].latency == -1

    def test_bad_line_does_not_abort_batch(self) -> None:
        """Records after a malformed line are still parsed."""
        text = FEED_HEADER + "bad\n" + ",,,,,,,\n" + SCENARIO_LINE + "\n"

        records = parse_feed(text)

        assert len(records) == 1
        assert records[0].host_identifier == "a.example.opengw.net"

    def test_windows_line_endings(self) -> None:
        """CRLF input parses the same as LF input."""
        assert parse_feed(SAMPLE_FEED.replace("\n", "\r\n")) == parse_feed(SAMPLE_FEED)
