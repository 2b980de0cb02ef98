"""Tolerant parser for the line-oriented candidate feed."""

import re

import structlog

from src.feed.constants import (
    COL_ADDRESS,
    COL_HOST,
    COL_LATENCY,
    COL_LOAD,
    COL_REGION_CODE,
    COL_REGION_NAME,
    COL_THROUGHPUT,
    COMMENT_MARKERS,
    FIELD_DELIMITER,
    HEADER_TOKEN,
    HOST_SUFFIX,
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    MIN_FIELD_COUNT,
)
from src.feed.models import CandidateRecord, LatencyStatus, ParseResult


logger = structlog.get_logger()

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
# Significant digits beyond this cannot fit in 64 bits
_MAX_SIGNIFICANT_DIGITS = 19


class FeedLineError(ValueError):
    """Raised when a single feed line cannot become a record."""

    def __init__(self, reason: str, line_index: int | None = None) -> None:
        """Initialize the error.

        Args:
            reason: Short machine-friendly reason.
            line_index: Index of the offending line, if known.
        """
        self.reason = reason
        self.line_index = line_index
        super().__init__(reason)


def fix_host_suffix(host: str, suffix: str = HOST_SUFFIX) -> str:
    """Append the canonical domain suffix unless it is already present.

    The check is case-insensitive, so applying this twice is a no-op.

    Args:
        host: Trimmed host name.
        suffix: Canonical domain suffix.

    Returns:
        Host name ending with ``suffix``.
    """
    if host.lower().endswith(suffix.lower()):
        return host
    return host + suffix


def parse_int(
    value: str | None,
    default: int = 0,
    minimum: int = INT64_MIN,
    maximum: int = INT64_MAX,
) -> int:
    """Parse a strict base-10 integer, falling back to ``default``.

    Args:
        value: Raw field text.
        default: Value used when the field is missing, not an integer or
            outside ``[minimum, maximum]``.
        minimum: Smallest accepted value.
        maximum: Largest accepted value.

    Returns:
        Parsed integer or ``default``.
    """
    if value is None:
        return default
    text = value.strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        return default
    if len(text.lstrip("+-").lstrip("0")) > _MAX_SIGNIFICANT_DIGITS:
        return default
    number = int(text)
    if not minimum <= number <= maximum:
        return default
    return number


def is_metadata_line(line: str) -> bool:
    """Check whether a line is a header or metadata line."""
    return line.startswith(COMMENT_MARKERS) or HEADER_TOKEN in line.lower()


class FeedParser:
    """Turns raw feed text into validated CandidateRecords.

    Parsing is fault-isolated per line: a line that fails for any reason is
    counted as rejected and the batch continues.
    """

    def __init__(self, host_suffix: str = HOST_SUFFIX) -> None:
        """Initialize the parser.

        Args:
            host_suffix: Canonical domain suffix for host identifiers.
        """
        self._host_suffix = host_suffix
        self._log = logger.bind(component="feed", subcomponent="parser")

    def parse(self, raw_text: str) -> ParseResult:
        """Parse a whole feed body.

        Args:
            raw_text: Feed text as fetched.

        Returns:
            ParseResult with records in source order and line counters.
        """
        records: list[CandidateRecord] = []
        lines_total = 0
        lines_skipped = 0
        lines_rejected = 0

        for index, line in enumerate(raw_text.splitlines()):
            if not line.strip():
                continue
            lines_total += 1

            if is_metadata_line(line):
                lines_skipped += 1
                continue

            try:
                records.append(self.parse_line(line, index))
            except Exception as e:  # noqa: BLE001
                lines_rejected += 1
                self._log.debug(
                    "line_rejected",
                    line_index=index,
                    reason=getattr(e, "reason", type(e).__name__),
                )

        self._log.info(
            "parse_complete",
            lines_total=lines_total,
            lines_skipped=lines_skipped,
            lines_rejected=lines_rejected,
            records=len(records),
        )

        return ParseResult(
            records=records,
            lines_total=lines_total,
            lines_skipped=lines_skipped,
            lines_rejected=lines_rejected,
        )

    def parse_line(self, line: str, line_index: int | None = None) -> CandidateRecord:
        """Parse a single data line.

        Args:
            line: One non-metadata feed line.
            line_index: Position in the feed, for error reporting.

        Returns:
            The parsed record.

        Raises:
            FeedLineError: If the line lacks required fields.
        """
        fields = line.split(FIELD_DELIMITER)
        if len(fields) < MIN_FIELD_COUNT:
            raise FeedLineError("insufficient_columns", line_index)

        host = fields[COL_HOST].strip()
        if not host:
            raise FeedLineError("empty_host", line_index)

        address = fields[COL_ADDRESS].strip()
        if not address:
            raise FeedLineError("empty_address", line_index)

        latency = parse_int(fields[COL_LATENCY], minimum=INT32_MIN, maximum=INT32_MAX)

        return CandidateRecord(
            host_identifier=fix_host_suffix(host, self._host_suffix),
            address=address,
            region_name=fields[COL_REGION_NAME].strip(),
            region_code=fields[COL_REGION_CODE].strip(),
            throughput=max(parse_int(fields[COL_THROUGHPUT]), 0),
            load=max(parse_int(fields[COL_LOAD]), 0),
            latency=latency,
            latency_status=LatencyStatus.from_latency(latency),
        )


def parse_feed(raw_text: str, host_suffix: str = HOST_SUFFIX) -> list[CandidateRecord]:
    """Parse feed text into records (pure function).

    Args:
        raw_text: Feed text.
        host_suffix: Canonical domain suffix.

    Returns:
        Records in source order.
    """
    return FeedParser(host_suffix=host_suffix).parse(raw_text).records
