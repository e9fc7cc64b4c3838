"""Unit tests for the timestamp helpers."""

from datetime import datetime, timedelta, timezone

from notehub.utils.timestamps import format_timestamp, parse_timestamp


def test_format_timestamp_converts_to_utc() -> None:
    """Aware datetimes in other zones are rendered in UTC."""
    value = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(value) == "2024-01-01T12:00:00.000000+00:00"


def test_format_timestamp_naive_is_utc() -> None:
    """Naive datetimes are taken as UTC."""
    assert format_timestamp(datetime(2024, 1, 1, 12, 0)) == "2024-01-01T12:00:00.000000+00:00"


def test_formatted_timestamps_sort_chronologically() -> None:
    """Text ordering of formatted values matches time ordering."""
    earlier = format_timestamp(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
    later = format_timestamp(datetime(2024, 1, 1, 12, 0, 0, 500, tzinfo=timezone.utc))
    assert earlier < later


def test_parse_timestamp_roundtrip() -> None:
    """A formatted value parses back to the same instant."""
    value = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert parse_timestamp(format_timestamp(value)) == value


def test_parse_timestamp_naive_is_utc() -> None:
    """Stored values without an offset are read as UTC."""
    assert parse_timestamp("2024-01-01T12:00:00") == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_parse_timestamp_malformed_substitutes_now() -> None:
    """Malformed and missing values fall back to the current time."""
    before = datetime.now(timezone.utc)
    for value in ("yesterday", None):
        parsed = parse_timestamp(value)
        assert before <= parsed <= datetime.now(timezone.utc)
