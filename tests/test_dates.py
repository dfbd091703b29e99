"""Tests for date and datetime parsing."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from trellis.core.exceptions import InvalidValueError
from trellis.extraction.convert import validate_and_parse_field_value
from trellis.extraction.dates import (
    DATE_FORMAT_HINT,
    parse_llm_friendly_date,
    parse_llm_friendly_datetime,
)
from trellis.schemas import DateField, DateTimeField


@pytest.fixture
def due():
    return DateField(name="dueDate")


@pytest.fixture
def optional_due():
    return DateField(name="dueDate", is_optional=True)


@pytest.fixture
def when():
    return DateTimeField(name="startsAt")


class TestParseDate:
    def test_iso_date(self, due):
        assert parse_llm_friendly_date(due, "2024-03-15") == date(2024, 3, 15)

    def test_bad_format_raises(self, due):
        with pytest.raises(InvalidValueError) as exc_info:
            parse_llm_friendly_date(due, "March 15, 2024")
        assert exc_info.value.reason == DATE_FORMAT_HINT
        assert exc_info.value.value == "March 15, 2024"
        assert exc_info.value.field_names == ["dueDate"]

    def test_impossible_date_raises(self, due):
        with pytest.raises(InvalidValueError):
            parse_llm_friendly_date(due, "2024-02-30")

    def test_optional_returns_none(self, optional_due):
        assert parse_llm_friendly_date(optional_due, "soon") is None

    def test_required_overrides_optional(self, optional_due):
        with pytest.raises(InvalidValueError):
            parse_llm_friendly_date(optional_due, "soon", required=True)


class TestParseDateTime:
    def test_utc(self, when):
        assert parse_llm_friendly_datetime(when, "2024-03-15 14:30 UTC") == datetime(
            2024, 3, 15, 14, 30, tzinfo=timezone.utc
        )

    def test_seconds_and_offset(self, when):
        result = parse_llm_friendly_datetime(when, "2024-03-15 14:30:45 +05:30")
        assert result == datetime(2024, 3, 15, 9, 0, 45, tzinfo=timezone.utc)

    def test_prefixed_offset(self, when):
        result = parse_llm_friendly_datetime(when, "2024-03-15 14:30 UTC-2")
        assert result == datetime(2024, 3, 15, 16, 30, tzinfo=timezone.utc)

    def test_iana_name(self, when):
        result = parse_llm_friendly_datetime(when, "2024-01-15 09:00 America/New_York")
        assert result == datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)

    def test_result_is_utc(self, when):
        result = parse_llm_friendly_datetime(when, "2024-07-01 12:00 Europe/Paris")
        assert result.tzinfo == timezone.utc
        assert result.hour == 10

    def test_unknown_zone(self, when):
        with pytest.raises(InvalidValueError, match="Unrecognized time zone Mars/Olympus"):
            parse_llm_friendly_datetime(when, "2024-03-15 14:30 Mars/Olympus")

    def test_zone_folder_name_is_unknown(self, when):
        with pytest.raises(InvalidValueError, match="Unrecognized time zone America"):
            parse_llm_friendly_datetime(when, "2024-01-01 10:00 America")

    def test_zone_folder_name_through_converter(self):
        f = DateTimeField(name="startsAt")
        with pytest.raises(InvalidValueError):
            validate_and_parse_field_value(f, "2024-01-01 10:00 America")

    def test_missing_zone(self, when):
        with pytest.raises(InvalidValueError, match="followed by the timezone"):
            parse_llm_friendly_datetime(when, "2024-03-15 14:30")

    def test_bad_clock(self, when):
        with pytest.raises(InvalidValueError):
            parse_llm_friendly_datetime(when, "2024-03-15 25:30 UTC")

    def test_optional_returns_none(self):
        f = DateTimeField(name="startsAt", is_optional=True)
        assert parse_llm_friendly_datetime(f, "tomorrow at noon") is None
