"""Temporal Coercion — tests for the date / date_time / timestamp encodings.

Tests cover:
    - as_datetime passes datetimes through untouched (identity)
    - Text, epoch numbers, dates and bytes all become datetimes
    - Naive input is anchored to the supplied zone
    - date_time renders YYYY-MM-DD HH:MM:SS; timestamp renders epoch seconds
    - Round trip: date_time text re-parsed via as_datetime is the same moment,
      including inputs that carry their own offset
    - Malformed input raises CoercionError tagged with the requested type
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from attrjuggle.core.errors import CoercionError
from attrjuggle.core.temporal import (
    DATE_TIME_FORMAT, as_datetime, to_date_time_string, to_timestamp,
)

UTC = timezone.utc


# ─── as_datetime ─────────────────────────────────────────────────

def test_datetime_passes_through_unchanged():
    moment = datetime(2021, 3, 4, 5, 6, 7)
    assert as_datetime(moment) is moment


def test_date_becomes_midnight_in_zone():
    assert as_datetime(date(1990, 5, 1)) == datetime(1990, 5, 1, tzinfo=UTC)


def test_sql_style_text_is_parsed_and_anchored():
    parsed = as_datetime("1990-05-01 00:00:00")
    assert parsed == datetime(1990, 5, 1, tzinfo=UTC)
    assert parsed.tzinfo is UTC


def test_date_only_text_is_start_of_day():
    assert as_datetime("1990-05-01") == datetime(1990, 5, 1, tzinfo=UTC)


def test_offset_text_keeps_its_offset():
    parsed = as_datetime("2020-06-01T12:00:00+02:00")
    assert parsed.utcoffset() == timedelta(hours=2)


def test_zulu_suffix_is_utc():
    assert as_datetime("2020-06-01T12:00:00Z") == datetime(2020, 6, 1, 12, tzinfo=UTC)


def test_epoch_numbers_and_digit_text():
    expected = datetime(1970, 1, 2, tzinfo=UTC)
    assert as_datetime(86400) == expected
    assert as_datetime(86400.0) == expected
    assert as_datetime("86400") == expected
    assert as_datetime("86400.0") == expected
    assert as_datetime(b"1990-05-01") == datetime(1990, 5, 1, tzinfo=UTC)


def test_fractional_epoch_text_matches_numeric_epoch():
    assert as_datetime("1700000000.5") == as_datetime(1700000000.5)
    assert to_timestamp("1700000000.5") == 1700000000
    assert as_datetime("-86400.25") == as_datetime(-86400.25)


def test_naive_input_uses_supplied_zone():
    berlin = ZoneInfo("Europe/Berlin")
    parsed = as_datetime("2020-01-01 00:00:00", berlin)
    assert parsed.tzinfo is berlin
    assert to_timestamp("2020-01-01 00:00:00", berlin) == 1577833200


@pytest.mark.parametrize("value", ["not a date", "", "   ", "2020-13-45", True, [2020], float("nan"), 10**20])
def test_malformed_input_raises(value):
    with pytest.raises(CoercionError) as exc:
        as_datetime(value)
    assert exc.value.logical_type == "date"


def test_error_reports_requested_type():
    with pytest.raises(CoercionError) as exc:
        to_timestamp("garbage")
    assert exc.value.logical_type == "timestamp"


# ─── date_time ───────────────────────────────────────────────────

def test_date_time_fixed_format():
    assert DATE_TIME_FORMAT == "%Y-%m-%d %H:%M:%S"
    assert to_date_time_string(datetime(1990, 5, 1, 8, 9, 10, 999)) == "1990-05-01 08:09:10"
    assert to_date_time_string(date(1990, 5, 1)) == "1990-05-01 00:00:00"
    assert to_date_time_string(0) == "1970-01-01 00:00:00"


def test_date_time_round_trip_to_second_precision():
    original = datetime(2019, 12, 31, 23, 59, 58, 123456, tzinfo=UTC)
    text = to_date_time_string(original)
    assert as_datetime(text) == original.replace(microsecond=0)


def test_date_time_converts_offset_moments_into_zone():
    original = as_datetime("1990-05-01T10:11:12+02:00")
    text = to_date_time_string(original)
    assert text == "1990-05-01 08:11:12"
    assert as_datetime(text) == original


def test_date_time_round_trip_in_non_utc_zone():
    berlin = ZoneInfo("Europe/Berlin")
    original = datetime(2020, 1, 1, 12, tzinfo=ZoneInfo("America/New_York"))
    text = to_date_time_string(original, berlin)
    assert text == "2020-01-01 18:00:00"
    assert as_datetime(text, berlin) == original


# ─── timestamp ───────────────────────────────────────────────────

def test_timestamp_is_integer_epoch_seconds():
    assert to_timestamp("1990-05-01 00:00:00") == 641520000
    assert to_timestamp(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) == 1
    assert isinstance(to_timestamp(1.75), int)
    assert to_timestamp(1.75) == 1


def test_timestamp_anchors_naive_datetime():
    assert to_timestamp(datetime(1970, 1, 1, 0, 1)) == 60


def test_timestamp_is_idempotent():
    stamp = to_timestamp("2001-09-09 01:46:40")
    assert stamp == 1_000_000_000
    assert to_timestamp(stamp) == stamp
