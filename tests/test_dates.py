from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from limitless_mcp import ValidationError
from limitless_mcp.dates import format_range_param, get_time_range, parse_date_spec, parse_datetime, parse_timestamp

UTC = ZoneInfo("UTC")
NOW = date(2024, 5, 15)  # a Wednesday


@pytest.mark.parametrize("spec,expected", [
    ("2024-03-02", date(2024, 3, 2)),
    ("5/1", date(2024, 5, 1)),
    ("12/25", date(2023, 12, 25)),
    ("d-1", date(2024, 5, 14)),
    ("w-2", date(2024, 5, 1)),
    ("m-3", date(2024, 2, 15)),
    ("m-5", date(2023, 12, 15)),
    ("y-1", date(2023, 5, 15)),
])
def test_parse_date_spec(spec, expected):
    assert parse_date_spec(spec, UTC, now=NOW) == expected


def test_parse_date_spec_month_end_clamped():
    assert parse_date_spec("m-1", UTC, now=date(2024, 3, 31)) == date(2024, 2, 29)


@pytest.mark.parametrize("spec", ["tomorrow", "q-1", "2024-02-30"])
def test_parse_date_spec_invalid(spec):
    with pytest.raises(ValidationError):
        parse_date_spec(spec, UTC, now=NOW)


@pytest.mark.parametrize("period,start,end", [
    ("today", date(2024, 5, 15), date(2024, 5, 15)),
    ("yesterday", date(2024, 5, 14), date(2024, 5, 14)),
    ("this-week", date(2024, 5, 13), date(2024, 5, 19)),
    ("last-week", date(2024, 5, 6), date(2024, 5, 12)),
    ("this-month", date(2024, 5, 1), date(2024, 5, 31)),
    ("last-month", date(2024, 4, 1), date(2024, 4, 30)),
])
def test_get_time_range(period, start, end):
    now = datetime(2024, 5, 15, 9, 30, tzinfo=UTC)
    start_dt, end_dt = get_time_range(period, UTC, now=now)
    assert start_dt == datetime.combine(start, time.min, tzinfo=UTC)
    assert end_dt == datetime.combine(end, time.max, tzinfo=UTC)


def test_last_month_in_january():
    start_dt, end_dt = get_time_range("last-month", UTC, now=datetime(2024, 1, 10, tzinfo=UTC))
    assert start_dt.date() == date(2023, 12, 1)
    assert end_dt.date() == date(2023, 12, 31)


def test_unknown_period():
    with pytest.raises(ValidationError):
        get_time_range("this-quarter", UTC)


def test_parse_datetime_and_format():
    dt = parse_datetime("2024-05-01 08:15:00", UTC)
    assert format_range_param(dt) == "2024-05-01 08:15:00"
    with pytest.raises(ValidationError):
        parse_datetime("2024-05-01T08:15", UTC)


def test_parse_timestamp():
    assert parse_timestamp("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, tzinfo=ZoneInfo("UTC"))
    assert parse_timestamp("garbage") is None
    assert parse_timestamp(None) is None


@pytest.mark.parametrize("now,expected", [
    (date(2024, 3, 10), date(2024, 2, 29)),
    (date(2025, 3, 10), date(2025, 2, 28)),
    (date(2025, 1, 10), date(2024, 2, 29)),
])
def test_parse_date_spec_leap_day(now, expected):
    assert parse_date_spec("2/29", UTC, now=now) == expected


@pytest.mark.parametrize("spec", ["13/1", "2/30", "1/2/3"])
def test_parse_date_spec_invalid_month_day(spec):
    with pytest.raises(ValidationError):
        parse_date_spec(spec, UTC, now=NOW)
