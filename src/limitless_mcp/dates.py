"""Date parsing and relative time ranges used by the CLI, resources and prompts."""

from __future__ import annotations
import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from .config import API_DATE_FMT, API_DATETIME_FMT
from .errors import ValidationError

PERIODS = ("today", "yesterday", "this-week", "last-week", "this-month", "last-month")

_RELATIVE_RE = re.compile(r"([dwmy])-(\d+)")


def today(tz: ZoneInfo) -> date:
    return datetime.now(tz).date()

def parse_datetime(s: str, tz: ZoneInfo) -> datetime:
    try:
        return datetime.strptime(s, API_DATETIME_FMT).replace(tzinfo=tz)
    except ValueError:
        raise ValidationError(f"Invalid datetime '{s}' (expected YYYY-MM-DD HH:MM:SS).") from None

def parse_timestamp(s: Optional[str]) -> Optional[datetime]:
    """Parses an ISO 8601 timestamp from the API; None when unparsable."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None

def parse_date_spec(spec: str, tz: ZoneInfo, now: Optional[date]=None) -> date:
    """Parses flexible date specifications.

    Accepts ``YYYY-MM-DD``, ``M/D`` (most recent past occurrence) and
    relative offsets ``d-N``, ``w-N``, ``m-N``, ``y-N``.
    """
    now_date = now or today(tz)

    # 1. YYYY-MM-DD
    try:
        return datetime.strptime(spec, API_DATE_FMT).date()
    except ValueError:
        pass

    # 2. M/D or MM/DD
    try:
        # leap year so 2/29 parses
        month_day = datetime.strptime(f"{spec}/2000", "%m/%d/%Y")
    except ValueError:
        month_day = None
    if month_day is not None:
        year = now_date.year
        if (month_day.month, month_day.day) > (now_date.month, now_date.day):
            year -= 1
        try:
            return date(year, month_day.month, month_day.day)
        except ValueError:  # Feb 29 in a non-leap year
            return date(year, 2, 28)

    # 3. Relative d/w/m/y - N
    match = _RELATIVE_RE.fullmatch(spec.lower())
    if match:
        unit, num_str = match.groups()
        num = int(num_str)
        if unit == 'd':
            return now_date - timedelta(days=num)
        if unit == 'w':
            return now_date - timedelta(weeks=num)
        if unit == 'm':
            target_month = now_date.month - num
            target_year = now_date.year
            while target_month <= 0:
                target_month += 12
                target_year -= 1
            max_days = calendar.monthrange(target_year, target_month)[1]
            return date(target_year, target_month, min(now_date.day, max_days))
        try:
            return now_date.replace(year=now_date.year - num)
        except ValueError:  # Feb 29 -> non-leap year
            return now_date.replace(year=now_date.year - num, month=2, day=28)

    raise ValidationError(f"Invalid date specification: '{spec}'")

def get_time_range(period: str, tz: ZoneInfo, now: Optional[datetime]=None) -> Tuple[datetime, datetime]:
    now = now or datetime.now(tz)
    current = now.date()
    if period == "today":
        start = end = current
    elif period == "yesterday":
        start = end = current - timedelta(days=1)
    elif period in ("this-week", "last-week"):
        start = current - timedelta(days=current.weekday())
        if period == "last-week":
            start -= timedelta(days=7)
        end = start + timedelta(days=6)
    elif period in ("this-month", "last-month"):
        start = current.replace(day=1)
        if period == "last-month":
            start = (start - timedelta(days=1)).replace(day=1)
        end = start.replace(day=calendar.monthrange(start.year, start.month)[1])
    else:
        raise ValidationError(f"Unknown period: {period}")
    return (
        datetime.combine(start, time.min, tzinfo=tz),
        datetime.combine(end, time.max, tzinfo=tz),
    )

def format_range_param(dt: datetime) -> str:
    """Renders a datetime the way the ``start_time``/``end_time`` filters expect."""
    return dt.strftime(API_DATETIME_FMT)
