# pos_analytics/utils/date_utils.py
from datetime import date, datetime, time, timedelta
from typing import Tuple, List, Union
import calendar
import math

from pos_analytics.exceptions import ValidationError

SECONDS_PER_DAY = 86400

def convert_to_datetime(value: Union[date, datetime, str]) -> datetime:
    """Convert a date, datetime or ISO string to a datetime.

    Args:
        value: Value to convert

    Returns:
        datetime (midnight when only a date was given)
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid date: {value}. Expected YYYY-MM-DD", code='INVALID_DATE')

    raise ValidationError(f"Unsupported date value: {value!r}", code='INVALID_DATE')

def start_of_day(value: Union[date, datetime]) -> datetime:
    """Return 00:00:00 of the given day."""
    return datetime.combine(convert_to_datetime(value).date(), time.min)

def end_of_day(value: Union[date, datetime]) -> datetime:
    """Return 23:59:59.999999 of the given day."""
    return datetime.combine(convert_to_datetime(value).date(), time.max)

def normalize_window(
    start: Union[date, datetime],
    end: Union[date, datetime]
) -> Tuple[datetime, datetime]:
    """Widen a report window to whole days.

    Args:
        start: First day of the window
        end: Last day of the window

    Returns:
        Tuple with the window start and end datetimes

    Raises:
        ValidationError if the window ends before it starts
    """
    window_start = start_of_day(start)
    window_end = end_of_day(end)

    if window_end < window_start:
        raise ValidationError(
            f"Report window ends before it starts: {window_start.date()} > {window_end.date()}",
            code='INVALID_WINDOW'
        )

    return window_start, window_end

def window_days(start: datetime, end: datetime) -> int:
    """Length of a window in days, rounded up.

    1 Jan 00:00 to 30 Jan 23:59:59.999999 is 30 days.
    """
    seconds = (end - start).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)

def days_between(later: datetime, earlier: datetime) -> int:
    """Number of full days between two instants, truncated toward zero."""
    return math.trunc((later - earlier).total_seconds() / SECONDS_PER_DAY)

def days_between_ceil(later: datetime, earlier: datetime) -> int:
    """Number of days between two instants, rounded up."""
    return math.ceil((later - earlier).total_seconds() / SECONDS_PER_DAY)

def get_month_bounds(value: Union[date, datetime]) -> Tuple[datetime, datetime]:
    """Get the first and last instant of the month containing a date.

    Args:
        value: Any date in the month

    Returns:
        Tuple with month start and month end datetimes
    """
    day = convert_to_datetime(value)
    last_day = calendar.monthrange(day.year, day.month)[1]

    month_start = datetime(day.year, day.month, 1)
    month_end = end_of_day(date(day.year, day.month, last_day))

    return month_start, month_end

def get_previous_month(value: Union[date, datetime]) -> Tuple[int, int]:
    """Get the month and year preceding the month of a date.

    Returns:
        Tuple with previous month number and year
    """
    day = convert_to_datetime(value)
    if day.month == 1:
        return (12, day.year - 1)
    return (day.month - 1, day.year)

def get_trailing_months(end: Union[date, datetime], months: int) -> List[Tuple[datetime, datetime]]:
    """Get the bounds of the trailing calendar months ending at a date.

    Args:
        end: Any date in the most recent month
        months: Number of months

    Returns:
        List of (month_start, month_end), most recent first
    """
    bounds = []
    current = convert_to_datetime(end)

    for _ in range(months):
        month_start, month_end = get_month_bounds(current)
        bounds.append((month_start, month_end))

        month, year = get_previous_month(month_start)
        current = datetime(year, month, 1)

    return bounds

def format_month(value: Union[date, datetime]) -> str:
    """Format a month label such as 'Jan 2025'."""
    return f"{calendar.month_abbr[value.month]} {value.year}"

def get_period_key(value: Union[date, datetime], period: str) -> str:
    """Bucket key of a date for a reporting period.

    Args:
        value: Date to bucket
        period: 'daily', 'weekly' or 'monthly'

    Returns:
        'YYYY-MM-DD', 'YYYY-Www' (ISO week) or 'YYYY-MM'
    """
    if period == 'daily':
        return value.strftime('%Y-%m-%d')

    elif period == 'weekly':
        iso_year, iso_week, _ = value.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"

    elif period == 'monthly':
        return value.strftime('%Y-%m')

    else:
        raise ValidationError(
            f"Invalid period: {period}. Valid values are: daily, weekly, monthly", code='INVALID_PERIOD'
        )

def add_days(value: Union[date, datetime], days: int) -> date:
    """Return the calendar date a number of days after a date."""
    return convert_to_datetime(value).date() + timedelta(days=days)

def subtract_months(value: Union[date, datetime], months: int) -> datetime:
    """Same day and time a number of months earlier, clamped to the month's last day.

    31 Mar minus one month is 28 (or 29) Feb; 29 Feb 2024 minus twelve
    months is 28 Feb 2023.
    """
    day = convert_to_datetime(value)
    year, month_index = divmod(day.year * 12 + day.month - 1 - months, 12)
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]

    return day.replace(year=year, month=month, day=min(day.day, last_day))
