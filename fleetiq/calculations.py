"""Helper functions for plan due calculations."""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Union

from dateutil import parser as date_parser

from .status import PlanStatus


def parse_date(value: Any) -> Optional[date]:
    """Coerce a date-ish value to a date. Malformed or empty values give None."""
    parsed = parse_datetime(value)
    return parsed.date() if parsed is not None else None


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a datetime-ish value to a naive UTC datetime.

    Accepts datetime, date and ISO-like strings. Anything else, including
    unparseable strings, is treated as absent.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_number(value: Any) -> Optional[float]:
    """Coerce a numeric value. Booleans, blanks, NaN, infinities and junk give None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def calc_due_date(baseline: Optional[date], interval_days: Optional[float]) -> Optional[date]:
    """Calculate next due date: baseline + interval days."""
    if interval_days is None or baseline is None or interval_days <= 0:
        return None
    try:
        return baseline + timedelta(days=int(interval_days))
    except (OverflowError, ValueError):
        # Past date.max
        return None


def calc_due_odometer(
    baseline_km: Optional[float], interval_km: Optional[float]
) -> Optional[float]:
    """
    Calculate next due odometer.

    - With a baseline: baseline + interval
    - Without one: 0 + interval (vehicle assumed fresh)
    """
    if interval_km is None or interval_km <= 0:
        return None
    return (baseline_km or 0) + interval_km


def is_past_due(due_date: date, as_of: Union[date, datetime]) -> bool:
    """
    True once the due date has started before as_of.

    A due date is midnight of that day, so a datetime as_of later the same
    day is already past it. A plain date as_of is compared day to day.
    """
    if isinstance(as_of, datetime):
        return datetime.combine(due_date, time.min) < parse_datetime(as_of)
    return due_date < as_of


def check_status(
    as_of: Union[date, datetime],
    due_date: Optional[date],
    due_km: Optional[float],
    current_km: Optional[float],
    due_soon_days: int = 30,
) -> PlanStatus:
    """
    Determine plan status from due date and due odometer.

    Overdue wins over DueSoon: a plan is overdue when the date has passed
    or the odometer has reached the due reading.
    """
    if due_date is not None and is_past_due(due_date, as_of):
        return PlanStatus.OVERDUE
    if due_km is not None and current_km is not None and current_km >= due_km:
        return PlanStatus.OVERDUE
    today = parse_datetime(as_of).date() if isinstance(as_of, datetime) else as_of
    if due_date is not None and due_date <= today + timedelta(days=due_soon_days):
        return PlanStatus.DUE_SOON
    return PlanStatus.SCHEDULED
