"""Days-overdue arithmetic.

Elapsed days are the floor of the raw time delta divided by one day, not
a calendar-date subtraction. Reference values that carry a time of day or
a UTC offset can therefore shift the result by one near midnight.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]

ONE_DAY = timedelta(days=1)

_DATE_PARTS = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)


def utc_now() -> datetime:
    """Default clock for the reference date."""
    return datetime.now(UTC)


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO 8601 date or datetime; naive values are taken as UTC.

    Returns None for anything that does not parse, including calendar-invalid
    dates such as 2025-02-30.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_due_date(value: str) -> datetime | None:
    """Parse an extracted due date, rolling day overflow into the next month.

    ``2025-02-30`` becomes 2025-03-02. Months outside 1-12 and days outside
    1-31 stay unparseable. Anything other than a bare YYYY-MM-DD goes through
    ``parse_iso_datetime``.
    """
    match = _DATE_PARTS.fullmatch(value.strip())
    if match is None:
        return parse_iso_datetime(value)
    year, month, day = (int(part) for part in match.groups())
    if year < 1 or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return datetime(year, month, 1, tzinfo=UTC) + timedelta(days=day - 1)


def resolve_reference_date(today: str | None, clock: Clock = utc_now) -> datetime | None:
    """Return the moment overdue-ness is measured against.

    An explicit ``today`` wins; an unparseable one degrades to None rather
    than falling back to the clock.
    """
    if today is None:
        return clock()
    return parse_iso_datetime(today)


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier) // ONE_DAY


def compute_days_overdue(due_date: str | None, reference: datetime | None) -> int | None:
    """Days the invoice is past due, clamped at zero.

    Args:
        due_date: Extracted due date (YYYY-MM-DD) or None
        reference: Reference moment or None

    Returns:
        Non-negative day count, or None when either date is unavailable
    """
    if reference is None or due_date is None:
        return None
    due = parse_due_date(due_date)
    if due is None:
        return None
    return max(days_between(due, reference), 0)
