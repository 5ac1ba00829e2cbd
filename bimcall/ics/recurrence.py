"""Occurrence generation for weekly, biweekly and monthly meeting series."""

import logging
from datetime import date, datetime, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from .models import Occurrence, RecurrenceRule

logger = logging.getLogger(__name__)

# Occurrence counts offered when creating a series
OCCURRENCE_COUNT_CHOICES = (4, 6, 8, 10, 12, 16, 20, 24)
MIN_OCCURRENCE_COUNT = 2
MAX_OCCURRENCE_COUNT = 52

# Occurrences created for a recurring event imported from a calendar file
DEFAULT_IMPORT_OCCURRENCES = 6

DateLike = Union[date, datetime, str]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _add_months(start: date, months: int) -> date:
    """Shift start by whole months, letting a too-large day spill forward.

    Jan 31 + 1 month lands on Mar 2 (leap year) or Mar 3, not on the last day
    of February.
    """
    first_of_month = start.replace(day=1) + relativedelta(months=months)
    return first_of_month + timedelta(days=start.day - 1)


def occurrence_date(start_date: DateLike, rule: Union[RecurrenceRule, str], index: int) -> date:
    """Compute the date of the index-th occurrence (index 0 is start_date)."""
    start = _to_date(start_date)

    if rule == RecurrenceRule.BIWEEKLY:
        return start + relativedelta(weeks=2 * index)
    if rule == RecurrenceRule.MONTHLY:
        return _add_months(start, index)
    # weekly, and anything unexpected
    return start + relativedelta(weeks=index)


def generate_occurrences(
    start_date: DateLike, rule: Union[RecurrenceRule, str], count: int
) -> list[Occurrence]:
    """Expand a recurrence rule into scheduled occurrences.

    Args:
        start_date: First occurrence, as a date, datetime or YYYY-MM-DD string
        rule: weekly, biweekly or monthly
        count: Number of occurrences; zero or negative yields an empty list

    Returns:
        Occurrences in increasing date order, all with status "scheduled"
    """
    occurrences = [
        Occurrence(date=occurrence_date(start_date, rule, i).isoformat())
        for i in range(max(count, 0))
    ]
    logger.debug(f"Generated {len(occurrences)} {rule} occurrence(s) from {start_date}")
    return occurrences


def clamp_occurrence_count(count: int) -> int:
    """Keep a user-supplied occurrence count inside the supported range."""
    return max(MIN_OCCURRENCE_COUNT, min(MAX_OCCURRENCE_COUNT, count))
