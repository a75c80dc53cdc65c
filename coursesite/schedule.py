"""
Week-by-week date ranges for the schedule table.

A course schedule is shown as one row per week with five columns,
Monday to Friday. Starting at starting_monday, each week takes five
consecutive days and then skips two (the weekend).

The column labels are always MONDAY..FRIDAY. Nothing here checks that the
first date really is a Monday: a range starting on a Wednesday produces
rows whose first cell is a Wednesday under the MONDAY label.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

WEEKDAY_HEADERS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY")

DAYS_PER_ROW = len(WEEKDAY_HEADERS)
DAYS_TO_NEXT_WEEK = 7 - DAYS_PER_ROW


def iter_weeks(starting_monday: date, ending_friday: date) -> Iterator[list[date]]:
    """
    Yield the five dates of every week from starting_monday up to ending_friday.

    A week is emitted as long as its first day is on or before ending_friday,
    so starting_monday == ending_friday still gives one full week.
    """
    counting = starting_monday
    while counting <= ending_friday:
        week: list[date] = []
        for _ in range(DAYS_PER_ROW):
            week.append(counting)
            counting += timedelta(days=1)
        counting += timedelta(days=DAYS_TO_NEXT_WEEK)
        yield week


def format_day(d: date) -> str:
    """
    Render a date as 'month/day' without zero padding, e.g. '1/5'.
    """
    return f"{d.month}/{d.day}"
