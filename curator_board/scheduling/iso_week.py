"""ISO-8601 calendar week arithmetic.

All week math goes through Monday dates: a week is located by the Jan-4 rule
(ISO week 1 is the week holding the year's first Thursday) and compared or
shifted by whole days between Mondays, so offsets stay exact across year
boundaries and 53-week years.
"""

from datetime import date, datetime, timedelta

from curator_board.scheduling.projection import local_date
from curator_board.scheduling.types import CalendarWeek

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def iso_week_of(day: date) -> CalendarWeek:
    """Return the ISO week containing a civil date.

    The week belongs to the ISO year of its Thursday, so 2024-12-30 is
    2025-W01 and 2021-01-03 is 2020-W53.
    """
    if isinstance(day, datetime):
        day = day.date()
    thursday = day + timedelta(days=4 - day.isoweekday())
    year_start = date(thursday.year, 1, 1)
    week_number = (thursday - year_start).days // 7 + 1
    return CalendarWeek(thursday.year, week_number)


def monday_of(week: CalendarWeek) -> date:
    """Return the Monday that starts an ISO week."""
    jan4 = date(week.iso_year, 1, 4)
    week1_monday = jan4 - timedelta(days=jan4.isoweekday() - 1)
    return week1_monday + timedelta(weeks=week.iso_week - 1)


def week_dates(week: CalendarWeek) -> list[date]:
    """Return the seven dates of an ISO week, Monday through Sunday."""
    monday = monday_of(week)
    return [monday + timedelta(days=i) for i in range(7)]


def shift_weeks(week: CalendarWeek, delta: int) -> CalendarWeek:
    """Move an ISO week forward (positive delta) or back (negative delta).

    The result is always canonical, so shifting a non-existent week 53 by zero
    yields week 1 of the next ISO year.
    """
    return iso_week_of(monday_of(week) + timedelta(weeks=delta))


def week_offset(target: CalendarWeek, current: CalendarWeek) -> int:
    """Signed number of weeks from ``current`` to ``target``."""
    return (monday_of(target) - monday_of(current)).days // 7


def current_week(now: datetime, utc_offset_minutes: int) -> CalendarWeek:
    """ISO week of the local civil date of ``now`` at the board offset."""
    return iso_week_of(local_date(now, utc_offset_minutes))


def week_date_range_label(week: CalendarWeek) -> str:
    """Human readable Monday..Sunday range.

    Returns:
        "1 – 7 Jan" when both ends share a month, "29 Jan – 4 Feb" otherwise
    """
    dates = week_dates(week)
    first, last = dates[0], dates[-1]
    if first.month == last.month:
        return f"{first.day} – {last.day} {MONTH_ABBREVIATIONS[first.month - 1]}"
    return f"{first.day} {MONTH_ABBREVIATIONS[first.month - 1]} – {last.day} {MONTH_ABBREVIATIONS[last.month - 1]}"
