# utils/dates.py
"""Calendar helpers for monthly installment due dates."""
import calendar
from datetime import date, timedelta


def add_months(start: date, months: int) -> date:
     """
     Return the date ``months`` calendar months after ``start``.

     The day is clamped to the last day of the target month, so adding one
     month to Jan 31 gives Feb 28 (or 29).
     """
     year = start.year + (start.month - 1 + months) // 12
     month = (start.month - 1 + months) % 12 + 1
     day = min(start.day, calendar.monthrange(year, month)[1])
     return date(year, month, day)


def add_days(start: date, days: int) -> date:
     return start + timedelta(days=days)
