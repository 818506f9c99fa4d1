"""
services/summary.py
-------------------
Pure calculators behind the dashboards. Nothing here touches the store;
callers fetch rows first and pass them in.

Time boundaries use the caller's local time zone, evaluated at call time.
"""

from datetime import date, datetime
from typing import Any, Iterable, Optional


def now_local() -> datetime:
    return datetime.now().astimezone()


def start_of_day(now: Optional[datetime] = None) -> datetime:
    now = now or now_local()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: Optional[datetime] = None) -> datetime:
    """Local midnight on the 1st of the current month."""
    return start_of_day(now).replace(day=1)


def add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def total(values: Iterable[Any]) -> int:
    """Sum that treats missing values as 0 and is 0 for an empty input."""
    return sum((value or 0) for value in values)


def total_of(rows: Iterable[Any], attr: str) -> int:
    return total(getattr(row, attr) for row in rows)


def count_active(rows: Iterable[Any]) -> int:
    return sum(1 for row in rows if row.status == "active")


def unpaid_amount(item: Any) -> int:
    """amount × outstanding targets; never negative when paid exceeds targets."""
    outstanding = max(0, (item.total_targets or 0) - (item.paid_count or 0))
    return (item.amount or 0) * outstanding


def total_unpaid(items: Iterable[Any]) -> int:
    return total(unpaid_amount(item) for item in items)
