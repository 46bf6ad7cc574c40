from datetime import date, datetime, timedelta


def as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def week_start(day: date) -> date:
    """Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def same_month(day: date, ref: date) -> bool:
    return day.year == ref.year and day.month == ref.month
