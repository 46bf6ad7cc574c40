from collections.abc import Iterable
from datetime import date, datetime, timedelta

from spendly.categories import CATEGORIES, NO_CATEGORY, normalize_category
from spendly.dates import as_date, same_month, week_start
from spendly.db.models import DashboardStats, ExpenseRecord, PeriodBucket

PERIODS: tuple[str, ...] = ("daily", "weekly", "monthly")
REPORT_BUCKET_LIMIT = 10
AVERAGE_WINDOW_DAYS = 7
STATEMENT_DESCRIPTION_WIDTH = 20


class InvalidPeriodError(ValueError):
    def __init__(self, period: str) -> None:
        self.period = period
        super().__init__(f"Invalid period '{period}'. Use one of: {', '.join(PERIODS)}.")


def period_key(day: date, period: str) -> str:
    if period == "daily":
        return day.isoformat()
    if period == "weekly":
        return week_start(day).isoformat()
    if period == "monthly":
        return f"{day.year:04d}-{day.month:02d}"
    raise InvalidPeriodError(period)


def aggregate(records: Iterable[ExpenseRecord], period: str) -> list[PeriodBucket]:
    """Group records into period buckets, newest first, keeping the ten most recent.

    Weekly buckets are keyed by the Monday that starts the week. Keys are ISO
    strings, so sorting them as text is chronological.
    """
    if period not in PERIODS:
        raise InvalidPeriodError(period)

    buckets: dict[str, PeriodBucket] = {}
    for record in records:
        key = period_key(record.date, period)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = PeriodBucket(period_key=key)
        bucket.total += record.amount
        bucket.count += 1

    ordered = sorted(buckets.values(), key=lambda b: b.period_key, reverse=True)
    return ordered[:REPORT_BUCKET_LIMIT]


def dashboard_stats(records: Iterable[ExpenseRecord], now: date | datetime) -> DashboardStats:
    today = as_date(now)
    window_start = today - timedelta(days=AVERAGE_WINDOW_DAYS - 1)

    total_spent = today_spent = window_spent = 0.0
    today_count = 0
    by_category: dict[str, float] = {}
    for record in records:
        if same_month(record.date, today):
            total_spent += record.amount
            category = normalize_category(record.category)
            by_category[category] = by_category.get(category, 0.0) + record.amount
        if record.date == today:
            today_spent += record.amount
            today_count += 1
        if window_start <= record.date <= today:
            window_spent += record.amount

    top_category = NO_CATEGORY
    top_amount = 0.0
    # Ties go to the earlier category in CATEGORIES.
    for category in CATEGORIES:
        amount = by_category.get(category, 0.0)
        if amount > top_amount:
            top_category, top_amount = category, amount

    return DashboardStats(
        total_spent=total_spent,
        today_spent=today_spent,
        today_count=today_count,
        avg_daily=window_spent / AVERAGE_WINDOW_DAYS,
        top_category=top_category,
        top_category_amount=top_amount,
    )


def _statement_sort_key(record: ExpenseRecord):
    return (record.date, record.created_at or datetime.min, record.id or 0)


def statement_rows(records: Iterable[ExpenseRecord], opening_balance: float) -> list[dict]:
    """Newest-first statement lines with a balance drawn down from the opening amount."""
    balance = opening_balance
    rows = []
    for record in sorted(records, key=_statement_sort_key, reverse=True):
        balance -= record.amount
        note = record.note or "No description"
        rows.append(
            {
                "date": record.date.isoformat(),
                "time": record.created_at.strftime("%H:%M") if record.created_at else "12:00",
                "description": note[:STATEMENT_DESCRIPTION_WIDTH],
                "category": normalize_category(record.category),
                "amount": record.amount,
                "balance": round(balance, 2),
            }
        )
    return rows
