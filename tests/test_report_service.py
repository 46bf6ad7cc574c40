from datetime import date, datetime, timedelta

import pytest

from spendly.db.models import ExpenseRecord
from spendly.services.report_service import (
    REPORT_BUCKET_LIMIT,
    InvalidPeriodError,
    aggregate,
    dashboard_stats,
    period_key,
    statement_rows,
)


def _rec(day: date, amount: float, category: str = "Food", **kw) -> ExpenseRecord:
    defaults = dict(id=None, user_id=1, amount=amount, category=category, date=day)
    defaults.update(kw)
    return ExpenseRecord(**defaults)


def test_empty_input_gives_no_buckets():
    assert aggregate([], "daily") == []
    assert aggregate([], "weekly") == []
    assert aggregate([], "monthly") == []


def test_invalid_period_rejected():
    with pytest.raises(InvalidPeriodError):
        aggregate([_rec(date(2024, 3, 1), 5.0)], "yearly")


def test_daily_buckets_newest_first():
    records = [
        _rec(date(2024, 3, 1), 10.0),
        _rec(date(2024, 3, 3), 5.0),
        _rec(date(2024, 3, 1), 2.5),
    ]
    buckets = aggregate(records, "daily")
    assert [b.period_key for b in buckets] == ["2024-03-03", "2024-03-01"]
    assert buckets[1].total == 12.5
    assert buckets[1].count == 2


def test_weekly_bucket_monday_to_sunday():
    records = [_rec(date(2024, 3, 4), 10.0), _rec(date(2024, 3, 10), 20.0)]
    buckets = aggregate(records, "weekly")
    assert len(buckets) == 1
    assert buckets[0].period_key == "2024-03-04"
    assert buckets[0].total == 30.0


def test_weekly_next_monday_starts_new_bucket():
    records = [_rec(date(2024, 3, 10), 20.0), _rec(date(2024, 3, 11), 7.0)]
    keys = [b.period_key for b in aggregate(records, "weekly")]
    assert keys == ["2024-03-11", "2024-03-04"]


def test_monthly_buckets():
    records = [
        _rec(date(2023, 12, 31), 4.0),
        _rec(date(2024, 1, 1), 6.0),
        _rec(date(2024, 1, 20), 1.0),
    ]
    buckets = aggregate(records, "monthly")
    assert [(b.period_key, b.total) for b in buckets] == [("2024-01", 7.0), ("2023-12", 4.0)]


def test_capped_at_ten_most_recent():
    start = date(2024, 1, 1)
    records = [_rec(start + timedelta(days=i), 1.0) for i in range(15)]
    buckets = aggregate(records, "daily")
    assert len(buckets) == REPORT_BUCKET_LIMIT
    assert buckets[0].period_key == "2024-01-15"
    assert buckets[-1].period_key == "2024-01-06"


def test_daily_totals_partition_records():
    start = date(2024, 5, 1)
    records = [_rec(start + timedelta(days=i % 7), 1.25 * (i + 1)) for i in range(30)]
    buckets = aggregate(records, "daily")
    assert sum(b.total for b in buckets) == pytest.approx(sum(r.amount for r in records))
    assert sum(b.count for b in buckets) == len(records)
    assert len({b.period_key for b in buckets}) == len(buckets)


def test_aggregate_is_repeatable():
    records = [_rec(date(2024, 3, d), float(d)) for d in range(1, 20)]
    assert aggregate(records, "weekly") == aggregate(records, "weekly")


def test_period_key():
    day = date(2024, 2, 29)
    assert period_key(day, "daily") == "2024-02-29"
    assert period_key(day, "weekly") == "2024-02-26"
    assert period_key(day, "monthly") == "2024-02"


def test_dashboard_stats_empty():
    stats = dashboard_stats([], date(2024, 3, 15))
    assert stats.total_spent == 0
    assert stats.today_count == 0
    assert stats.avg_daily == 0
    assert stats.top_category == "None"
    assert stats.top_category_amount == 0


def test_dashboard_stats():
    now = datetime(2024, 3, 15, 18, 30)
    records = [
        _rec(date(2024, 3, 15), 20.0, "Food"),
        _rec(date(2024, 3, 15), 15.0, "Shopping"),
        _rec(date(2024, 3, 9), 50.0, "Shopping"),
        _rec(date(2024, 3, 8), 100.0, "Utilities"),
        _rec(date(2024, 2, 28), 500.0, "Healthcare"),
    ]
    stats = dashboard_stats(records, now)
    assert stats.total_spent == 185.0
    assert stats.today_spent == 35.0
    assert stats.today_count == 2
    # 2024-03-09 .. 2024-03-15 inclusive
    assert stats.avg_daily == pytest.approx(85.0 / 7)
    assert stats.top_category == "Utilities"
    assert stats.top_category_amount == 100.0


def test_dashboard_top_category_tie_uses_category_order():
    now = date(2024, 3, 15)
    shopping = _rec(date(2024, 3, 15), 10.0, "Shopping")
    food = _rec(date(2024, 3, 15), 10.0, "Food")
    assert dashboard_stats([shopping, food], now).top_category == "Food"
    assert dashboard_stats([food, shopping], now).top_category == "Food"


def test_dashboard_zero_amount_month_has_no_top_category():
    stats = dashboard_stats([_rec(date(2024, 3, 10), 0.0, "Utilities")], date(2024, 3, 15))
    assert stats.top_category == "None"
    assert stats.top_category_amount == 0


def test_statement_rows_running_balance():
    records = [
        _rec(date(2024, 3, 1), 100.0, note="Groceries at the market", id=1),
        _rec(date(2024, 3, 5), 50.0, "Transportation", id=2, created_at=datetime(2024, 3, 5, 8, 45)),
        _rec(date(2024, 3, 3), 25.0, "Other", id=3),
    ]
    rows = statement_rows(records, 1000.0)
    assert [r["date"] for r in rows] == ["2024-03-05", "2024-03-03", "2024-03-01"]
    assert [r["balance"] for r in rows] == [950.0, 925.0, 825.0]
    assert rows[0]["time"] == "08:45"
    assert rows[1]["time"] == "12:00"
    assert rows[1]["description"] == "No description"
    assert rows[2]["description"] == "Groceries at the mar"


def test_statement_rows_empty():
    assert statement_rows([], 1000.0) == []
