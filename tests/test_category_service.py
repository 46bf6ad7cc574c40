from datetime import date

import pytest

from spendly.categories import CATEGORIES
from spendly.db.models import CategorySummary, ExpenseRecord
from spendly.services.category_service import (
    active_categories,
    highest_share,
    highest_share_category,
    month_total,
    most_used_category,
    summarize_categories,
)

NOW = date(2024, 3, 15)


def _rec(day: date, amount: float, category: str) -> ExpenseRecord:
    return ExpenseRecord(id=None, user_id=1, amount=amount, category=category, date=day)


def test_empty_input_has_all_categories_zeroed():
    summary = summarize_categories([], NOW)
    assert list(summary) == list(CATEGORIES)
    for entry in summary.values():
        assert (entry.total, entry.count, entry.percentage) == (0, 0, 0)


def test_totals_and_percentages_for_current_month():
    records = [
        _rec(date(2024, 3, 1), 30.0, "Food"),
        _rec(date(2024, 3, 2), 10.0, "Food"),
        _rec(date(2024, 3, 3), 60.0, "Utilities"),
        _rec(date(2024, 2, 29), 1000.0, "Food"),
        _rec(date(2023, 3, 5), 1000.0, "Shopping"),
    ]
    summary = summarize_categories(records, NOW)
    assert summary["Food"].total == 40.0
    assert summary["Food"].count == 2
    assert summary["Food"].percentage == pytest.approx(40.0)
    assert summary["Utilities"].percentage == pytest.approx(60.0)
    assert summary["Shopping"].count == 0
    assert month_total(summary) == 100.0
    assert sum(e.percentage for e in summary.values()) == pytest.approx(100.0)


def test_unknown_category_counts_as_other():
    summary = summarize_categories([_rec(date(2024, 3, 4), 12.0, "Pets")], NOW)
    assert summary["Other"].total == 12.0
    assert "Pets" not in summary


def test_most_used_tie_broken_by_total():
    summary = {
        "Food": CategorySummary("Food", total=50.0, count=3),
        "Shopping": CategorySummary("Shopping", total=80.0, count=3),
        "Other": CategorySummary("Other", total=200.0, count=1),
    }
    assert most_used_category(summary) == "Shopping"


def test_most_used_defaults_to_none():
    assert most_used_category(summarize_categories([], NOW)) == "None"


def test_highest_share():
    records = [
        _rec(date(2024, 3, 1), 5.0, "Food"),
        _rec(date(2024, 3, 1), 5.0, "Food"),
        _rec(date(2024, 3, 1), 5.0, "Food"),
        _rec(date(2024, 3, 2), 85.0, "Healthcare"),
    ]
    summary = summarize_categories(records, NOW)
    assert most_used_category(summary) == "Food"
    assert highest_share_category(summary) == "Healthcare"
    assert highest_share(summary).percentage == pytest.approx(85.0)


def test_highest_share_defaults_to_none():
    summary = summarize_categories([], NOW)
    assert highest_share(summary) is None
    assert highest_share_category(summary) == "None"


def test_active_categories_sorted_by_total():
    records = [
        _rec(date(2024, 3, 1), 5.0, "Food"),
        _rec(date(2024, 3, 1), 25.0, "Entertainment"),
        _rec(date(2024, 3, 1), 10.0, "Utilities"),
    ]
    names = [c.name for c in active_categories(summarize_categories(records, NOW))]
    assert names == ["Entertainment", "Utilities", "Food"]


def test_zero_amount_expense_still_makes_category_active():
    records = [
        _rec(date(2024, 3, 1), 0.0, "Education"),
        _rec(date(2024, 3, 2), 12.0, "Food"),
    ]
    active = active_categories(summarize_categories(records, NOW))
    assert [c.name for c in active] == ["Food", "Education"]
    assert active[1].count == 1
    assert active[1].total == 0
