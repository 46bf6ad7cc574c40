from collections.abc import Iterable
from datetime import date, datetime

from spendly.categories import CATEGORIES, NO_CATEGORY, normalize_category
from spendly.dates import as_date, same_month
from spendly.db.models import CategorySummary, ExpenseRecord


def summarize_categories(
    records: Iterable[ExpenseRecord],
    now: date | datetime,
) -> dict[str, CategorySummary]:
    """Per-category totals for the calendar month of ``now``.

    Every known category is present, zero-filled when it has no spending.
    """
    today = as_date(now)
    summary = {name: CategorySummary(name=name) for name in CATEGORIES}

    month_total = 0.0
    for record in records:
        if not same_month(record.date, today):
            continue
        entry = summary[normalize_category(record.category)]
        entry.total += record.amount
        entry.count += 1
        month_total += record.amount

    if month_total > 0:
        for entry in summary.values():
            entry.percentage = entry.total / month_total * 100
    return summary


def most_used_category(summary: dict[str, CategorySummary]) -> str:
    best: CategorySummary | None = None
    for entry in summary.values():
        if entry.count == 0:
            continue
        if best is None or entry.count > best.count or (entry.count == best.count and entry.total > best.total):
            best = entry
    return best.name if best else NO_CATEGORY


def highest_share(summary: dict[str, CategorySummary]) -> CategorySummary | None:
    best: CategorySummary | None = None
    for entry in summary.values():
        if entry.percentage > (best.percentage if best else 0.0):
            best = entry
    return best


def highest_share_category(summary: dict[str, CategorySummary]) -> str:
    best = highest_share(summary)
    return best.name if best else NO_CATEGORY


def active_categories(summary: dict[str, CategorySummary]) -> list[CategorySummary]:
    """Categories with at least one expense this month, largest total first."""
    return sorted((e for e in summary.values() if e.count > 0), key=lambda e: e.total, reverse=True)


def month_total(summary: dict[str, CategorySummary]) -> float:
    return sum(e.total for e in summary.values())
