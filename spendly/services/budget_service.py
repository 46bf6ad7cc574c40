import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from spendly.config import settings
from spendly.dates import as_date, week_start
from spendly.db.database import get_db
from spendly.db.models import BudgetConfig, BudgetStatus, ExpenseRecord, WindowStatus

logger = logging.getLogger(__name__)

STATUS_LEVELS: tuple[str, ...] = ("safe", "moderate", "warning", "danger", "exceeded")

# Checked top-down, first match wins.
STATUS_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (100.0, "exceeded"),
    (90.0, "danger"),
    (75.0, "warning"),
    (50.0, "moderate"),
)

ALERT_APPROACHING_RATIO = 0.8


class InvalidBudgetError(ValueError):
    pass


def default_budget() -> BudgetConfig:
    return BudgetConfig(
        monthly_budget=settings.default_monthly_budget,
        weekly_budget=settings.default_weekly_budget,
        daily_budget=settings.default_daily_budget,
    )


def classify_status(percentage: float) -> str:
    for threshold, level in STATUS_THRESHOLDS:
        if percentage >= threshold:
            return level
    return "safe"


def week_bounds(now: date | datetime) -> tuple[date, date]:
    """Monday through Sunday of the week containing ``now``."""
    start = week_start(as_date(now))
    return start, start + timedelta(days=6)


def month_bounds(now: date | datetime) -> tuple[date, date]:
    today = as_date(now)
    start = today.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def spent_between(records: Iterable[ExpenseRecord], start: date, end: date) -> float:
    return sum((r.amount for r in records if start <= r.date <= end), 0.0)


def window_status(spent: float, budget_amount: float | None) -> WindowStatus:
    budget_amount = budget_amount or 0.0
    percentage = (spent / budget_amount * 100) if budget_amount > 0 else 0.0
    return WindowStatus(
        spent=spent,
        budget_amount=budget_amount,
        percentage=percentage,
        remaining=budget_amount - spent,
        status_level=classify_status(percentage),
    )


def evaluate_budget(
    records: Iterable[ExpenseRecord],
    budget: BudgetConfig,
    now: date | datetime,
) -> BudgetStatus:
    records = list(records)
    today = as_date(now)
    week = week_bounds(today)
    month = month_bounds(today)
    return BudgetStatus(
        daily=window_status(spent_between(records, today, today), budget.daily_budget),
        weekly=window_status(spent_between(records, *week), budget.weekly_budget),
        monthly=window_status(spent_between(records, *month), budget.monthly_budget),
    )


def daily_alert(
    records: Iterable[ExpenseRecord],
    budget: BudgetConfig,
    new_amount: float,
    now: date | datetime,
) -> str | None:
    """Alert level for today's spend once ``new_amount`` is added, or None."""
    limit = budget.daily_budget or 0.0
    if limit <= 0:
        return None
    today = as_date(now)
    total = spent_between(records, today, today) + new_amount
    if total > limit:
        return "exceeded"
    if total > limit * ALERT_APPROACHING_RATIO:
        return "approaching"
    return None


def _budget_from_row(row) -> BudgetConfig:
    return BudgetConfig(
        monthly_budget=row["monthly_budget"],
        weekly_budget=row["weekly_budget"],
        daily_budget=row["daily_budget"],
    )


async def get_budget_config(user_id: int) -> BudgetConfig:
    db = await get_db()
    cursor = await db.execute(
        "SELECT monthly_budget, weekly_budget, daily_budget FROM budgets WHERE user_id = ?",
        (user_id,),
    )
    row = await cursor.fetchone()
    if row:
        return _budget_from_row(row)

    budget = default_budget()
    await db.execute(
        "INSERT INTO budgets (user_id, monthly_budget, weekly_budget, daily_budget) VALUES (?, ?, ?, ?)",
        (user_id, budget.monthly_budget, budget.weekly_budget, budget.daily_budget),
    )
    await db.commit()
    logger.info("Created default budget", extra={"user_id": user_id})
    return budget


async def save_budget(user_id: int, monthly: float, weekly: float, daily: float) -> BudgetConfig:
    budget = BudgetConfig(monthly_budget=monthly, weekly_budget=weekly, daily_budget=daily)
    if not all(v and v > 0 for v in (monthly, weekly, daily)):
        raise InvalidBudgetError("Budget amounts must be positive")

    db = await get_db()
    await db.execute(
        """INSERT INTO budgets (user_id, monthly_budget, weekly_budget, daily_budget)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id) DO UPDATE SET
            monthly_budget = excluded.monthly_budget,
            weekly_budget = excluded.weekly_budget,
            daily_budget = excluded.daily_budget,
            updated_at = CURRENT_TIMESTAMP""",
        (user_id, budget.monthly_budget, budget.weekly_budget, budget.daily_budget),
    )
    await db.commit()
    logger.info("Budget updated", extra={"user_id": user_id})
    return budget
