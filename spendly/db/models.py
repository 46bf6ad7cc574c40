from dataclasses import dataclass
from datetime import date, datetime

WEEKS_PER_MONTH = 4.33
DAYS_PER_MONTH = 30


@dataclass(slots=True)
class ExpenseRecord:
    id: int | None
    user_id: int
    amount: float
    category: str
    date: date
    note: str = ""
    created_at: datetime | None = None


@dataclass(slots=True)
class BudgetConfig:
    monthly_budget: float = 1000.0
    weekly_budget: float = 250.0
    daily_budget: float = 35.0

    @classmethod
    def derived_from_monthly(cls, monthly: float) -> "BudgetConfig":
        """Weekly and daily amounts suggested from a monthly figure. Nothing keeps them in sync later."""
        return cls(
            monthly_budget=monthly,
            weekly_budget=round(monthly / WEEKS_PER_MONTH, 2),
            daily_budget=round(monthly / DAYS_PER_MONTH, 2),
        )


@dataclass(slots=True)
class PeriodBucket:
    period_key: str
    total: float = 0.0
    count: int = 0


@dataclass(slots=True)
class WindowStatus:
    spent: float
    budget_amount: float
    percentage: float
    remaining: float
    status_level: str

    @property
    def display_percentage(self) -> float:
        return min(self.percentage, 100.0)

    @property
    def over_by(self) -> float:
        return max(self.spent - self.budget_amount, 0.0)


@dataclass(slots=True)
class BudgetStatus:
    daily: WindowStatus
    weekly: WindowStatus
    monthly: WindowStatus

    def windows(self) -> list[tuple[str, WindowStatus]]:
        return [("daily", self.daily), ("weekly", self.weekly), ("monthly", self.monthly)]


@dataclass(slots=True)
class CategorySummary:
    name: str
    total: float = 0.0
    count: int = 0
    percentage: float = 0.0


@dataclass(slots=True)
class DashboardStats:
    total_spent: float
    today_spent: float
    today_count: int
    avg_daily: float
    top_category: str
    top_category_amount: float
