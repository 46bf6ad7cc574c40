import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from spendly.currency import format_amount
from spendly.db.models import BudgetConfig, BudgetStatus
from spendly.handlers.common import progress_bar, today
from spendly.services.budget_service import (
    InvalidBudgetError,
    evaluate_budget,
    get_budget_config,
    save_budget,
)
from spendly.services.expense_service import all_records

logger = logging.getLogger(__name__)
router = Router()

STATUS_ICONS = {
    "safe": "🟢",
    "moderate": "🔵",
    "warning": "🟡",
    "danger": "🟠",
    "exceeded": "🔴",
}

WINDOW_LABELS = {"daily": "Today", "weekly": "This week", "monthly": "This month"}


def format_budget_status(status: BudgetStatus) -> str:
    blocks = []
    for name, window in status.windows():
        lines = [
            f"{STATUS_ICONS[window.status_level]} {WINDOW_LABELS[name]}: "
            f"{format_amount(window.spent)} / {format_amount(window.budget_amount)}",
            f"  {progress_bar(window.display_percentage)} {window.percentage:.0f}% ({window.status_level})",
        ]
        if window.over_by > 0:
            lines.append(f"  Over by {format_amount(window.over_by)}")
        else:
            lines.append(f"  {format_amount(window.remaining)} left")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


@router.message(Command("budget"))
async def cmd_budget(message: Message):
    user_id = message.chat.id
    budget = await get_budget_config(user_id)
    records = await all_records(user_id)
    status = evaluate_budget(records, budget, today())

    await message.answer(
        "💰 Budget\n\n"
        + format_budget_status(status)
        + f"\n\nMonthly remaining: {format_amount(status.monthly.remaining)}"
    )


def _parse_budget_args(args: str | None) -> BudgetConfig | None:
    parts = (args or "").split()
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if len(values) == 1:
        return BudgetConfig.derived_from_monthly(values[0])
    if len(values) == 3:
        return BudgetConfig(monthly_budget=values[0], weekly_budget=values[1], daily_budget=values[2])
    return None


@router.message(Command("setbudget"))
async def cmd_setbudget(message: Message, command: CommandObject):
    parsed = _parse_budget_args(command.args)
    if parsed is None:
        await message.answer(
            "Usage:\n/setbudget 1000 — monthly budget, weekly and daily derived\n"
            "/setbudget 1000 250 35 — monthly, weekly and daily"
        )
        return

    try:
        budget = await save_budget(
            message.chat.id, parsed.monthly_budget, parsed.weekly_budget, parsed.daily_budget
        )
    except InvalidBudgetError as exc:
        await message.answer(str(exc))
        return

    await message.answer(
        "Budget saved:\n"
        f"  Monthly: {format_amount(budget.monthly_budget)}\n"
        f"  Weekly: {format_amount(budget.weekly_budget)}\n"
        f"  Daily: {format_amount(budget.daily_budget)}"
    )
