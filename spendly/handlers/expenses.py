import logging
import re
from datetime import date

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from spendly.categories import category_icon, is_known_category, normalize_category
from spendly.currency import format_amount
from spendly.db.models import ExpenseRecord
from spendly.handlers.common import today
from spendly.services.budget_service import daily_alert, get_budget_config
from spendly.services.expense_service import (
    EDITABLE_FIELDS,
    add_expense,
    all_records,
    delete_expense,
    list_expenses,
    parse_amount,
    update_expense,
)

logger = logging.getLogger(__name__)
router = Router()

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

LIST_LIMIT = 10


def _parse_add_args(args: str | None) -> tuple[float, str, str, date | None] | None:
    """Split ``<amount> [category] [note...] [YYYY-MM-DD]``. None when no usable amount."""
    tokens = (args or "").split()
    if not tokens:
        return None
    amount = parse_amount(tokens[0])
    if amount <= 0:
        return None
    rest = tokens[1:]

    expense_date = None
    for i, token in enumerate(rest):
        if _DATE_RE.match(token):
            try:
                expense_date = date.fromisoformat(token)
            except ValueError:
                return None
            del rest[i]
            break

    category = "Other"
    if rest and is_known_category(rest[0]):
        category = normalize_category(rest.pop(0))
    return amount, category, " ".join(rest), expense_date


def format_expense_line(record: ExpenseRecord) -> str:
    note = f" — {record.note}" if record.note else ""
    return (
        f"#{record.id} {record.date.isoformat()} {category_icon(record.category)} "
        f"{record.category}: {format_amount(record.amount)}{note}"
    )


@router.message(Command("add"))
async def cmd_add(message: Message, command: CommandObject):
    parsed = _parse_add_args(command.args)
    if not parsed:
        await message.answer("Usage: /add <amount> [category] [note] [YYYY-MM-DD]")
        return

    amount, category, note, expense_date = parsed
    user_id = message.chat.id
    now = today()

    records = await all_records(user_id)
    budget = await get_budget_config(user_id)
    alert = daily_alert(records, budget, amount, now)

    record = await add_expense(user_id, amount, category, note, expense_date, today=now)
    logger.info("Expense logged", extra={"user_id": user_id, "handler": "add"})

    text = f"Expense added.\n{format_expense_line(record)}"
    if record.date == now and alert == "exceeded":
        text += f"\n\n⚠️ Daily budget exceeded! Budget: {format_amount(budget.daily_budget)}"
    elif record.date == now and alert == "approaching":
        text += f"\n\n⚠️ Approaching daily budget limit of {format_amount(budget.daily_budget)}"
    await message.answer(text)


@router.message(Command("list"))
async def cmd_list(message: Message):
    records = await list_expenses(message.chat.id, limit=LIST_LIMIT)
    if not records:
        await message.answer("No expenses recorded yet. Use /add to log one.")
        return
    lines = [format_expense_line(r) for r in records]
    await message.answer("🧾 Recent expenses\n\n" + "\n".join(lines))


@router.message(Command("edit"))
async def cmd_edit(message: Message, command: CommandObject):
    parts = (command.args or "").split(maxsplit=2)
    usage = "Usage: /edit <id> <amount|category|note|date> <value>"
    if len(parts) < 2:
        await message.answer(usage)
        return
    try:
        expense_id = int(parts[0])
    except ValueError:
        await message.answer(usage)
        return

    field = parts[1].lower()
    value = parts[2] if len(parts) > 2 else ""
    if field not in EDITABLE_FIELDS or (field != "note" and not value):
        await message.answer(usage)
        return

    try:
        updated = await update_expense(message.chat.id, expense_id, **{field: value})
    except ValueError as exc:
        await message.answer(f"Could not update expense: {exc}")
        return

    if updated:
        await message.answer(f"Expense #{expense_id} updated.")
    else:
        await message.answer("Expense not found.")


@router.message(Command("delete"))
async def cmd_delete(message: Message, command: CommandObject):
    try:
        expense_id = int((command.args or "").strip())
    except ValueError:
        await message.answer("Usage: /delete <id>")
        return

    if await delete_expense(message.chat.id, expense_id):
        await message.answer(f"Expense #{expense_id} deleted.")
    else:
        await message.answer("Expense not found.")
