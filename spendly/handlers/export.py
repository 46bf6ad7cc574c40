import csv
import io
import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import BufferedInputFile, Message

from spendly.config import settings
from spendly.handlers.common import today
from spendly.services.budget_service import get_budget_config, month_bounds
from spendly.services.expense_service import all_records
from spendly.services.report_service import statement_rows

logger = logging.getLogger(__name__)
router = Router()

STATEMENT_HEADER = ["Date", "Time", "Description", "Category", "Amount", "Balance"]


def build_statement_csv(rows: list[dict]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(STATEMENT_HEADER)
    for row in rows:
        writer.writerow(
            [
                row["date"],
                row["time"],
                row["description"],
                row["category"],
                f"{row['amount']:.2f}",
                f"{row['balance']:.2f}",
            ]
        )
    return buf.getvalue()


@router.message(Command("export"))
async def cmd_export(message: Message):
    user_id = message.chat.id
    start, end = month_bounds(today())
    records = [r for r in await all_records(user_id) if start <= r.date <= end]

    if not records:
        await message.answer(f"No expenses for {start.strftime('%B %Y')}.")
        return

    budget = await get_budget_config(user_id)
    rows = statement_rows(records, budget.monthly_budget)
    file_bytes = build_statement_csv(rows).encode("utf-8")
    filename = f"statement_{start.strftime('%Y_%m')}.csv"
    logger.info("Statement exported", extra={"user_id": user_id, "handler": "export"})
    await message.answer_document(
        BufferedInputFile(file_bytes, filename=filename),
        caption=(
            f"Statement for {start.strftime('%B %Y')} ({len(rows)} records, "
            f"closing balance {rows[-1]['balance']:.2f} {settings.currency})"
        ),
    )
