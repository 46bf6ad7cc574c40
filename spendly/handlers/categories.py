from pathlib import Path

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import FSInputFile, Message

from spendly.categories import category_icon
from spendly.charts import category_chart
from spendly.currency import format_amount
from spendly.handlers.common import today
from spendly.services.category_service import (
    active_categories,
    highest_share,
    month_total,
    most_used_category,
    summarize_categories,
)
from spendly.services.expense_service import all_records

router = Router()


@router.message(Command("categories"))
async def cmd_categories(message: Message):
    now = today()
    records = await all_records(message.chat.id)
    summary = summarize_categories(records, now)
    active = active_categories(summary)

    if not active:
        await message.answer("No expenses recorded this month.\nAdd some expenses to see category breakdown.")
        return

    lines = [
        f"{category_icon(c.name)} {c.name}: {format_amount(c.total)} "
        f"({c.count} transaction{'s' if c.count != 1 else ''}, {c.percentage:.1f}%)"
        for c in active
    ]
    share = highest_share(summary)
    share_line = f"{share.name} ({share.percentage:.1f}%)" if share else "None"
    text = (
        f"🏷 Categories — {now.strftime('%B %Y')}\n\n"
        + "\n".join(lines)
        + f"\n\nCategories used: {len(active)}"
        + f"\nMost used: {most_used_category(summary)}"
        + f"\nHighest share: {share_line}"
        + f"\nTotal: {format_amount(month_total(summary))}"
    )

    chart_path = await category_chart(active)
    if chart_path:
        try:
            await message.answer_photo(FSInputFile(chart_path), caption=text)
        finally:
            Path(chart_path).unlink(missing_ok=True)
    else:
        await message.answer(text)
