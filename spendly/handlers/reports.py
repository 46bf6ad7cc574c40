import logging
import time
from pathlib import Path

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import FSInputFile, Message

from spendly.charts import report_chart
from spendly.currency import format_amount
from spendly.db.models import PeriodBucket
from spendly.handlers.common import progress_bar, today
from spendly.services.expense_service import all_records
from spendly.services.report_service import PERIODS, InvalidPeriodError, aggregate, dashboard_stats

logger = logging.getLogger(__name__)
router = Router()


def format_report(buckets: list[PeriodBucket], period: str) -> str:
    peak = max(b.total for b in buckets)
    lines = []
    for b in buckets:
        pct = (b.total / peak * 100) if peak > 0 else 0
        lines.append(f"{b.period_key}: {format_amount(b.total)} ({b.count} items)\n  {progress_bar(pct)}")
    return f"📈 {period.capitalize()} report\n\n" + "\n".join(lines)


@router.message(Command("report"))
async def cmd_report(message: Message, command: CommandObject):
    period = (command.args or "daily").strip().lower()
    records = await all_records(message.chat.id)

    started = time.monotonic()
    try:
        buckets = aggregate(records, period)
    except InvalidPeriodError:
        await message.answer(f"Unknown period. Use one of: {', '.join(PERIODS)}")
        return
    logger.debug(
        "Aggregated %d records",
        len(records),
        extra={
            "user_id": message.chat.id,
            "period": period,
            "latency_ms": round((time.monotonic() - started) * 1000, 2),
        },
    )

    if not buckets:
        await message.answer(f"No data available for {period} view.")
        return

    text = format_report(buckets, period)
    chart_path = await report_chart(buckets, period)
    if chart_path:
        try:
            await message.answer_photo(FSInputFile(chart_path), caption=text)
        finally:
            Path(chart_path).unlink(missing_ok=True)
    else:
        await message.answer(text)


@router.message(Command("stats"))
async def cmd_stats(message: Message):
    records = await all_records(message.chat.id)
    stats = dashboard_stats(records, today())

    top = (
        f"{stats.top_category} ({format_amount(stats.top_category_amount)})"
        if stats.top_category_amount > 0
        else stats.top_category
    )
    await message.answer(
        "📊 Dashboard\n\n"
        f"Spent this month: {format_amount(stats.total_spent)}\n"
        f"Today: {format_amount(stats.today_spent)} ({stats.today_count} expenses)\n"
        f"Daily average (7 days): {format_amount(stats.avg_daily)}\n"
        f"Top category: {top}"
    )
