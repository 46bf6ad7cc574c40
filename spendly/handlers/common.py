import logging
from datetime import date

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from spendly.categories import categories_str

logger = logging.getLogger(__name__)
router = Router()


def today() -> date:
    """The single clock read for request handling; services receive the value."""
    return date.today()


def progress_bar(pct: float, width: int = 10) -> str:
    filled = max(min(int(pct / 100 * width), width), 0)
    return "█" * filled + "░" * (width - filled)


@router.message(Command("start"))
async def cmd_start(message: Message):
    await message.answer(
        "Welcome to Spendly, your personal expense tracker!\n\n"
        "Log an expense:\n"
        "  /add 2500 food lunch with team\n"
        "  /add 1200 transportation 2024-03-01\n\n"
        "Set a budget with /setbudget and check progress with /budget.\n\n"
        "Type /help for all commands."
    )


@router.message(Command("help"))
async def cmd_help(message: Message):
    await message.answer(
        "Expenses:\n"
        "  /add <amount> [category] [note] [YYYY-MM-DD]\n"
        "  /list — recent expenses\n"
        "  /edit <id> <amount|category|note|date> <value>\n"
        "  /delete <id>\n\n"
        "Budget:\n"
        "  /budget — daily, weekly and monthly progress\n"
        "  /setbudget <monthly> — derive weekly and daily\n"
        "  /setbudget <monthly> <weekly> <daily>\n\n"
        "Reports:\n"
        "  /report [daily|weekly|monthly]\n"
        "  /categories — this month by category\n"
        "  /stats — dashboard numbers\n"
        "  /export — CSV statement for this month\n\n"
        f"Categories: {categories_str()}"
    )
