import logging
import math
from datetime import date, datetime

from spendly.categories import normalize_category
from spendly.config import settings
from spendly.db.database import get_db
from spendly.db.models import ExpenseRecord

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"amount", "category", "note", "date"})


class InvalidExpenseError(ValueError):
    pass


def parse_amount(value) -> float:
    """Lenient amount coercion: anything unusable counts as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


def parse_expense_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date.fromisoformat(value.strip().split("T")[0].split(" ")[0])
    raise ValueError(f"Invalid expense date: {value!r}")


def _parse_created_at(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def record_from_row(row) -> ExpenseRecord:
    data = dict(row)
    return ExpenseRecord(
        id=data.get("id"),
        user_id=data.get("user_id", 0),
        amount=parse_amount(data.get("amount")),
        category=normalize_category(data.get("category")),
        date=parse_expense_date(data.get("date")),
        note=data.get("note") or "",
        created_at=_parse_created_at(data.get("created_at")),
    )


async def add_expense(
    user_id: int,
    amount,
    category: str | None = None,
    note: str | None = None,
    expense_date=None,
    *,
    today: date,
) -> ExpenseRecord:
    value = parse_amount(amount)
    if value <= 0:
        raise InvalidExpenseError("Amount required")
    day = parse_expense_date(expense_date) if expense_date else today
    db = await get_db()
    cursor = await db.execute(
        "INSERT INTO expenses (user_id, amount, category, note, date) VALUES (?, ?, ?, ?, ?)",
        (user_id, value, normalize_category(category), note or "", day.isoformat()),
    )
    await db.commit()
    assert cursor.lastrowid is not None
    logger.info("Expense added", extra={"user_id": user_id})
    record = await get_expense(user_id, cursor.lastrowid)
    assert record is not None
    return record


async def list_expenses(user_id: int, limit: int | None = None) -> list[ExpenseRecord]:
    db = await get_db()
    cursor = await db.execute(
        "SELECT * FROM expenses WHERE user_id = ? ORDER BY date DESC, id DESC LIMIT ?",
        (user_id, limit or settings.recent_expense_limit),
    )
    rows = await cursor.fetchall()
    return [record_from_row(row) for row in rows]


async def all_records(user_id: int) -> list[ExpenseRecord]:
    db = await get_db()
    cursor = await db.execute("SELECT * FROM expenses WHERE user_id = ?", (user_id,))
    rows = await cursor.fetchall()
    return [record_from_row(row) for row in rows]


async def get_expense(user_id: int, expense_id: int) -> ExpenseRecord | None:
    db = await get_db()
    cursor = await db.execute(
        "SELECT * FROM expenses WHERE id = ? AND user_id = ?",
        (expense_id, user_id),
    )
    row = await cursor.fetchone()
    return record_from_row(row) if row else None


async def update_expense(user_id: int, expense_id: int, **fields) -> bool:
    fields = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
    if not fields:
        return False
    if "amount" in fields:
        fields["amount"] = parse_amount(fields["amount"])
        if fields["amount"] <= 0:
            raise InvalidExpenseError("Amount required")
    if "category" in fields:
        fields["category"] = normalize_category(fields["category"])
    if "note" in fields:
        fields["note"] = fields["note"] or ""
    if "date" in fields:
        fields["date"] = parse_expense_date(fields["date"]).isoformat()
    db = await get_db()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = [*fields.values(), expense_id, user_id]
    cursor = await db.execute(
        f"UPDATE expenses SET {set_clause} WHERE id = ? AND user_id = ?",
        values,
    )
    await db.commit()
    return cursor.rowcount > 0


async def delete_expense(user_id: int, expense_id: int) -> bool:
    db = await get_db()
    cursor = await db.execute(
        "DELETE FROM expenses WHERE id = ? AND user_id = ?",
        (expense_id, user_id),
    )
    await db.commit()
    if cursor.rowcount > 0:
        logger.info("Expense %s deleted", expense_id, extra={"user_id": user_id})
        return True
    return False
