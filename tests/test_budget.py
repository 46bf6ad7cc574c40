import pytest

from spendly.db.models import BudgetConfig
from spendly.services.budget_service import InvalidBudgetError, get_budget_config, save_budget

USER = 100


async def test_default_budget_created_on_first_access(test_db):
    budget = await get_budget_config(USER)
    assert budget == BudgetConfig(monthly_budget=1000.0, weekly_budget=250.0, daily_budget=35.0)

    cursor = await test_db.execute("SELECT COUNT(*) FROM budgets WHERE user_id = ?", (USER,))
    assert (await cursor.fetchone())[0] == 1

    await get_budget_config(USER)
    cursor = await test_db.execute("SELECT COUNT(*) FROM budgets WHERE user_id = ?", (USER,))
    assert (await cursor.fetchone())[0] == 1


async def test_save_and_get_budget():
    saved = await save_budget(USER, 2000.0, 400.0, 50.0)
    assert saved.weekly_budget == 400.0
    got = await get_budget_config(USER)
    assert got == saved


async def test_save_overwrites_existing():
    await get_budget_config(USER)
    await save_budget(USER, 1500.0, 300.0, 40.0)
    await save_budget(USER, 1200.0, 500.0, 10.0)
    got = await get_budget_config(USER)
    assert got.monthly_budget == 1200.0
    assert got.weekly_budget == 500.0
    assert got.daily_budget == 10.0


async def test_budgets_are_independent():
    saved = await save_budget(USER, 1000.0, 900.0, 5.0)
    assert saved.weekly_budget == 900.0


@pytest.mark.parametrize("values", [(0, 250.0, 35.0), (1000.0, -1.0, 35.0), (1000.0, 250.0, 0)])
async def test_non_positive_rejected(values):
    with pytest.raises(InvalidBudgetError):
        await save_budget(USER, *values)


async def test_budgets_per_user():
    await save_budget(1, 500.0, 100.0, 10.0)
    other = await get_budget_config(2)
    assert other.monthly_budget == 1000.0
