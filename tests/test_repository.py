from __future__ import annotations

from datetime import date

import pytest

import repository
from constants import EXPENSE_CATEGORIES, ExpenseCategory
from database import Budget, User
from schemas import ExpenseCreate, ExpenseUpdate


@pytest.fixture
def owner(db):
    return repository.create_user(db, name="Ada", email="Ada@Example.com", password_hash="x")


@pytest.fixture
def stranger(db):
    return repository.create_user(db, name="Bob", email="bob@example.com", password_hash="x")


def _add(db, owner_id, title, category, amount, when):
    return repository.create_expense(
        db,
        owner_id,
        ExpenseCreate(title=title, category=category, amount=amount, date=when),
    )


def test_create_user_lowercases_email(db, owner):
    assert owner.email == "ada@example.com"
    assert repository.get_user_by_email(db, "ADA@example.com").id == owner.id


def test_list_expenses_filters_and_sorts_newest_first(db, owner):
    _add(db, owner.id, "Lunch", "Food", 12.5, date(2024, 10, 3))
    _add(db, owner.id, "Bus", "Transport", 2.0, date(2024, 10, 20))
    _add(db, owner.id, "Dinner", "Food", 30.0, date(2024, 11, 1))
    _add(db, owner.id, "Old", "Food", 5.0, date(2023, 10, 5))

    all_items = repository.list_expenses(db, owner.id)
    assert [e.title for e in all_items] == ["Dinner", "Bus", "Lunch", "Old"]

    october = repository.list_expenses(db, owner.id, month=10, year=2024)
    assert [e.title for e in october] == ["Bus", "Lunch"]

    food_october = repository.list_expenses(
        db, owner.id, category=ExpenseCategory.FOOD, month=10, year=2024
    )
    assert [e.title for e in food_october] == ["Lunch"]

    year_2023 = repository.list_expenses(db, owner.id, year=2023)
    assert [e.title for e in year_2023] == ["Old"]


def test_month_without_year_uses_current_year(db, owner):
    _add(db, owner.id, "This year", "Other", 1.0, date(2024, 4, 10))
    _add(db, owner.id, "Last year", "Other", 1.0, date(2023, 4, 10))

    result = repository.list_expenses(db, owner.id, month=4, today=date(2024, 6, 1))

    assert [e.title for e in result] == ["This year"]


def test_expenses_are_scoped_to_owner(db, owner, stranger):
    expense = _add(db, owner.id, "Lunch", "Food", 12.5, date(2024, 10, 3))

    assert repository.get_expense(db, stranger.id, expense.id) is None
    assert repository.update_expense(db, stranger.id, expense.id, ExpenseUpdate(amount=1)) is None
    assert repository.delete_expense(db, stranger.id, expense.id) is False
    assert repository.list_expenses(db, stranger.id) == []
    assert repository.get_expense(db, owner.id, expense.id).amount == 12.5


def test_update_expense_changes_only_supplied_fields(db, owner):
    expense = _add(db, owner.id, "Lunch", "Food", 12.5, date(2024, 10, 3))

    updated = repository.update_expense(
        db, owner.id, expense.id, ExpenseUpdate(amount=20, category="Other")
    )

    assert updated.amount == 20
    assert updated.category == "Other"
    assert updated.title == "Lunch"
    assert updated.date == date(2024, 10, 3)


def test_delete_expense(db, owner):
    expense = _add(db, owner.id, "Lunch", "Food", 12.5, date(2024, 10, 3))

    assert repository.delete_expense(db, owner.id, expense.id) is True
    assert repository.get_expense(db, owner.id, expense.id) is None
    assert repository.delete_expense(db, owner.id, expense.id) is False


def test_expenses_by_category_includes_every_category(db, owner, stranger):
    _add(db, owner.id, "Lunch", "Food", 10.0, date(2024, 10, 3))
    _add(db, owner.id, "Dinner", "Food", 15.333, date(2024, 10, 4))
    _add(db, owner.id, "Power", "Utilities", 60.0, date(2024, 10, 5))
    _add(db, stranger.id, "Taxi", "Transport", 99.0, date(2024, 10, 5))

    chart = repository.expenses_by_category(db, owner.id)

    assert sorted(item["category"] for item in chart) == sorted(EXPENSE_CATEGORIES)
    assert chart[0] == {"category": "Utilities", "total": 60.0, "count": 1}
    assert chart[1] == {"category": "Food", "total": 25.33, "count": 2}
    assert chart[2:] == [
        {"category": "Transport", "total": 0.0, "count": 0},
        {"category": "Other", "total": 0.0, "count": 0},
    ]


def test_expenses_by_category_for_user_without_expenses(db, owner):
    chart = repository.expenses_by_category(db, owner.id)

    assert [item["category"] for item in chart] == EXPENSE_CATEGORIES
    assert all(item["total"] == 0 and item["count"] == 0 for item in chart)


def test_monthly_expense_total_uses_half_open_range(db, owner):
    _add(db, owner.id, "First", "Food", 10.0, date(2024, 10, 1))
    _add(db, owner.id, "Last", "Food", 5.0, date(2024, 10, 31))
    _add(db, owner.id, "Next", "Food", 100.0, date(2024, 11, 1))

    assert repository.monthly_expense_total(db, owner.id, 10, 2024) == 15.0
    assert repository.monthly_expense_total(db, owner.id, 9, 2024) == 0.0


def test_upsert_budget_twice_keeps_one_row_with_latest_amount(db, owner):
    first = repository.upsert_budget(db, owner.id, 100.0, 10, 2024)
    second = repository.upsert_budget(db, owner.id, 250.0, 10, 2024)

    assert first.id == second.id
    rows = db.query(Budget).filter(Budget.owner_id == owner.id).all()
    assert len(rows) == 1
    assert rows[0].amount == 250.0


def test_budgets_are_per_owner_and_period(db, owner, stranger):
    repository.upsert_budget(db, owner.id, 100.0, 10, 2024)
    repository.upsert_budget(db, owner.id, 80.0, 11, 2024)
    repository.upsert_budget(db, stranger.id, 5.0, 10, 2024)

    assert repository.get_budget(db, owner.id, 10, 2024).amount == 100.0
    assert repository.get_budget(db, owner.id, 11, 2024).amount == 80.0
    assert repository.get_budget(db, stranger.id, 10, 2024).amount == 5.0
    assert repository.get_budget(db, stranger.id, 11, 2024) is None


def test_create_user_with_taken_email_returns_none(db, owner):
    duplicate = repository.create_user(
        db, name="Ada again", email="ada@example.com", password_hash="y"
    )

    assert duplicate is None
    assert db.query(User).filter(User.email == "ada@example.com").count() == 1


def test_upsert_budget_after_losing_insert_race(db, owner, monkeypatch):
    # the competing request has already committed its row
    db.add(Budget(amount=100.0, month=10, year=2024, owner_id=owner.id))
    db.commit()

    real_get_budget = repository.get_budget
    calls = []

    def stale_then_real(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return None
        return real_get_budget(*args, **kwargs)

    monkeypatch.setattr(repository, "get_budget", stale_then_real)

    budget = repository.upsert_budget(db, owner.id, 250.0, 10, 2024)

    assert len(calls) == 2
    assert budget.amount == 250.0
    rows = db.query(Budget).filter(Budget.owner_id == owner.id).all()
    assert len(rows) == 1
    assert rows[0].amount == 250.0
