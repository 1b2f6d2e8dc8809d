"""Database access for users, expenses and budgets.

Every expense and budget query is filtered on ``owner_id`` so a record that
belongs to someone else is indistinguishable from a missing one.
"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget import month_range, year_range
from constants import ExpenseCategory, USER_ROLE
from database import Budget, Expense, User
from schemas import ExpenseCreate, ExpenseUpdate


# Users


def create_user(
    db: Session, *, name: str, email: str, password_hash: str, role: str = USER_ROLE
) -> Optional[User]:
    """Insert a user, or return None when the email is already taken."""
    user = User(name=name, email=email.lower(), password=password_hash, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


# Expenses


def create_expense(db: Session, owner_id: int, data: ExpenseCreate) -> Expense:
    expense = Expense(
        title=data.title,
        category=data.category.value,
        amount=data.amount,
        date=data.date,
        owner_id=owner_id,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def list_expenses(
    db: Session,
    owner_id: int,
    category: Optional[ExpenseCategory] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> list[Expense]:
    """Return the owner's expenses, newest first.

    A month without a year refers to the current year; a year on its own
    covers the whole year.
    """
    query = db.query(Expense).filter(Expense.owner_id == owner_id)

    if category:
        query = query.filter(Expense.category == ExpenseCategory(category).value)

    if month is not None:
        start, end = month_range(month, year or (today or date.today()).year)
        query = query.filter(Expense.date >= start, Expense.date < end)
    elif year is not None:
        start, end = year_range(year)
        query = query.filter(Expense.date >= start, Expense.date < end)

    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def get_expense(db: Session, owner_id: int, expense_id: int) -> Optional[Expense]:
    return (
        db.query(Expense)
        .filter(Expense.id == expense_id, Expense.owner_id == owner_id)
        .first()
    )


def update_expense(
    db: Session, owner_id: int, expense_id: int, data: ExpenseUpdate
) -> Optional[Expense]:
    expense = get_expense(db, owner_id, expense_id)
    if not expense:
        return None

    changes = data.model_dump(exclude_unset=True)
    if "category" in changes:
        changes["category"] = ExpenseCategory(changes["category"]).value
    for field, value in changes.items():
        setattr(expense, field, value)

    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, owner_id: int, expense_id: int) -> bool:
    expense = get_expense(db, owner_id, expense_id)
    if not expense:
        return False
    db.delete(expense)
    db.commit()
    return True


def expenses_by_category(db: Session, owner_id: int) -> list[dict]:
    """Total and count per category, largest total first.

    Categories without expenses are included with zeros.
    """
    rows = (
        db.query(
            Expense.category,
            func.sum(Expense.amount).label("total"),
            func.count(Expense.id).label("count"),
        )
        .filter(Expense.owner_id == owner_id)
        .group_by(Expense.category)
        .all()
    )
    totals = {row.category: (row.total or 0.0, row.count) for row in rows}

    chart = []
    for category in ExpenseCategory:
        total, count = totals.get(category.value, (0.0, 0))
        chart.append({"category": category.value, "total": round(total, 2), "count": count})

    # sort is stable: ties keep enumeration order
    chart.sort(key=lambda item: item["total"], reverse=True)
    return chart


def monthly_expense_total(db: Session, owner_id: int, month: int, year: int) -> float:
    start, end = month_range(month, year)
    total = (
        db.query(func.sum(Expense.amount))
        .filter(
            Expense.owner_id == owner_id,
            Expense.date >= start,
            Expense.date < end,
        )
        .scalar()
    )
    return float(total or 0.0)


# Budgets


def get_budget(db: Session, owner_id: int, month: int, year: int) -> Optional[Budget]:
    return (
        db.query(Budget)
        .filter(Budget.owner_id == owner_id, Budget.month == month, Budget.year == year)
        .first()
    )


def upsert_budget(db: Session, owner_id: int, amount: float, month: int, year: int) -> Budget:
    """Create the budget for a period, or overwrite its amount if one exists."""
    existing = get_budget(db, owner_id, month, year)
    if existing:
        existing.amount = amount
        db.commit()
        db.refresh(existing)
        return existing

    budget = Budget(amount=amount, month=month, year=year, owner_id=owner_id)
    db.add(budget)
    try:
        db.commit()
    except IntegrityError:
        # another request created the row first; last write wins
        db.rollback()
        budget = get_budget(db, owner_id, month, year)
        budget.amount = amount
        db.commit()
    db.refresh(budget)
    return budget
