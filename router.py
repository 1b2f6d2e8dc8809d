from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

import repository
from auth import get_current_user
from budget import build_summary, resolve_period
from constants import ExpenseCategory, MIN_YEAR, MAX_YEAR
from database import get_db, User
from schemas import (
    BudgetResponse,
    BudgetSummary,
    BudgetUpsert,
    CategoryTotal,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
)
from utils import send_response


router = APIRouter()

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def build_filter_message(
    category: Optional[ExpenseCategory],
    month: Optional[int],
    year: Optional[int],
    today: Optional[date] = None,
) -> str:
    filters = []
    if category:
        filters.append(f"category: {ExpenseCategory(category).value}")
    if month:
        filters.append(f"month: {MONTH_NAMES[month - 1]} {year or (today or date.today()).year}")
    elif year:
        filters.append(f"year: {year}")

    if not filters:
        return "Expenses retrieved successfully"
    return f"Expenses retrieved successfully (filtered by: {', '.join(filters)})"


def _summary(db: Session, owner_id: int, month: int, year: int) -> BudgetSummary:
    budget = repository.get_budget(db, owner_id, month, year)
    total = repository.monthly_expense_total(db, owner_id, month, year)
    summary = build_summary(budget, total, month, year)
    if budget is not None:
        summary["budget"] = BudgetResponse.model_validate(budget)
    return BudgetSummary(**summary)


# expenses


@router.get("/expenses/chart")
async def get_expenses_chart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    chart = repository.expenses_by_category(db, current_user.id)
    return send_response(
        "Chart data retrieved successfully",
        [CategoryTotal(**item) for item in chart],
    )


@router.get("/expenses")
async def get_expenses(
    category: Optional[ExpenseCategory] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses = repository.list_expenses(
        db, current_user.id, category=category, month=month, year=year
    )
    return send_response(
        build_filter_message(category, month, year),
        [ExpenseResponse.model_validate(expense) for expense in expenses],
        count=len(expenses),
        filters={
            "category": category.value if category else None,
            "month": month,
            "year": year,
        },
    )


@router.post("/expenses", status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_expense = repository.create_expense(db, current_user.id, expense)
    return send_response(
        "Expense created successfully", ExpenseResponse.model_validate(db_expense)
    )


@router.get("/expenses/{expense_id}")
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = repository.get_expense(db, current_user.id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return send_response(
        "Expense retrieved successfully", ExpenseResponse.model_validate(expense)
    )


@router.put("/expenses/{expense_id}")
async def update_expense(
    expense_id: int,
    expense: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = repository.update_expense(db, current_user.id, expense_id, expense)
    if not updated:
        raise HTTPException(status_code=404, detail="Expense not found")
    return send_response(
        "Expense updated successfully", ExpenseResponse.model_validate(updated)
    )


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not repository.delete_expense(db, current_user.id, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return send_response("Expense deleted successfully")


# budgets


@router.get("/budgets")
async def get_budget_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    month, year = resolve_period(month, year)
    return send_response(
        "Budget summary retrieved successfully",
        _summary(db, current_user.id, month, year),
    )


@router.put("/budgets")
async def upsert_budget(
    payload: BudgetUpsert,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    month, year = resolve_period(payload.month, payload.year)
    repository.upsert_budget(db, current_user.id, payload.amount, month, year)
    return send_response(
        "Budget saved successfully", _summary(db, current_user.id, month, year)
    )
