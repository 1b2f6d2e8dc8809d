"""Budget vs spend calculations for a single period."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

WARNING_THRESHOLD = 0.8
PERCENTAGE_CAP = 100.0


class BudgetStatus(str, Enum):
    NOT_SET = "not_set"
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class BudgetCalculation:
    remaining: float
    percentage: float
    status: BudgetStatus


def build_status(amount: float, spent: float) -> BudgetStatus:
    if amount <= 0:
        return BudgetStatus.NOT_SET
    if spent >= amount:
        return BudgetStatus.DANGER
    if spent >= amount * WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.SAFE


def calculate(amount: float, spent: float) -> BudgetCalculation:
    """Compare a budget amount with the spend recorded against it.

    ``remaining`` never goes below zero and ``percentage`` is capped at 100.
    A zero budget means nothing has been configured for the period, so both
    are reported as 0 whatever the spend.
    """
    status = build_status(amount, spent)
    if status is BudgetStatus.NOT_SET:
        return BudgetCalculation(remaining=0.0, percentage=0.0, status=status)

    remaining = round(max(amount - spent, 0.0), 2)
    percentage = round(min(spent / amount * 100, PERCENTAGE_CAP), 2)
    return BudgetCalculation(remaining=remaining, percentage=percentage, status=status)


def resolve_period(
    month: Optional[int] = None, year: Optional[int] = None, today: Optional[date] = None
) -> tuple[int, int]:
    """Fill a missing month and/or year from today's date."""
    today = today or date.today()
    return (month or today.month, year or today.year)


def month_range(month: int, year: int) -> tuple[date, date]:
    """Half-open [start, end) range covering one calendar month."""
    start = date(year, month, 1)
    return start, start + relativedelta(months=+1)


def year_range(year: int) -> tuple[date, date]:
    start = date(year, 1, 1)
    return start, start + relativedelta(years=+1)


def build_summary(budget, total_expenses: float, month: int, year: int) -> dict:
    """Assemble the summary returned by the budget endpoints.

    ``budget`` is the stored row for the period, or None when the user has
    not set one yet.
    """
    amount = budget.amount if budget is not None else 0.0
    result = calculate(amount, total_expenses)
    return {
        "budget": budget,
        "total_expenses": round(total_expenses, 2),
        "remaining": result.remaining,
        "percentage": result.percentage,
        "month": month,
        "year": year,
        "status": result.status.value,
        "has_budget": amount > 0,
    }
