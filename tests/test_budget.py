from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from budget import (
    BudgetStatus,
    build_status,
    build_summary,
    calculate,
    month_range,
    resolve_period,
    year_range,
)


def test_example_warning_at_85_percent():
    result = calculate(100, 85)

    assert result.remaining == 15
    assert result.percentage == 85.0
    assert result.status is BudgetStatus.WARNING


def test_zero_budget_is_not_set_regardless_of_spend():
    result = calculate(0, 50)

    assert result.status is BudgetStatus.NOT_SET
    assert result.remaining == 0
    assert result.percentage == 0


@pytest.mark.parametrize(
    "amount,spent,expected",
    [
        (100, 0, BudgetStatus.SAFE),
        (100, 79.99, BudgetStatus.SAFE),
        (100, 80, BudgetStatus.WARNING),
        (100, 99.99, BudgetStatus.WARNING),
        (100, 100, BudgetStatus.DANGER),
        (100, 250, BudgetStatus.DANGER),
        (0, 0, BudgetStatus.NOT_SET),
    ],
)
def test_status_thresholds(amount, spent, expected):
    assert build_status(amount, spent) is expected


def test_overspend_clamps_remaining_and_caps_percentage():
    result = calculate(200, 500)

    assert result.remaining == 0
    assert result.percentage == 100.0
    assert result.status is BudgetStatus.DANGER


def test_remaining_is_never_negative():
    for amount in (0, 1, 50, 100.5):
        for spent in (0, 0.5, 50, 100.5, 1000):
            result = calculate(amount, spent)
            assert result.remaining >= 0
            if amount > 0:
                assert result.remaining == round(max(amount - spent, 0), 2)


def test_resolve_period_defaults_to_today():
    today = date(2024, 10, 19)

    assert resolve_period(None, None, today=today) == (10, 2024)
    assert resolve_period(3, None, today=today) == (3, 2024)
    assert resolve_period(None, 2023, today=today) == (10, 2023)
    assert resolve_period(12, 2022, today=today) == (12, 2022)


def test_month_range_rolls_over_december():
    assert month_range(12, 2024) == (date(2024, 12, 1), date(2025, 1, 1))
    assert month_range(2, 2024) == (date(2024, 2, 1), date(2024, 3, 1))
    assert year_range(2024) == (date(2024, 1, 1), date(2025, 1, 1))


def test_build_summary_without_budget():
    summary = build_summary(None, 42.456, 5, 2024)

    assert summary == {
        "budget": None,
        "total_expenses": 42.46,
        "remaining": 0.0,
        "percentage": 0.0,
        "month": 5,
        "year": 2024,
        "status": "not_set",
        "has_budget": False,
    }


def test_build_summary_with_budget():
    stored = SimpleNamespace(amount=300.0)

    summary = build_summary(stored, 120.0, 5, 2024)

    assert summary["budget"] is stored
    assert summary["remaining"] == 180.0
    assert summary["percentage"] == 40.0
    assert summary["status"] == "safe"
    assert summary["has_budget"] is True
