# app/utils/summary.py
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_FLOOR
from typing import Any, Dict, Iterable, List, Optional, Sequence

MONTHS: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_MONTH_LOOKUP = {name.lower(): name for name in MONTHS}

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


# ────────────────────────────────────────────────────────────────────────────────
# MONTH HELPERS
# ────────────────────────────────────────────────────────────────────────────────
def normalize_month(value: Any) -> Optional[str]:
    """Canonical month name for a case-insensitive full name, else None."""
    if not isinstance(value, str):
        return None
    return _MONTH_LOOKUP.get(value.strip().lower())


def month_number(name: str) -> int:
    return MONTHS.index(name) + 1


def _in_month(day: date, month: str, year: int) -> bool:
    return day.year == year and day.month == month_number(month)


def _total(amounts: Iterable[Decimal]) -> Decimal:
    return sum((Decimal(a) for a in amounts), ZERO).quantize(CENT)


# ────────────────────────────────────────────────────────────────────────────────
# AGGREGATES
# ────────────────────────────────────────────────────────────────────────────────
def savings_percentage(total_income: Decimal, total_expenses: Decimal) -> int:
    """
    Whole-number share of income that was saved; 0 when there is no income.
    Halves round toward positive infinity, so 12.5 -> 13 and -12.5 -> -12.
    """
    if total_income <= 0:
        return 0
    ratio = (total_income - total_expenses) / total_income * 100
    return int((ratio + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def build_summary(
    incomes: Sequence[Any],
    expenses: Sequence[Any],
    month: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Totals, savings and savings percentage.

    With month/year, incomes must match (month, year) exactly and expenses
    must fall within that calendar month. Every matching income is counted.
    """
    if month is not None and year is not None:
        incomes = [i for i in incomes if i.month == month and i.year == year]
        expenses = [e for e in expenses if _in_month(e.date, month, year)]

    total_income = _total(i.amount for i in incomes)
    total_expenses = _total(e.amount for e in expenses)

    return {
        "month": month,
        "year": year,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "savings": total_income - total_expenses,
        "savings_percentage": savings_percentage(total_income, total_expenses),
    }


def category_breakdown(expenses: Sequence[Any], month: str, year: int) -> List[Dict[str, Any]]:
    spent_per_category: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        if _in_month(expense.date, month, year):
            spent_per_category[expense.category_name or "Uncategorized"] += Decimal(expense.amount)

    rows = [
        {"category": name, "amount": amount.quantize(CENT)}
        for name, amount in spent_per_category.items()
    ]
    rows.sort(key=lambda row: (-row["amount"], row["category"]))
    return rows


def yearly_trend(incomes: Sequence[Any], expenses: Sequence[Any], year: int) -> List[Dict[str, Any]]:
    trend = []
    for month in MONTHS:
        income = _total(i.amount for i in incomes if i.month == month and i.year == year)
        spent = _total(e.amount for e in expenses if _in_month(e.date, month, year))
        trend.append({
            "month": month,
            "income": income,
            "expenses": spent,
            "savings": income - spent,
        })
    return trend
