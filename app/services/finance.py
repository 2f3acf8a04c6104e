# app/services/finance.py
import logging
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db_utils import with_store_guard
from app.core.exceptions import AlreadyLockedError, ConflictError, NotFoundError, ValidationError
from app.crud.category import (
    create_category_for_user,
    get_categories_for_user,
    get_category_by_id,
    get_category_by_name_for_user,
)
from app.crud.expense import (
    create_expense_for_user,
    delete_expense,
    get_expense_by_id,
    get_expenses_for_user,
)
from app.crud.income import (
    create_income_for_user,
    delete_unlocked_income,
    get_income_by_id,
    get_incomes_for_user,
    update_unlocked_income,
)
from app.schemas.category import CategoryRead
from app.schemas.expense import ExpenseRead
from app.schemas.income import IncomeRead
from app.schemas.summary import CategoryTotal, FinanceSummary, MonthTrend
from app.utils.summary import CENT, build_summary, category_breakdown, normalize_month, yearly_trend

logger = logging.getLogger(__name__)

MIN_YEAR = 1
MAX_YEAR = 9999
CATEGORY_NAME_MAX_LENGTH = 100
# Numeric(12, 2) holds ten whole digits
MAX_AMOUNT = Decimal("10000000000")


# ────────────────────────────────────────────────────────────────────────────────
# INPUT VALIDATION
# ────────────────────────────────────────────────────────────────────────────────
def parse_amount(value: Any) -> Decimal:
    """Positive amount rounded to cents, or ValidationError."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Amount must be a positive number")
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValidationError("Amount must be a positive number")
        amount = amount.quantize(CENT)
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a positive number")
    if amount <= 0:
        raise ValidationError("Amount must be a positive number")
    if amount >= MAX_AMOUNT:
        raise ValidationError("Amount is too large")
    return amount


def parse_month(value: Any) -> str:
    month = normalize_month(value)
    if month is None:
        raise ValidationError(f"Unrecognized month: {value!r}")
    return month


def parse_year(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Year must be a whole number")
    if not MIN_YEAR <= value <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return value


def parse_period(month: Any, year: Any) -> Dict[str, Any]:
    if (month is None) != (year is None):
        raise ValidationError("Month and year must be given together")
    if month is None:
        return {"month": None, "year": None}
    return {"month": parse_month(month), "year": parse_year(year)}


class FinanceService:
    """Incomes, expenses and categories for one user at a time.

    Every method takes the caller's ``user_id`` and only reads or writes rows
    owned by it; a record owned by someone else is reported as not found.
    """

    def __init__(self, db: AsyncSession, store_timeout: Optional[float] = None):
        self.db = db
        self.store_timeout = store_timeout

    # ── incomes ────────────────────────────────────────────────────────────────
    @with_store_guard
    async def add_income(self, user_id: uuid.UUID, amount: Any, month: Any, year: Any) -> IncomeRead:
        values = {
            "amount": parse_amount(amount),
            "month": parse_month(month),
            "year": parse_year(year),
        }
        income = await create_income_for_user(user_id, values, self.db)
        return IncomeRead.model_validate(income)

    async def _explain_miss(self, user_id: uuid.UUID, income_id: uuid.UUID) -> None:
        """A conditional write matched nothing: say whether it was missing or locked."""
        income = await get_income_by_id(income_id, user_id, self.db)
        if income is None:
            raise NotFoundError("Income not found")
        raise AlreadyLockedError()

    @with_store_guard
    async def lock_income(self, user_id: uuid.UUID, income_id: uuid.UUID) -> IncomeRead:
        """
        Unlocked -> Locked, exactly once. Locking an already locked income
        raises AlreadyLockedError rather than succeeding silently.
        """
        if not await update_unlocked_income(income_id, user_id, {"is_locked": True}, self.db):
            await self._explain_miss(user_id, income_id)
        await self.db.commit()
        logger.info(f"Income {income_id} locked by user {user_id}")

        income = await get_income_by_id(income_id, user_id, self.db)
        return IncomeRead.model_validate(income)

    @with_store_guard
    async def update_income(
        self,
        user_id: uuid.UUID,
        income_id: uuid.UUID,
        amount: Any = None,
        month: Any = None,
        year: Any = None,
    ) -> IncomeRead:
        values: Dict[str, Any] = {}
        if amount is not None:
            values["amount"] = parse_amount(amount)
        if month is not None:
            values["month"] = parse_month(month)
        if year is not None:
            values["year"] = parse_year(year)
        if not values:
            raise ValidationError("No fields provided for update")

        if not await update_unlocked_income(income_id, user_id, values, self.db):
            await self._explain_miss(user_id, income_id)
        await self.db.commit()

        income = await get_income_by_id(income_id, user_id, self.db)
        return IncomeRead.model_validate(income)

    @with_store_guard
    async def delete_income(self, user_id: uuid.UUID, income_id: uuid.UUID) -> None:
        if not await delete_unlocked_income(income_id, user_id, self.db):
            await self._explain_miss(user_id, income_id)
        await self.db.commit()

    @with_store_guard
    async def list_incomes(self, user_id: uuid.UUID) -> List[IncomeRead]:
        incomes = await get_incomes_for_user(user_id, self.db)
        return [IncomeRead.model_validate(i) for i in incomes]

    # ── expenses ───────────────────────────────────────────────────────────────
    @with_store_guard
    async def add_expense(
        self,
        user_id: uuid.UUID,
        amount: Any,
        category_id: uuid.UUID,
        expense_date: date,
    ) -> ExpenseRead:
        value = parse_amount(amount)
        if not isinstance(expense_date, date):
            raise ValidationError("Expense date must be a calendar date")
        category = await get_category_by_id(category_id, user_id, self.db)
        if category is None:
            raise NotFoundError("Category not found")

        expense = await create_expense_for_user(user_id, value, category, expense_date, self.db)
        return ExpenseRead.model_validate(expense)

    @with_store_guard
    async def delete_expense(self, user_id: uuid.UUID, expense_id: uuid.UUID) -> None:
        expense = await get_expense_by_id(expense_id, user_id, self.db)
        if expense is None:
            raise NotFoundError("Expense not found")
        await delete_expense(expense, self.db)

    @with_store_guard
    async def list_expenses(self, user_id: uuid.UUID) -> List[ExpenseRead]:
        expenses = await get_expenses_for_user(user_id, self.db)
        return [ExpenseRead.model_validate(e) for e in expenses]

    # ── categories ─────────────────────────────────────────────────────────────
    @with_store_guard
    async def add_category(self, user_id: uuid.UUID, name: str) -> CategoryRead:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if len(name) > CATEGORY_NAME_MAX_LENGTH:
            raise ValidationError(f"Category name must be at most {CATEGORY_NAME_MAX_LENGTH} characters long")
        if await get_category_by_name_for_user(name, user_id, self.db):
            raise ConflictError(f"Category '{name}' already exists")

        try:
            category = await create_category_for_user(user_id, name, self.db)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Category '{name}' already exists")
        return CategoryRead.model_validate(category)

    @with_store_guard
    async def list_categories(self, user_id: uuid.UUID) -> List[CategoryRead]:
        categories = await get_categories_for_user(user_id, self.db)
        return [CategoryRead.model_validate(c) for c in categories]

    # ── dashboard ──────────────────────────────────────────────────────────────
    @with_store_guard
    async def summary(self, user_id: uuid.UUID, month: Any = None, year: Any = None) -> FinanceSummary:
        period = parse_period(month, year)
        incomes = await get_incomes_for_user(user_id, self.db)
        expenses = await get_expenses_for_user(user_id, self.db)
        return FinanceSummary(**build_summary(incomes, expenses, **period))

    @with_store_guard
    async def category_breakdown(self, user_id: uuid.UUID, month: Any, year: Any) -> List[CategoryTotal]:
        month, year = parse_month(month), parse_year(year)
        expenses = await get_expenses_for_user(user_id, self.db)
        return [CategoryTotal(**row) for row in category_breakdown(expenses, month, year)]

    @with_store_guard
    async def yearly_trend(self, user_id: uuid.UUID, year: Any) -> List[MonthTrend]:
        year = parse_year(year)
        incomes = await get_incomes_for_user(user_id, self.db)
        expenses = await get_expenses_for_user(user_id, self.db)
        return [MonthTrend(**row) for row in yearly_trend(incomes, expenses, year)]
