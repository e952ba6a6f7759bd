# goal_tracker/utils/spending_analysis.py
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional
import uuid

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.core.config import settings
from goal_tracker.crud.transaction import get_expenses_by_category_since, get_totals_by_type_since


@dataclass
class SpendingAnalysis:
    average_monthly_expenses: float = 0.0
    # Monthly average per lower-cased category name
    category_breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class IncomeAnalysis:
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    disposable_income: float = 0.0
    # None when there is no income to divide by
    savings_rate: Optional[float] = None


class SpendingAnalyzer:
    """Trailing-window spend and income aggregates for one workspace."""

    def __init__(self, db: AsyncSession, months: Optional[int] = None):
        self.db = db
        self.months = months or settings.ANALYSIS_MONTHS

    def window_start(self, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.utcnow()) - relativedelta(months=self.months)

    async def analyze_spending(self, workspace_id: uuid.UUID, now: Optional[datetime] = None) -> SpendingAnalysis:
        rows = await get_expenses_by_category_since(workspace_id, self.window_start(now), self.db)

        totals: Dict[str, float] = defaultdict(float)
        for amount, category_name in rows:
            totals[(category_name or "uncategorized").lower()] += amount

        return SpendingAnalysis(
            average_monthly_expenses=sum(amount for amount, _ in rows) / self.months,
            category_breakdown={name: total / self.months for name, total in totals.items()},
        )

    async def analyze_income(self, workspace_id: uuid.UUID, now: Optional[datetime] = None) -> IncomeAnalysis:
        totals = await get_totals_by_type_since(workspace_id, self.window_start(now), self.db)

        monthly_income = totals.get("income", 0.0) / self.months
        monthly_expenses = totals.get("expense", 0.0) / self.months
        disposable_income = monthly_income - monthly_expenses

        return IncomeAnalysis(
            monthly_income=monthly_income,
            monthly_expenses=monthly_expenses,
            disposable_income=disposable_income,
            savings_rate=disposable_income / monthly_income if monthly_income > 0 else None,
        )
