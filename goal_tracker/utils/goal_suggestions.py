# goal_tracker/utils/goal_suggestions.py
import math
import logging
import uuid
from typing import Any, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.core.config import settings
from goal_tracker.crud.debt import get_active_debts_for_workspace
from goal_tracker.crud.goal import get_goals_for_workspace
from goal_tracker.models.goal import GoalType
from goal_tracker.schemas.goal import GoalSuggestion
from goal_tracker.utils.goal_rules import type_key
from goal_tracker.utils.spending_analysis import IncomeAnalysis, SpendingAnalysis, SpendingAnalyzer

logger = logging.getLogger(__name__)

VACATION_SPEND_THRESHOLD = 200
HOUSE_SAVINGS_RATE_THRESHOLD = 0.15
HIGH_INTEREST_RATE = 15


def debt_payoff_timeline(remaining_amount: float, disposable_income: float) -> str:
    """Rough payoff horizon assuming 20% of disposable income (at least 100) per month."""
    monthly_payment = max(disposable_income * 0.2, 100)
    months = math.ceil(remaining_amount / monthly_payment)
    if months <= 12:
        return f"{months} months"
    return f"{math.ceil(months / 12)} years"


def _text(goal: Any) -> str:
    return f"{goal.name or ''}\n{goal.description or ''}".lower()


def _has_emergency_goal(goals: Iterable[Any]) -> bool:
    return any(
        type_key(g.type) == GoalType.emergency_fund.value
        or "emergency" in (g.name or "").lower()
        or "emergency fund" in (g.description or "").lower()
        for g in goals
    )


def _has_debt_goal(goals: Iterable[Any], debt: Any) -> bool:
    debt_name = debt.name.lower()
    return any(
        g.linked_debt_id == debt.id
        or (type_key(g.type) == GoalType.debt_payment.value and debt_name in _text(g))
        for g in goals
    )


def _has_vacation_goal(goals: Iterable[Any]) -> bool:
    return any(
        type_key(g.type) == GoalType.vacation.value
        or any(word in (g.name or "").lower() for word in ("vacation", "holiday", "travel"))
        or "vacation" in (g.description or "").lower()
        for g in goals
    )


def build_suggestions(
    spending: SpendingAnalysis,
    income: IncomeAnalysis,
    existing_goals: List[Any],
    active_debts: List[Any],
    limit: Optional[int] = None,
) -> List[GoalSuggestion]:
    """Candidate goals in a fixed order: emergency fund, debts, vacation, house."""
    suggestions: List[GoalSuggestion] = []

    monthly_expenses = spending.average_monthly_expenses
    if monthly_expenses > 0 and not _has_emergency_goal(existing_goals):
        target = monthly_expenses * 6
        suggestions.append(GoalSuggestion(
            type=GoalType.emergency_fund,
            title="Build Emergency Fund",
            description="Create a safety net covering 6 months of expenses",
            recommended_amount=target,
            priority="critical",
            reasoning=(
                f"Based on your average monthly expenses of {monthly_expenses:,.2f}, "
                f"you should have {target:,.2f} in emergency savings."
            ),
            confidence=0.95,
            timeline="12-18 months",
        ))

    for debt in active_debts:
        if _has_debt_goal(existing_goals, debt):
            continue
        rate = float(debt.interest_rate) if debt.interest_rate is not None else None
        if rate is not None:
            reasoning = f"High-interest debt should be prioritized. Interest rate: {rate:g}%"
        else:
            reasoning = f"Paying off {debt.name} frees up monthly cash flow."
        suggestions.append(GoalSuggestion(
            type=GoalType.debt_payment,
            title=f"Pay Off {debt.name}",
            description=f"Eliminate {debt.name} debt strategically",
            recommended_amount=float(debt.remaining_amount),
            priority="high" if rate is not None and rate > HIGH_INTEREST_RATE else "medium",
            reasoning=reasoning,
            confidence=0.9,
            timeline=debt_payoff_timeline(float(debt.remaining_amount), income.disposable_income),
        ))

    entertainment = spending.category_breakdown.get("entertainment", 0.0)
    if entertainment > VACATION_SPEND_THRESHOLD and not _has_vacation_goal(existing_goals):
        suggestions.append(GoalSuggestion(
            type=GoalType.vacation,
            title="Vacation Fund",
            description="Save for your dream vacation",
            recommended_amount=entertainment * 12,
            priority="medium",
            reasoning=(
                f"You spend about {entertainment:,.2f} monthly on entertainment. "
                "A vacation fund could enhance your leisure experiences."
            ),
            confidence=0.7,
            timeline="12 months",
        ))

    savings_rate = income.savings_rate
    has_house_goal = any(type_key(g.type) == GoalType.house.value for g in existing_goals)
    if savings_rate is not None and savings_rate > HOUSE_SAVINGS_RATE_THRESHOLD and not has_house_goal:
        suggestions.append(GoalSuggestion(
            type=GoalType.house,
            title="House Down Payment",
            description="Save for your future home",
            recommended_amount=income.monthly_income * 12 * 3,
            priority="high",
            reasoning=(
                f"Your savings rate of {savings_rate * 100:.1f}% indicates "
                "you could save for a home down payment."
            ),
            confidence=0.8,
            timeline="5-7 years",
        ))

    return suggestions[:limit or settings.GOAL_SUGGESTION_LIMIT]


class SuggestionGenerator:
    def __init__(self, db: AsyncSession, analyzer: Optional[SpendingAnalyzer] = None):
        self.db = db
        self.analyzer = analyzer or SpendingAnalyzer(db)

    async def generate_suggestions(self, workspace_id: uuid.UUID) -> List[GoalSuggestion]:
        spending = await self.analyzer.analyze_spending(workspace_id)
        income = await self.analyzer.analyze_income(workspace_id)
        existing_goals = await get_goals_for_workspace(workspace_id, self.db)
        active_debts = await get_active_debts_for_workspace(workspace_id, self.db)

        suggestions = build_suggestions(spending, income, existing_goals, active_debts)
        logger.info(f"Generated {len(suggestions)} goal suggestions for workspace {workspace_id}")
        return suggestions
