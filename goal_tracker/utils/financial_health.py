# goal_tracker/utils/financial_health.py
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.crud import goal as crud_goal
from goal_tracker.models.goal import GoalStatus
from goal_tracker.schemas.goal import FinancialHealthImpact, GoalAnalytics
from goal_tracker.utils.goal_rules import type_key

# (goal types, weight) per scoring category
HEALTH_WEIGHTS = (
    (frozenset({"emergency_fund"}), 30),
    (frozenset({"debt_payment"}), 25),
    (frozenset({"savings", "vacation", "house", "education"}), 25),
    (frozenset({"investment", "retirement"}), 20),
)


def _progress_ratio(goal: Any) -> Optional[float]:
    target = float(goal.target_amount or 0)
    if target <= 0:
        return None
    return float(goal.current_amount or 0) / target


def _average_progress(goals: Iterable[Any]) -> Optional[float]:
    ratios = [r for r in (_progress_ratio(g) for g in goals) if r is not None]
    if not ratios:
        return None
    return sum(ratios) / len(ratios)


def score_goals(active_goals: List[Any]) -> FinancialHealthImpact:
    """
    Score active goals into a 0-100 health contribution.

    Each weight bucket uses the mean progress of all its goals, so several
    emergency funds are averaged rather than scoring only the first one.
    """
    contribution = 0.0
    recommendations: List[str] = []

    for goal_types, weight in HEALTH_WEIGHTS:
        members = [g for g in active_goals if type_key(g.type) in goal_types]
        if not members and "emergency_fund" in goal_types:
            recommendations.append("Create an emergency fund goal for financial security")
        avg = _average_progress(members)
        if avg is not None:
            contribution += min(max(avg, 0.0), 1.0) * weight

    contribution = round(contribution, 2)
    return FinancialHealthImpact(
        overall_score=contribution,
        goal_contribution=contribution,
        recommendations=recommendations,
    )


def summarize_goals(goals: List[Any], monthly_contributions: float) -> GoalAnalytics:
    statuses = Counter(type_key(g.status) for g in goals)
    progress = [r for r in (_progress_ratio(g) for g in goals) if r is not None]
    return GoalAnalytics(
        total_goals=len(goals),
        active_goals=statuses.get(GoalStatus.active.value, 0),
        completed_goals=statuses.get(GoalStatus.completed.value, 0),
        paused_goals=statuses.get(GoalStatus.paused.value, 0),
        total_target_amount=sum(float(g.target_amount or 0) for g in goals),
        total_current_amount=sum(float(g.current_amount or 0) for g in goals),
        average_progress=round(sum(progress) / len(progress) * 100, 2) if progress else 0.0,
        goals_by_type=dict(Counter(type_key(g.type) for g in goals)),
        goals_by_priority=dict(Counter(type_key(g.priority) for g in goals)),
        monthly_contributions=monthly_contributions,
    )


class FinancialHealthAggregator:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def score(self, workspace_id: uuid.UUID) -> FinancialHealthImpact:
        active_goals = await crud_goal.get_goals_for_workspace(workspace_id, self.db, status=GoalStatus.active)
        return score_goals(active_goals)

    async def analytics(self, workspace_id: uuid.UUID) -> GoalAnalytics:
        goals = await crud_goal.get_goals_for_workspace(workspace_id, self.db)
        since = datetime.utcnow() - timedelta(days=30)
        contributions = await crud_goal.get_workspace_contributions_since(workspace_id, since, self.db)
        return summarize_goals(goals, sum(float(c.amount) for c in contributions))
