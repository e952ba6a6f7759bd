# goal_tracker/utils/goal_insights.py
import logging
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.core.config import settings
from goal_tracker.crud import goal as crud_goal
from goal_tracker.models.goal import GoalInsight, InsightSeverity, InsightType

logger = logging.getLogger(__name__)

AT_RISK_PROGRESS = 25
AT_RISK_DAYS = 90
SUGGESTED_INCREASE = 50
# Contributions below this share of the required pace trigger a recommendation
CONTRIBUTION_PACE_THRESHOLD = 0.8


def build_insights(
    goal: Any,
    recent_contributions: float,
    lookback_days: int,
    today: Optional[date] = None,
) -> List[GoalInsight]:
    """
    Derive insights for one goal from its progress and recent contribution pace.

    `recent_contributions` is the ledger total over the last `lookback_days`.
    """
    today = today or date.today()
    insights: List[GoalInsight] = []

    current_amount = float(goal.current_amount or 0)
    target_amount = float(goal.target_amount or 0)
    days_left = (goal.target_date - today).days

    if target_amount > 0:
        progress = current_amount / target_amount * 100

        if progress < AT_RISK_PROGRESS and days_left < AT_RISK_DAYS:
            insights.append(GoalInsight(
                goal_id=goal.id,
                workspace_id=goal.workspace_id,
                type=InsightType.alert,
                title="Goal At Risk",
                message=(
                    f"Your goal is {progress:.1f}% complete with only {days_left} days remaining. "
                    "Consider increasing contributions or extending the deadline."
                ),
                severity=InsightSeverity.warning,
                action_required=True,
                data={
                    "current_progress": round(progress, 2),
                    "days_left": days_left,
                    "suggested_increase": SUGGESTED_INCREASE,
                },
            ))

        if days_left > 0:
            monthly_contribution = recent_contributions / (lookback_days / 30)
            required_monthly = (target_amount - current_amount) / (days_left / 30)

            if monthly_contribution < required_monthly * CONTRIBUTION_PACE_THRESHOLD:
                shortfall = required_monthly - monthly_contribution
                insights.append(GoalInsight(
                    goal_id=goal.id,
                    workspace_id=goal.workspace_id,
                    type=InsightType.recommendation,
                    title="Increase Monthly Contributions",
                    message=(
                        f"To reach your goal on time, consider increasing monthly contributions "
                        f"from {monthly_contribution:,.2f} to {required_monthly:,.2f} "
                        f"(a shortfall of {shortfall:,.2f})."
                    ),
                    severity=InsightSeverity.info,
                    action_required=False,
                    data={
                        "current_monthly": round(monthly_contribution, 2),
                        "required_monthly": round(required_monthly, 2),
                        "shortfall": round(shortfall, 2),
                    },
                ))

    if not goal.is_auto_tracking:
        insights.append(GoalInsight(
            goal_id=goal.id,
            workspace_id=goal.workspace_id,
            type=InsightType.recommendation,
            title="Enable Auto-Tracking",
            message="Enable automatic progress tracking to reduce manual updates and get real-time insights.",
            severity=InsightSeverity.info,
            action_required=False,
            data={"feature": "auto_tracking"},
        ))

    return insights


class InsightGenerator:
    def __init__(self, db: AsyncSession, lookback_days: Optional[int] = None):
        self.db = db
        self.lookback_days = lookback_days or settings.INSIGHT_LOOKBACK_DAYS

    async def generate_insights(self, goal: Any, today: Optional[date] = None) -> List[GoalInsight]:
        since = datetime.utcnow() - timedelta(days=self.lookback_days)
        contributions = await crud_goal.get_contributions_for_goal(goal.id, self.db, since=since)
        recent_total = sum(float(c.amount) for c in contributions)

        insights = build_insights(goal, recent_total, self.lookback_days, today)
        created = await crud_goal.create_insights(insights, self.db)
        logger.info(f"Generated {len(created)} insights for goal {goal.name}")
        return created
