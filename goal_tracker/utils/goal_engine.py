# goal_tracker/utils/goal_engine.py
import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goal_tracker.crud import goal as crud_goal
from goal_tracker.crud.transaction import get_transaction_by_id
from goal_tracker.models.goal import Goal, GoalInsight, GoalMilestone
from goal_tracker.schemas.goal import (
    FinancialHealthImpact,
    GoalAnalytics,
    GoalCreate,
    GoalRead,
    GoalSuggestion,
    TransactionTrackingResult,
)
from goal_tracker.schemas.transaction import TransactionRead
from goal_tracker.utils.financial_health import FinancialHealthAggregator
from goal_tracker.utils.goal_classifier import TransactionClassifier
from goal_tracker.utils.goal_insights import InsightGenerator
from goal_tracker.utils.goal_ledger import ContributionLedger
from goal_tracker.utils.goal_milestones import MilestoneTracker
from goal_tracker.utils.goal_rules import ClassificationRules
from goal_tracker.utils.goal_suggestions import SuggestionGenerator
from goal_tracker.utils.notifications import notify_transaction_tracked
from goal_tracker.utils.spending_analysis import SpendingAnalyzer

logger = logging.getLogger(__name__)


class GoalsEngine:
    """
    Entry points of the goal auto-tracking and insight engine.

    Holds nothing but the session and its components, so it can be built
    per request. Missing goals/transactions yield empty results, not errors.
    """

    def __init__(self, db: AsyncSession, rules: Optional[ClassificationRules] = None):
        self.db = db
        self.classifier = TransactionClassifier(rules)
        self.milestones = MilestoneTracker(db)
        self.ledger = ContributionLedger(db, self.milestones)
        self.insights = InsightGenerator(db)
        self.analyzer = SpendingAnalyzer(db)
        self.suggestions = SuggestionGenerator(db, self.analyzer)
        self.health = FinancialHealthAggregator(db)

    # Progress

    async def update_goal_progress(self, goal_id: uuid.UUID, workspace_id: uuid.UUID) -> Optional[float]:
        return await self.ledger.recompute(goal_id, workspace_id)

    async def add_goal_progress(
        self,
        goal_id: uuid.UUID,
        workspace_id: uuid.UUID,
        amount: float,
        note: Optional[str] = None,
    ) -> Optional[float]:
        goal = await crud_goal.get_goal_by_id(goal_id, workspace_id, self.db)
        if goal is None:
            return None
        await self.ledger.record_manual(goal, amount, note)
        return await self.ledger.recompute(goal_id, workspace_id)

    async def process_transaction_for_goals(
        self,
        transaction_id: uuid.UUID,
        workspace_id: uuid.UUID,
    ) -> TransactionTrackingResult:
        transaction = await get_transaction_by_id(transaction_id, self.db, workspace_id=workspace_id)
        if transaction is None:
            return TransactionTrackingResult()

        # Snapshots stay readable after a per-goal rollback expires ORM state
        tx = TransactionRead.model_validate(transaction)
        goals = [
            GoalRead.model_validate(g)
            for g in await crud_goal.get_auto_tracking_goals(workspace_id, self.db)
        ]

        tracked: List[str] = []
        for match in self.classifier.classify(tx, goals):
            goal = match.goal
            try:
                if not await self.ledger.record(goal, tx, match.contribution_type, match.reason):
                    continue
                await self.ledger.recompute(goal.id, workspace_id)
                tracked.append(f"{goal.name} ({match.reason})")
                await notify_transaction_tracked(self.db, workspace_id, tx.description, tx.amount, goal.name)
                logger.info(f"✅ Auto-tracked: {goal.name} <- {tx.description} ({match.reason})")
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"❌ Auto-tracking failed for goal {goal.name}: {str(e)}")

        return TransactionTrackingResult(tracked=len(tracked), goals=tracked)

    async def complete_goal(self, goal_id: uuid.UUID, workspace_id: uuid.UUID) -> Optional[Goal]:
        goal = await crud_goal.get_goal_by_id(goal_id, workspace_id, self.db)
        if goal is None:
            return None
        return await self.ledger.complete(goal)

    async def create_goal(self, workspace_id: uuid.UUID, goal_in: GoalCreate) -> Goal:
        goal = await crud_goal.create_goal_for_workspace(workspace_id, goal_in, self.db)
        if goal_in.create_milestones:
            await self.milestones.generate_milestones(goal)
        if goal_in.current_amount > 0:
            await self.ledger.record_manual(goal, goal_in.current_amount, "Initial balance")
        await self.ledger.recompute(goal.id, workspace_id)
        return goal

    # Milestones & insights

    async def create_smart_milestones(self, goal_id: uuid.UUID) -> List[GoalMilestone]:
        goal = await crud_goal.get_goal(goal_id, self.db)
        if goal is None:
            return []
        existing = await crud_goal.get_milestones_for_goal(goal_id, self.db)
        if existing:
            logger.info(f"Goal {goal.name} already has {len(existing)} milestones")
            return existing
        return await self.milestones.generate_milestones(goal)

    async def generate_goal_insights(self, goal_id: uuid.UUID, workspace_id: uuid.UUID) -> List[GoalInsight]:
        goal = await crud_goal.get_goal_by_id(goal_id, workspace_id, self.db)
        if goal is None:
            return []
        return await self.insights.generate_insights(goal)

    # Workspace-level analysis

    async def generate_goal_suggestions(self, workspace_id: uuid.UUID) -> List[GoalSuggestion]:
        return await self.suggestions.generate_suggestions(workspace_id)

    async def calculate_goal_impact_on_financial_health(self, workspace_id: uuid.UUID) -> FinancialHealthImpact:
        return await self.health.score(workspace_id)

    async def get_goal_analytics(self, workspace_id: uuid.UUID) -> GoalAnalytics:
        return await self.health.analytics(workspace_id)
