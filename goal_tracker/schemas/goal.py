# goal_tracker/schemas/goal.py
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import date, datetime
import uuid

from goal_tracker.models.goal import (
    GoalType,
    GoalPriority,
    GoalStatus,
    ContributionType,
    InsightType,
    InsightSeverity,
)

class GoalBase(BaseModel):
    name: str = Field(..., max_length=150, description="E.g. Summer trip to Bali")
    description: Optional[str] = None
    type: GoalType
    target_amount: float = Field(..., ge=0)
    target_date: date
    priority: GoalPriority = GoalPriority.medium
    is_auto_tracking: bool = True
    linked_account_id: Optional[uuid.UUID] = None
    linked_debt_id: Optional[uuid.UUID] = None

class GoalCreate(GoalBase):
    # Recorded as a manual contribution so the ledger stays authoritative
    current_amount: float = Field(0.0, ge=0)
    create_milestones: bool = False

class GoalUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    target_amount: Optional[float] = Field(None, ge=0)
    target_date: Optional[date] = None
    priority: Optional[GoalPriority] = None
    status: Optional[GoalStatus] = None
    is_auto_tracking: Optional[bool] = None
    linked_account_id: Optional[uuid.UUID] = None
    linked_debt_id: Optional[uuid.UUID] = None

class GoalRead(GoalBase):
    id: uuid.UUID
    workspace_id: uuid.UUID
    current_amount: float
    status: GoalStatus
    last_progress_update: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class GoalProgressCreate(BaseModel):
    amount: float = Field(..., description="Manual contribution, negative values withdraw")
    note: Optional[str] = None

class GoalContributionRead(BaseModel):
    id: uuid.UUID
    goal_id: uuid.UUID
    transaction_id: Optional[uuid.UUID] = None
    amount: float
    contribution_type: ContributionType
    source: Optional[str] = None
    date: datetime

    class Config:
        from_attributes = True

class GoalMilestoneRead(BaseModel):
    id: uuid.UUID
    goal_id: uuid.UUID
    name: str
    target_amount: float
    target_date: date
    order: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    reward: Optional[str] = None

    class Config:
        from_attributes = True

class GoalInsightRead(BaseModel):
    id: uuid.UUID
    goal_id: Optional[uuid.UUID] = None
    workspace_id: uuid.UUID
    type: InsightType
    title: str
    message: str
    severity: InsightSeverity
    action_required: bool
    data: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class GoalSuggestion(BaseModel):
    """A candidate goal; produced fresh on every request and never stored."""
    type: GoalType
    title: str
    description: str
    recommended_amount: float
    priority: str
    reasoning: str
    confidence: float = Field(..., ge=0, le=1)
    timeline: str

class TransactionTrackingResult(BaseModel):
    tracked: int = 0
    goals: List[str] = []

class FinancialHealthImpact(BaseModel):
    overall_score: float
    goal_contribution: float
    recommendations: List[str] = []

class GoalAnalytics(BaseModel):
    total_goals: int
    active_goals: int
    completed_goals: int
    paused_goals: int
    total_target_amount: float
    total_current_amount: float
    average_progress: float
    goals_by_type: Dict[str, int]
    goals_by_priority: Dict[str, int]
    monthly_contributions: float
