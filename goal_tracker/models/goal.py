# goal_tracker/models/goal.py
import enum
import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Numeric, Date, DateTime, ForeignKey, Boolean,
    Integer, Enum, JSON, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from goal_tracker.core.database import Base


class GoalType(str, enum.Enum):
    savings = "savings"
    debt_payment = "debt_payment"
    investment = "investment"
    emergency_fund = "emergency_fund"
    retirement = "retirement"
    vacation = "vacation"
    house = "house"
    education = "education"

class GoalPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"

class GoalStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    paused = "paused"

class ContributionType(str, enum.Enum):
    transaction = "transaction"
    debt_payment = "debt_payment"
    auto_categorized = "auto_categorized"
    manual = "manual"

class InsightType(str, enum.Enum):
    alert = "alert"
    recommendation = "recommendation"
    achievement = "achievement"

class InsightSeverity(str, enum.Enum):
    info = "info"
    warning = "warning"
    critical = "critical"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(GoalType, native_enum=False, length=20), nullable=False)
    target_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    # Cached value, recomputed from the contribution ledger (or linked debt)
    current_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False, default=0.0)
    target_date = Column(Date, nullable=False)
    priority = Column(Enum(GoalPriority, native_enum=False, length=10), nullable=False, default=GoalPriority.medium)
    status = Column(Enum(GoalStatus, native_enum=False, length=10), nullable=False, default=GoalStatus.active)
    is_auto_tracking = Column(Boolean, nullable=False, default=True)
    linked_account_id = Column(PG_UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    linked_debt_id = Column(PG_UUID(as_uuid=True), ForeignKey("debts.id", ondelete="SET NULL"), nullable=True)
    last_progress_update = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    @property
    def progress(self) -> float:
        """Progress in percent, 0 when the target amount is not set."""
        target = float(self.target_amount or 0)
        if target <= 0:
            return 0.0
        return float(self.current_amount or 0) / target * 100

    def __repr__(self):
        return f"<Goal name={self.name} type={self.type} current={self.current_amount}/{self.target_amount}>"


class GoalContribution(Base):
    __tablename__ = "goal_contributions"
    __table_args__ = (
        UniqueConstraint("goal_id", "transaction_id", name="uq_goal_contributions_goal_transaction"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    goal_id = Column(PG_UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    # Null for manual contributions
    transaction_id = Column(PG_UUID(as_uuid=True), ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    contribution_type = Column(Enum(ContributionType, native_enum=False, length=20), nullable=False)
    source = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<GoalContribution goal_id={self.goal_id} amount={self.amount} type={self.contribution_type}>"


class GoalMilestone(Base):
    __tablename__ = "goal_milestones"
    __table_args__ = (
        UniqueConstraint("goal_id", "order", name="uq_goal_milestones_goal_order"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    goal_id = Column(PG_UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    target_amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    target_date = Column(Date, nullable=False)
    order = Column(Integer, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    reward = Column(String(length=255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<GoalMilestone goal_id={self.goal_id} order={self.order} completed={self.is_completed}>"


class GoalInsight(Base):
    __tablename__ = "goal_insights"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Null for workspace-level insights
    goal_id = Column(PG_UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=True, index=True)
    workspace_id = Column(PG_UUID(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(InsightType, native_enum=False, length=20), nullable=False)
    title = Column(String(length=150), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(Enum(InsightSeverity, native_enum=False, length=10), nullable=False, default=InsightSeverity.info)
    action_required = Column(Boolean, nullable=False, default=False)
    data = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<GoalInsight goal_id={self.goal_id} type={self.type} title={self.title}>"
