import os
import tempfile
import uuid
from datetime import date, datetime, timedelta

# Must be set before goal_tracker.core.config is imported
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"goal_tracker_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from goal_tracker.core.database import Base
from goal_tracker.models.workspace import Workspace
from goal_tracker.models.account import Account
from goal_tracker.models.category import Category
from goal_tracker.models.debt import Debt
from goal_tracker.models.transaction import Transaction
from goal_tracker.models.goal import Goal, GoalType, GoalStatus
from goal_tracker.models import notification  # noqa: F401

# Test database setup
test_engine = create_async_engine(os.environ["DATABASE_URL"], poolclass=NullPool)
TestSessionLocal = async_sessionmaker(bind=test_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture(autouse=True)
async def setup_database():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def session():
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
async def workspace(session):
    ws = Workspace(id=uuid.uuid4(), name="Test Workspace", type="personal")
    session.add(ws)
    await session.commit()
    await session.refresh(ws)
    return ws


@pytest.fixture
async def account(session, workspace):
    acct = Account(workspace_id=workspace.id, name="Main Account", balance=0.0)
    session.add(acct)
    await session.commit()
    await session.refresh(acct)
    return acct


@pytest.fixture
def make_category(session, workspace):
    async def _make(name: str, type: str = "wants") -> Category:
        category = Category(workspace_id=workspace.id, name=name, type=type)
        session.add(category)
        await session.commit()
        await session.refresh(category)
        return category
    return _make


@pytest.fixture
def make_debt(session, workspace):
    async def _make(name: str = "Car Loan", total_amount: float = 10_000_000, remaining_amount: float = 4_000_000,
                    interest_rate=None, status: str = "active") -> Debt:
        debt = Debt(
            workspace_id=workspace.id,
            name=name,
            total_amount=total_amount,
            remaining_amount=remaining_amount,
            interest_rate=interest_rate,
            status=status,
        )
        session.add(debt)
        await session.commit()
        await session.refresh(debt)
        return debt
    return _make


@pytest.fixture
def make_goal(session, workspace):
    async def _make(name: str = "Savings Goal", type: GoalType = GoalType.savings, target_amount: float = 1_000_000,
                    target_date: date = None, **kwargs) -> Goal:
        goal = Goal(
            workspace_id=workspace.id,
            name=name,
            type=type,
            target_amount=target_amount,
            target_date=target_date or date.today() + timedelta(days=365),
            status=kwargs.pop("status", GoalStatus.active),
            is_auto_tracking=kwargs.pop("is_auto_tracking", True),
            **kwargs,
        )
        session.add(goal)
        await session.commit()
        await session.refresh(goal)
        return goal
    return _make


@pytest.fixture
def make_transaction(session, workspace, account):
    async def _make(description: str, amount: float, type: str = "saving", when: datetime = None, **kwargs) -> Transaction:
        tx = Transaction(
            workspace_id=workspace.id,
            account_id=kwargs.pop("account_id", account.id),
            type=type,
            amount=amount,
            description=description,
            date=when or datetime.utcnow() - timedelta(days=1),
            **kwargs,
        )
        session.add(tx)
        await session.commit()
        await session.refresh(tx)
        return tx
    return _make


@pytest.fixture
async def client():
    from goal_tracker.main import app
    from goal_tracker.core.database import get_async_session

    async def get_session_override():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_async_session] = get_session_override
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sync_client():
    from goal_tracker.main import app

    # Startup creates tables through the patched engine
    with patch("goal_tracker.main.engine", test_engine):
        with TestClient(app) as c:
            yield c
