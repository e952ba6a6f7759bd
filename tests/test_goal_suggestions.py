import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace

from goal_tracker.models.goal import GoalType
from goal_tracker.utils.goal_engine import GoalsEngine
from goal_tracker.utils.goal_suggestions import build_suggestions, debt_payoff_timeline
from goal_tracker.utils.spending_analysis import IncomeAnalysis, SpendingAnalysis


def debt_stub(name="Credit Card", remaining=5000.0, rate=18.0):
    return SimpleNamespace(id=uuid.uuid4(), name=name, remaining_amount=remaining, interest_rate=rate)


def goal_stub(type=GoalType.savings, name="Goal", description=None, linked_debt_id=None):
    return SimpleNamespace(type=type, name=name, description=description, linked_debt_id=linked_debt_id)


SPENDING = SpendingAnalysis(average_monthly_expenses=3000.0, category_breakdown={"entertainment": 300.0})
INCOME = IncomeAnalysis(monthly_income=5000.0, monthly_expenses=3000.0, disposable_income=2000.0, savings_rate=0.4)


class TestDebtPayoffTimeline:
    def test_months(self):
        assert debt_payoff_timeline(1000, 0) == "10 months"
        assert debt_payoff_timeline(4800, 2000) == "12 months"

    def test_years(self):
        # 200/month for 5000 is 25 months
        assert debt_payoff_timeline(5000, 1000) == "3 years"


class TestBuildSuggestions:
    def test_full_order(self):
        suggestions = build_suggestions(SPENDING, INCOME, [], [debt_stub()])
        assert [s.type for s in suggestions] == [
            GoalType.emergency_fund, GoalType.debt_payment, GoalType.vacation, GoalType.house,
        ]

        emergency, debt, vacation, house = suggestions
        assert emergency.recommended_amount == 18000.0
        assert emergency.priority == "critical"
        assert emergency.confidence == 0.95
        assert emergency.timeline == "12-18 months"

        assert debt.title == "Pay Off Credit Card"
        assert debt.recommended_amount == 5000.0
        assert debt.priority == "high"
        assert debt.reasoning == "High-interest debt should be prioritized. Interest rate: 18%"
        # 400/month against 5000 is 13 months
        assert debt.timeline == "2 years"

        assert vacation.recommended_amount == 3600.0
        assert vacation.confidence == 0.7
        assert house.recommended_amount == 180000.0
        assert house.timeline == "5-7 years"

    def test_low_interest_debt_is_medium(self):
        suggestions = build_suggestions(SpendingAnalysis(), IncomeAnalysis(), [], [debt_stub(rate=5)])
        assert [s.priority for s in suggestions] == ["medium"]

    def test_debt_without_rate(self):
        suggestion = build_suggestions(SpendingAnalysis(), IncomeAnalysis(), [], [debt_stub(rate=None)])[0]
        assert suggestion.priority == "medium"
        assert "Credit Card" in suggestion.reasoning

    def test_existing_goals_suppress_suggestions(self):
        debt = debt_stub()
        existing = [
            goal_stub(GoalType.savings, name="Emergency cushion"),
            goal_stub(GoalType.debt_payment, name="Kill it", linked_debt_id=debt.id),
            goal_stub(GoalType.savings, name="Summer travel"),
            goal_stub(GoalType.house, name="Flat"),
        ]
        assert build_suggestions(SPENDING, INCOME, existing, [debt]) == []

    def test_debt_goal_matched_by_name(self):
        debt = debt_stub(name="Student Loan")
        existing = [goal_stub(GoalType.debt_payment, name="Clear the student loan")]
        suggestions = build_suggestions(SpendingAnalysis(), IncomeAnalysis(), existing, [debt])
        assert suggestions == []

    def test_no_expenses_no_emergency_suggestion(self):
        assert build_suggestions(SpendingAnalysis(), IncomeAnalysis(), [], []) == []

    def test_thresholds(self):
        spending = SpendingAnalysis(average_monthly_expenses=0, category_breakdown={"entertainment": 200.0})
        income = IncomeAnalysis(monthly_income=1000, savings_rate=0.15)
        assert build_suggestions(spending, income, [], []) == []

    def test_truncated_in_order(self):
        debts = [debt_stub(name=f"Debt {i}") for i in range(6)]
        suggestions = build_suggestions(SPENDING, INCOME, [], debts)
        assert len(suggestions) == 5
        assert suggestions[0].type == GoalType.emergency_fund
        assert [s.title for s in suggestions[1:]] == [f"Pay Off Debt {i}" for i in range(4)]
        assert len(build_suggestions(SPENDING, INCOME, [], debts, limit=2)) == 2


async def test_emergency_fund_suggestion_from_expenses(session, workspace, make_category, make_transaction):
    groceries = await make_category("Groceries", "needs")
    now = datetime.utcnow()
    for days_ago in (10, 40, 70):
        await make_transaction("Monthly groceries", 3_000_000, type="expense",
                               when=now - timedelta(days=days_ago), category_id=groceries.id)
    # Outside the three month window
    await make_transaction("Old groceries", 9_000_000, type="expense",
                           when=now - timedelta(days=200), category_id=groceries.id)

    suggestions = await GoalsEngine(session).generate_goal_suggestions(workspace.id)

    emergency = [s for s in suggestions if s.type == GoalType.emergency_fund]
    assert len(emergency) == 1
    assert emergency[0].recommended_amount == 18_000_000
    assert emergency[0].priority == "critical"


async def test_vacation_suggestion_from_entertainment(session, workspace, make_category, make_transaction, make_goal):
    await make_goal(name="Rainy day fund", type=GoalType.emergency_fund)
    fun = await make_category("Entertainment")
    now = datetime.utcnow()
    await make_transaction("Concerts", 900, type="expense", when=now - timedelta(days=5), category_id=fun.id)
    await make_transaction("Street food", 300, type="expense", when=now - timedelta(days=6))

    suggestions = await GoalsEngine(session).generate_goal_suggestions(workspace.id)

    assert [s.type for s in suggestions] == [GoalType.vacation]
    assert suggestions[0].recommended_amount == 3600.0


async def test_suggestions_are_not_stored(session, workspace, make_debt):
    await make_debt(name="Car Loan", remaining_amount=4_000_000, interest_rate=9.5)
    engine = GoalsEngine(session)
    first = await engine.generate_goal_suggestions(workspace.id)
    second = await engine.generate_goal_suggestions(workspace.id)
    assert first == second
    assert [s.title for s in first] == ["Pay Off Car Loan"]
