import uuid
from datetime import date, timedelta
from types import SimpleNamespace

from goal_tracker.crud import goal as crud_goal
from goal_tracker.models.goal import GoalType
from goal_tracker.utils.goal_engine import GoalsEngine
from goal_tracker.utils.goal_milestones import plan_milestones
from goal_tracker.utils.goal_rules import milestone_reward

START = date(2025, 1, 1)


def goal_stub(target_amount=1200.0, days=360, type=GoalType.vacation):
    return SimpleNamespace(
        id=uuid.uuid4(),
        type=type,
        target_amount=target_amount,
        target_date=START + timedelta(days=days),
    )


class TestPlanMilestones:
    def test_quarterly_schedule(self):
        milestones = plan_milestones(goal_stub(), start=START)
        assert [m.order for m in milestones] == [1, 2, 3, 4]
        assert [m.name for m in milestones] == [
            "Milestone 1: 25%",
            "Milestone 2: 50%",
            "Milestone 3: 75%",
            "Milestone 4: 100%",
        ]
        assert [m.target_amount for m in milestones] == [300.0, 600.0, 900.0, 1200.0]
        assert [m.target_date for m in milestones] == [
            date(2025, 4, 1), date(2025, 7, 1), date(2025, 10, 1), date(2026, 1, 1),
        ]
        assert all(not m.is_completed for m in milestones)

    def test_partial_quarter_counts(self):
        # 91 days is a started second quarter
        assert len(plan_milestones(goal_stub(days=91), start=START)) == 2

    def test_percentages_round_half_up(self):
        milestones = plan_milestones(goal_stub(target_amount=1000, days=720), start=START)
        assert len(milestones) == 8
        assert milestones[0].name == "Milestone 1: 13%"
        assert milestones[0].target_amount == 125.0

    def test_count_capped(self):
        assert len(plan_milestones(goal_stub(days=3650), start=START)) == 8
        assert len(plan_milestones(goal_stub(days=3650), start=START, max_count=3)) == 3

    def test_last_milestone_hits_target(self):
        milestones = plan_milestones(goal_stub(target_amount=1000, days=270), start=START)
        assert milestones[-1].target_amount == 1000
        assert milestones[0].target_amount == 333.33

    def test_past_or_same_day_target_plans_nothing(self):
        assert plan_milestones(goal_stub(days=0), start=START) == []
        assert plan_milestones(goal_stub(days=-30), start=START) == []

    def test_rewards_follow_goal_type(self):
        milestones = plan_milestones(goal_stub(days=360), start=START)
        assert [m.reward for m in milestones] == [
            "Plan your itinerary",
            "Book accommodation",
            "Treat yourself to a nice meal",
            "Treat yourself to a nice meal",
        ]


def test_default_rewards_for_unlisted_types():
    assert milestone_reward(1, GoalType.retirement) == "Celebrate your progress"
    assert milestone_reward(5, "savings") == "Share your achievement"


async def test_smart_milestones_are_not_duplicated(session, make_goal):
    goal = await make_goal(target_amount=1200, target_date=date.today() + timedelta(days=360))
    engine = GoalsEngine(session)

    first = await engine.create_smart_milestones(goal.id)
    second = await engine.create_smart_milestones(goal.id)

    assert len(first) == 4
    assert [m.id for m in second] == [m.id for m in first]
    assert len(await crud_goal.get_milestones_for_goal(goal.id, session)) == 4


async def test_smart_milestones_for_unknown_goal(session):
    assert await GoalsEngine(session).create_smart_milestones(uuid.uuid4()) == []


async def test_milestones_stay_completed_after_withdrawal(session, workspace, make_goal):
    goal = await make_goal(target_amount=1200, target_date=date.today() + timedelta(days=360))
    engine = GoalsEngine(session)
    await engine.create_smart_milestones(goal.id)

    await engine.add_goal_progress(goal.id, workspace.id, 650)
    milestones = await crud_goal.get_milestones_for_goal(goal.id, session)
    assert [m.is_completed for m in milestones] == [True, True, False, False]
    assert all(m.completed_at is not None for m in milestones[:2])

    await engine.add_goal_progress(goal.id, workspace.id, -400)
    milestones = await crud_goal.get_milestones_for_goal(goal.id, session)
    assert [m.is_completed for m in milestones] == [True, True, False, False]
