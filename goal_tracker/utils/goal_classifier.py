# goal_tracker/utils/goal_classifier.py
import enum
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from goal_tracker.models.goal import ContributionType, GoalType
from goal_tracker.utils.goal_rules import ClassificationRules, DEFAULT_RULES, type_key


class MatchRule(str, enum.Enum):
    linked_account = "linked_account"
    linked_debt = "linked_debt"
    keywords = "keywords"


@dataclass(frozen=True)
class GoalMatch:
    goal: Any
    contribution_type: ContributionType
    reason: str
    rule: MatchRule


class TransactionClassifier:
    """
    Decides which goals a transaction contributes to.

    Works on any objects exposing the goal/transaction attributes (ORM rows or
    their pydantic snapshots) and performs no I/O.
    """

    def __init__(self, rules: Optional[ClassificationRules] = None):
        self.rules = rules or DEFAULT_RULES

    def match_goal(self, transaction: Any, goal: Any) -> Optional[GoalMatch]:
        if float(transaction.amount or 0) <= 0:
            return None

        rule: Optional[MatchRule] = None
        reason = ""
        contribution_type = ContributionType.transaction

        if goal.linked_account_id is not None and goal.linked_account_id == transaction.account_id:
            rule = MatchRule.linked_account
            reason = f"Account: {goal.linked_account_id}"

        if (
            type_key(goal.type) == GoalType.debt_payment.value
            and goal.linked_debt_id is not None
            and goal.linked_debt_id == transaction.debt_id
        ):
            contribution_type = ContributionType.debt_payment
            if rule is None:
                rule = MatchRule.linked_debt
                reason = f"Debt: {goal.linked_debt_id}"

        if rule is not None:
            relevant = self.rules.is_relevant_for_linked(transaction.type, goal.type)
        else:
            matched = self.rules.matching_keywords(goal.type, transaction.description)
            if not matched:
                return None
            rule = MatchRule.keywords
            contribution_type = ContributionType.auto_categorized
            reason = f"Keywords: {', '.join(matched)}"
            relevant = self.rules.is_relevant(transaction.type, goal.type)

        if not relevant:
            return None
        return GoalMatch(goal=goal, contribution_type=contribution_type, reason=reason, rule=rule)

    def classify(self, transaction: Any, goals: Iterable[Any]) -> List[GoalMatch]:
        matches = []
        for goal in goals:
            match = self.match_goal(transaction, goal)
            if match is not None:
                matches.append(match)
        return matches
