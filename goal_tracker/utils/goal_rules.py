# goal_tracker/utils/goal_rules.py
"""
Declarative tables used by the goal engine.

Keyword sets, transaction-type relevance and milestone rewards are plain data
so they can be swapped per deployment (or per test) without touching the
classification code.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Tuple


def type_key(value: Any) -> str:
    """Normalize an enum member or raw string to its stored string value."""
    return getattr(value, "value", value)


DEFAULT_GOAL_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "emergency_fund": ("emergency", "urgent", "backup", "reserve", "safety", "fund"),
    "vacation":       ("vacation", "holiday", "travel", "trip", "flight", "hotel", "tour"),
    "house":          ("house", "home", "property", "mortgage", "down payment", "real estate"),
    "debt_payment":   ("debt", "payment", "loan", "credit", "installment", "payoff"),
    "investment":     ("invest", "portfolio", "stock", "bond", "mutual fund", "trading"),
    "education":      ("education", "school", "course", "training", "certification", "tuition"),
    "retirement":     ("retirement", "pension", "ira", "401k", "senior", "elderly"),
    "savings":        ("saving", "save", "deposit", "accumulate", "reserve"),
}

# Transaction types that may count toward a goal matched by keywords
DEFAULT_RELEVANCE: Dict[str, FrozenSet[str]] = {
    "savings":        frozenset({"income", "saving", "transfer"}),
    "emergency_fund": frozenset({"income", "saving", "transfer"}),
    "retirement":     frozenset({"income", "saving", "transfer"}),
    "investment":     frozenset({"income", "saving", "transfer"}),
    "vacation":       frozenset({"expense", "saving"}),
    "house":          frozenset({"income", "saving", "expense"}),
    "education":      frozenset({"expense", "saving"}),
    "debt_payment":   frozenset({"repayment", "debt", "transfer", "expense"}),
}

# Transaction types that may count toward a goal matched by a linked account/debt
DEFAULT_LINKED_RELEVANCE: Dict[str, FrozenSet[str]] = {
    "savings":        frozenset({"income", "saving", "transfer"}),
    "emergency_fund": frozenset({"income", "saving", "transfer"}),
    "retirement":     frozenset({"income", "saving", "transfer"}),
    "debt_payment":   frozenset({"repayment", "debt", "transfer", "expense"}),
}
DEFAULT_LINKED_FALLBACK: FrozenSet[str] = frozenset({"income", "saving", "expense", "transfer"})

# Goal types whose sum-based progress ignores contributions from expense transactions
EXPENSE_EXCLUDED_GOAL_TYPES: FrozenSet[str] = frozenset({"vacation", "house"})

MILESTONE_REWARDS: Dict[str, Tuple[str, ...]] = {
    "vacation":       ("Plan your itinerary", "Book accommodation", "Treat yourself to a nice meal"),
    "house":          ("Visit open houses", "Research neighborhoods", "Celebrate with family dinner"),
    "education":      ("Buy study materials", "Enroll in a prep course", "Reward yourself with a book"),
    "emergency_fund": ("Peace of mind achieved", "Celebrate financial security", "Treat yourself responsibly"),
}
DEFAULT_MILESTONE_REWARDS: Tuple[str, ...] = ("Celebrate your progress", "Treat yourself", "Share your achievement")


def milestone_reward(order: int, goal_type: Any) -> str:
    rewards = MILESTONE_REWARDS.get(type_key(goal_type), DEFAULT_MILESTONE_REWARDS)
    return rewards[min(order - 1, len(rewards) - 1)]


@dataclass(frozen=True)
class ClassificationRules:
    keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_GOAL_KEYWORDS))
    relevance: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: dict(DEFAULT_RELEVANCE))
    linked_relevance: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: dict(DEFAULT_LINKED_RELEVANCE))
    linked_fallback: FrozenSet[str] = DEFAULT_LINKED_FALLBACK

    def matching_keywords(self, goal_type: Any, description: str) -> List[str]:
        text = (description or "").lower()
        return [kw for kw in self.keywords.get(type_key(goal_type), ()) if kw in text]

    def is_relevant(self, transaction_type: str, goal_type: Any) -> bool:
        return transaction_type in self.relevance.get(type_key(goal_type), frozenset())

    def is_relevant_for_linked(self, transaction_type: str, goal_type: Any) -> bool:
        allowed = self.linked_relevance.get(type_key(goal_type), self.linked_fallback)
        return transaction_type in allowed


DEFAULT_RULES = ClassificationRules()
