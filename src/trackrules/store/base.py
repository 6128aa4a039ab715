"""Rule store interface."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from trackrules.domain import UserRuleSet

RuleSetMutator = Callable[[UserRuleSet], UserRuleSet]


@runtime_checkable
class RuleStore(Protocol):
    """Persistence for per-user rule sets."""

    async def get(self, user_id: str) -> UserRuleSet:
        """Return the user's rule set, or an empty one if nothing usable exists."""
        ...

    async def save(self, rule_set: UserRuleSet) -> UserRuleSet:
        """Replace the user's persisted rule set and return what was stored."""
        ...

    async def update(self, user_id: str, mutate: RuleSetMutator) -> UserRuleSet:
        """Atomically load, transform and save a user's rule set."""
        ...
