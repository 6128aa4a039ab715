"""Per-user rule persistence.

Usage:
    from trackrules.store import JsonRuleStore

    store = JsonRuleStore("~/.trackrules")
    rule_set = await store.get(user_id)
"""

from trackrules.store.base import RuleSetMutator, RuleStore
from trackrules.store.documents import TrackRuleDocument, UserRulesDocument
from trackrules.store.exceptions import InvalidUserIdError, RuleStoreError
from trackrules.store.json_store import STORE_DIRNAME, JsonRuleStore
from trackrules.store.locks import UserLockRegistry

__all__ = [
    "RuleStore",
    "RuleSetMutator",
    "JsonRuleStore",
    "STORE_DIRNAME",
    "TrackRuleDocument",
    "UserRulesDocument",
    "UserLockRegistry",
    "RuleStoreError",
    "InvalidUserIdError",
]
