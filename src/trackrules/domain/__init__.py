"""Domain models and enums for Track Rules.

This package contains the value types shared by the resolver, the rule
store and the session hook:

- Domain models: TrackRule, UserRuleSet, MediaStreamDescriptor
- Domain enums: RuleScope, SubtitleMode, StreamKind
- Keywords: ANY, NONE, CURRENT_SCHEMA_VERSION

Usage:
    from trackrules.domain import TrackRule, UserRuleSet, RuleScope
"""

from .enums import (
    ANY,
    CURRENT_SCHEMA_VERSION,
    NONE,
    RuleScope,
    StreamKind,
    SubtitleMode,
)
from .models import (
    MediaStreamDescriptor,
    TrackRule,
    UserRuleSet,
)

__all__ = [
    # Models
    "TrackRule",
    "UserRuleSet",
    "MediaStreamDescriptor",
    # Enums
    "RuleScope",
    "SubtitleMode",
    "StreamKind",
    # Keywords
    "ANY",
    "NONE",
    "CURRENT_SCHEMA_VERSION",
]
