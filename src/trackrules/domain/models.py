"""Domain models for Track Rules.

Rules and rule sets are immutable values. A rule set is replaced wholesale
when a user saves, never patched in place.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from trackrules.core.validation import same_identifier
from trackrules.domain.enums import (
    ANY,
    CURRENT_SCHEMA_VERSION,
    NONE,
    RuleScope,
    StreamKind,
    SubtitleMode,
)


@dataclass(frozen=True)
class TrackRule:
    """A single scoped audio/subtitle preference rule."""

    scope: RuleScope = RuleScope.GLOBAL
    # Library id or series id; ignored for global rules
    target_id: str | None = None
    audio_preferences: tuple[str, ...] = (ANY,)
    subtitle_preferences: tuple[str, ...] = (NONE,)
    subtitle_mode: SubtitleMode = SubtitleMode.DEFAULT
    suppress_transcode: bool = False
    enabled: bool = True

    def applies_to(self, candidate_id: str | None) -> bool:
        """Check whether this rule governs the given series or library id.

        Global rules apply to everything. Scoped rules need both their own
        target id and a candidate id, and match only when the two are equal.
        A scoped rule without a target id therefore never matches.

        Args:
            candidate_id: Series or library id of the item being played.

        Returns:
            True if the rule applies.
        """
        if self.scope == RuleScope.GLOBAL:
            return True
        return same_identifier(self.target_id, candidate_id)


@dataclass(frozen=True)
class UserRuleSet:
    """All rules configured by one user."""

    user_id: str
    version: int = CURRENT_SCHEMA_VERSION
    # Order is preserved for display; resolution uses scope precedence
    rules: tuple[TrackRule, ...] = field(default_factory=tuple)

    @classmethod
    def create(cls, user_id: str) -> UserRuleSet:
        """Create an empty rule set at the current schema version."""
        return cls(user_id=user_id, version=CURRENT_SCHEMA_VERSION, rules=())

    @property
    def enabled_rules(self) -> tuple[TrackRule, ...]:
        """Rules with enabled=True, in stored order."""
        return tuple(rule for rule in self.rules if rule.enabled)

    def with_rules(self, rules: Iterable[TrackRule]) -> UserRuleSet:
        """Return a copy whose rule collection is replaced by rules."""
        return replace(self, rules=tuple(rules))


@dataclass(frozen=True)
class MediaStreamDescriptor:
    """One stream of a playable item, as reported by the media server."""

    kind: StreamKind
    # Stable index used when telling a player to switch tracks
    index: int
    language: str = ""
    is_default: bool = False
    is_forced: bool = False
    # Audio-specific fields
    channel_count: int | None = None
    codec: str = ""
