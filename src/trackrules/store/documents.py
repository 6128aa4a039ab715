"""Pydantic models for the persisted and transmitted rule format.

The same document shape is used on disk and by the HTTP API:

    {
      "version": 1,
      "userId": "6f1c...",
      "rules": [
        {"scope": 2, "targetId": "...", "audio": ["jpn"], "subs": ["eng"],
         "subsMode": 2, "dontTranscode": false, "enabled": true}
      ]
    }

Enums are written as integers. On read, enum names ("Series",
"PreferForced", "prefer_forced") are accepted as well.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trackrules.domain import (
    ANY,
    CURRENT_SCHEMA_VERSION,
    NONE,
    RuleScope,
    SubtitleMode,
    TrackRule,
    UserRuleSet,
)


def _coerce_enum(enum_cls: type[IntEnum], value: Any) -> Any:
    """Accept enum names and numeric strings in addition to integers."""
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        key = text.replace("_", "").replace("-", "").casefold()
        for member in enum_cls:
            if member.name.replace("_", "").casefold() == key:
                return member
    return value


def _clean_preferences(values: list[str] | None, fallback: str) -> tuple[str, ...]:
    """Trim entries and drop blanks; an absent or empty list becomes (fallback,)."""
    cleaned = tuple(v.strip() for v in values or () if v and v.strip())
    return cleaned or (fallback,)


class TrackRuleDocument(BaseModel):
    """Wire representation of a single rule."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    scope: RuleScope = RuleScope.GLOBAL
    target_id: str | None = Field(default=None, alias="targetId")
    audio: list[str] = Field(default_factory=list)
    subs: list[str] = Field(default_factory=list)
    subs_mode: SubtitleMode = Field(default=SubtitleMode.DEFAULT, alias="subsMode")
    dont_transcode: bool = Field(default=False, alias="dontTranscode")
    enabled: bool = True

    @field_validator("scope", mode="before")
    @classmethod
    def coerce_scope(cls, v: Any) -> Any:
        """Accept scope names as well as integers."""
        return _coerce_enum(RuleScope, v)

    @field_validator("subs_mode", mode="before")
    @classmethod
    def coerce_subs_mode(cls, v: Any) -> Any:
        """Accept subtitle mode names as well as integers."""
        return _coerce_enum(SubtitleMode, v)

    @field_validator("target_id", mode="before")
    @classmethod
    def blank_target_to_none(cls, v: Any) -> Any:
        """Treat an empty target id as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("audio", "subs", mode="before")
    @classmethod
    def null_list_to_empty(cls, v: Any) -> Any:
        """Treat a null preference list as empty."""
        return [] if v is None else v

    def to_domain(self) -> TrackRule:
        """Convert to a TrackRule, applying preference defaults."""
        return TrackRule(
            scope=self.scope,
            target_id=self.target_id.strip() if self.target_id else None,
            audio_preferences=_clean_preferences(self.audio, ANY),
            subtitle_preferences=_clean_preferences(self.subs, NONE),
            subtitle_mode=self.subs_mode,
            suppress_transcode=self.dont_transcode,
            enabled=self.enabled,
        )

    @classmethod
    def from_domain(cls, rule: TrackRule) -> TrackRuleDocument:
        """Build the wire representation of a TrackRule."""
        return cls(
            scope=rule.scope,
            target_id=rule.target_id,
            audio=list(rule.audio_preferences),
            subs=list(rule.subtitle_preferences),
            subs_mode=rule.subtitle_mode,
            dont_transcode=rule.suppress_transcode,
            enabled=rule.enabled,
        )


class UserRulesDocument(BaseModel):
    """Wire representation of a user's rule set."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: int = CURRENT_SCHEMA_VERSION
    user_id: str = Field(default="", alias="userId")
    rules: list[TrackRuleDocument] = Field(default_factory=list)

    @field_validator("rules", mode="before")
    @classmethod
    def null_rules_to_empty(cls, v: Any) -> Any:
        """Treat a null rule list as empty."""
        return [] if v is None else v

    def to_domain(self) -> UserRuleSet:
        """Convert to a UserRuleSet."""
        return UserRuleSet(
            user_id=self.user_id,
            version=self.version,
            rules=tuple(rule.to_domain() for rule in self.rules),
        )

    @classmethod
    def from_domain(cls, rule_set: UserRuleSet) -> UserRulesDocument:
        """Build the wire representation of a UserRuleSet."""
        return cls(
            version=rule_set.version,
            user_id=rule_set.user_id,
            rules=[TrackRuleDocument.from_domain(r) for r in rule_set.rules],
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, integer enums and nulls omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
