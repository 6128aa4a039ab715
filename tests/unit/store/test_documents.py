"""Unit tests for the rule document models."""

import pytest
from pydantic import ValidationError

from trackrules.domain import RuleScope, SubtitleMode, TrackRule, UserRuleSet
from trackrules.store import TrackRuleDocument, UserRulesDocument


class TestTrackRuleDocument:
    """Tests for TrackRuleDocument."""

    def test_parses_camel_case_payload(self, series_id):
        doc = TrackRuleDocument.model_validate(
            {
                "scope": 2,
                "targetId": series_id,
                "audio": ["jpn"],
                "subs": ["eng"],
                "subsMode": 2,
                "dontTranscode": True,
                "enabled": False,
            }
        )
        rule = doc.to_domain()
        assert rule.scope == RuleScope.SERIES
        assert rule.target_id == series_id
        assert rule.audio_preferences == ("jpn",)
        assert rule.subtitle_preferences == ("eng",)
        assert rule.subtitle_mode == SubtitleMode.PREFER_FORCED
        assert rule.suppress_transcode is True
        assert rule.enabled is False

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Series", RuleScope.SERIES),
            ("library", RuleScope.LIBRARY),
            ("0", RuleScope.GLOBAL),
            (1, RuleScope.LIBRARY),
        ],
    )
    def test_scope_names_are_accepted(self, raw, expected):
        assert TrackRuleDocument.model_validate({"scope": raw}).scope == expected

    @pytest.mark.parametrize(
        "raw", ["PreferForced", "prefer_forced", "prefer-forced", "2"]
    )
    def test_subtitle_mode_spellings(self, raw):
        doc = TrackRuleDocument.model_validate({"subsMode": raw})
        assert doc.subs_mode == SubtitleMode.PREFER_FORCED

    def test_unknown_scope_is_rejected(self):
        with pytest.raises(ValidationError):
            TrackRuleDocument.model_validate({"scope": 7})
        with pytest.raises(ValidationError):
            TrackRuleDocument.model_validate({"scope": "Episode"})

    def test_missing_preferences_get_defaults(self):
        rule = TrackRuleDocument.model_validate(
            {"audio": None, "subs": []}
        ).to_domain()
        assert rule.audio_preferences == ("any",)
        assert rule.subtitle_preferences == ("none",)

    def test_blank_entries_are_dropped(self):
        rule = TrackRuleDocument.model_validate(
            {"audio": [" jpn ", "", "  "], "subs": ["   "]}
        ).to_domain()
        assert rule.audio_preferences == ("jpn",)
        assert rule.subtitle_preferences == ("none",)

    def test_blank_target_is_none(self):
        doc = TrackRuleDocument.model_validate({"scope": 1, "targetId": "  "})
        assert doc.target_id is None

    def test_unknown_fields_are_ignored(self):
        doc = TrackRuleDocument.model_validate({"scope": 0, "comment": "hi"})
        assert doc.scope == RuleScope.GLOBAL


class TestUserRulesDocument:
    """Tests for UserRulesDocument."""

    def test_to_json_dict_uses_wire_names(self, user_id, make_rule):
        rule_set = UserRuleSet(
            user_id, rules=(make_rule(audio=["jpn"], subs=["eng"], mode=SubtitleMode.ALWAYS),)
        )
        payload = UserRulesDocument.from_domain(rule_set).to_json_dict()

        assert payload == {
            "version": 1,
            "userId": user_id,
            "rules": [
                {
                    "scope": 0,
                    "audio": ["jpn"],
                    "subs": ["eng"],
                    "subsMode": 3,
                    "dontTranscode": False,
                    "enabled": True,
                }
            ],
        }

    def test_null_rules(self):
        doc = UserRulesDocument.model_validate({"version": 1, "rules": None})
        assert doc.rules == []
        assert doc.user_id == ""

    def test_to_domain_preserves_order(self, user_id):
        doc = UserRulesDocument.model_validate(
            {
                "userId": user_id,
                "rules": [{"audio": ["fra"]}, {"audio": ["deu"]}],
            }
        )
        rule_set = doc.to_domain()
        assert [r.audio_preferences for r in rule_set.rules] == [("fra",), ("deu",)]
        assert all(isinstance(r, TrackRule) for r in rule_set.rules)
