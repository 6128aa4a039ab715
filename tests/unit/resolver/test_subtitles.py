"""Unit tests for subtitle selection per mode."""

from trackrules.domain import MediaStreamDescriptor, StreamKind, SubtitleMode
from trackrules.resolver.subtitles import (
    SubtitleAction,
    audio_matches_preference,
    find_by_preference,
    select_always,
    select_default,
    select_prefer_forced,
    select_subtitle,
)


def _sub(index, language="eng", *, default=False, forced=False):
    return MediaStreamDescriptor(
        kind=StreamKind.SUBTITLE,
        index=index,
        language=language,
        is_default=default,
        is_forced=forced,
    )


class TestFindByPreference:
    """Tests for find_by_preference."""

    def test_first_preference_with_a_match_wins(self):
        subs = [_sub(2, "eng"), _sub(3, "fra")]
        assert find_by_preference(subs, ["fra", "eng"]).index == 3

    def test_skips_preferences_without_match(self):
        subs = [_sub(2, "eng")]
        assert find_by_preference(subs, ["jpn", "eng"]).index == 2

    def test_none_keyword_is_skipped(self):
        subs = [_sub(2, "eng")]
        assert find_by_preference(subs, ["none"]) is None

    def test_any_keyword_matches_all(self):
        subs = [_sub(2, "eng"), _sub(3, "fra", default=True)]
        assert find_by_preference(subs, ["any"]).index == 3

    def test_stream_language_is_normalized(self):
        subs = [_sub(2, "ger")]
        assert find_by_preference(subs, ["deu"]).index == 2

    def test_predicate_filters(self):
        subs = [_sub(2, "eng"), _sub(3, "eng", forced=True)]
        match = find_by_preference(subs, ["eng"], lambda s: s.is_forced)
        assert match.index == 3


class TestSelectDefault:
    """Tests for the Default mode."""

    def test_prefers_default_in_wanted_language(self):
        subs = [_sub(2, "eng"), _sub(3, "fra", default=True), _sub(4, "eng", default=True)]
        decision = select_default(subs, ["eng"])
        assert decision.stream.index == 4

    def test_falls_back_to_first_default(self):
        subs = [_sub(2, "eng"), _sub(3, "fra", default=True)]
        decision = select_default(subs, ["jpn"])
        assert decision.stream.index == 3

    def test_falls_back_to_preferred_non_default(self):
        subs = [_sub(2, "fra"), _sub(3, "eng")]
        decision = select_default(subs, ["eng"])
        assert decision.stream.index == 3

    def test_nothing_suitable_is_no_change(self):
        subs = [_sub(2, "fra")]
        assert select_default(subs, ["eng"]).action == SubtitleAction.NO_CHANGE


class TestSelectPreferForced:
    """Tests for the PreferForced mode."""

    def test_forced_in_wanted_language(self):
        subs = [_sub(2, "eng"), _sub(3, "eng", forced=True)]
        assert select_prefer_forced(subs, ["eng"]).stream.index == 3

    def test_forced_in_other_language_before_default_logic(self):
        """A forced stream in any language beats a non-forced preferred one."""
        subs = [_sub(2, "eng", default=True), _sub(3, "fra", forced=True)]
        assert select_prefer_forced(subs, ["eng"]).stream.index == 3

    def test_falls_back_to_default_logic(self):
        subs = [_sub(2, "fra"), _sub(3, "eng", default=True)]
        assert select_prefer_forced(subs, ["eng"]).stream.index == 3


class TestSelectAlways:
    """Tests for the Always mode."""

    def test_preferred_language(self):
        subs = [_sub(2, "fra", default=True), _sub(3, "eng")]
        assert select_always(subs, ["eng"]).stream.index == 3

    def test_falls_back_to_best_scored_unrequested_language(self):
        """With no match, the best-scored stream is used regardless of language."""
        subs = [_sub(2, "fra"), _sub(3, "deu", default=True)]
        assert select_always(subs, ["eng"]).stream.index == 3

    def test_no_streams(self):
        assert select_always([], ["eng"]).action == SubtitleAction.NO_CHANGE


class TestSelectSubtitle:
    """Tests for select_subtitle dispatch."""

    def test_mode_none_disables_even_with_forced(self):
        subs = [_sub(2, forced=True, default=True)]
        decision = select_subtitle(subs, ["eng"], SubtitleMode.NONE, ["any"], "eng")
        assert decision.action == SubtitleAction.DISABLE

    def test_none_preference_disables(self):
        subs = [_sub(2, forced=True, default=True)]
        decision = select_subtitle(subs, ["none"], SubtitleMode.ALWAYS, ["any"], "eng")
        assert decision.action == SubtitleAction.DISABLE

    def test_none_among_other_preferences_does_not_disable(self):
        subs = [_sub(2, "eng")]
        decision = select_subtitle(
            subs, ["none", "eng"], SubtitleMode.DEFAULT, ["any"], "eng"
        )
        assert decision.action == SubtitleAction.USE

    def test_no_subtitle_streams_is_no_change(self):
        decision = select_subtitle([], ["eng"], SubtitleMode.ALWAYS, ["any"], "eng")
        assert decision.action == SubtitleAction.NO_CHANGE

    def test_only_if_audio_not_preferred_disables_when_preferred(self):
        subs = [_sub(2, "eng", default=True)]
        decision = select_subtitle(
            subs, ["eng"], SubtitleMode.ONLY_IF_AUDIO_NOT_PREFERRED, ["eng"], "eng"
        )
        assert decision.action == SubtitleAction.DISABLE

    def test_only_if_audio_not_preferred_uses_default_logic(self):
        subs = [_sub(2, "eng", default=True)]
        decision = select_subtitle(
            subs, ["eng"], SubtitleMode.ONLY_IF_AUDIO_NOT_PREFERRED, ["eng"], "jpn"
        )
        assert decision.action == SubtitleAction.USE
        assert decision.stream.index == 2


class TestAudioMatchesPreference:
    """Tests for audio_matches_preference."""

    def test_explicit_match(self):
        assert audio_matches_preference("jpn", ["eng", "jpn"])

    def test_any_is_not_explicit(self):
        assert not audio_matches_preference("eng", ["any"])

    def test_no_audio_selected(self):
        assert not audio_matches_preference("", ["eng"])
