"""Pure-function rule resolution.

Given a user's rule set and the streams of the item being played, compute
which audio and subtitle streams the player should switch to. All functions
are pure (no side effects, no I/O) and safe to call from any thread or from
inside an event loop.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from trackrules.domain import (
    ANY,
    NONE,
    MediaStreamDescriptor,
    RuleScope,
    StreamKind,
    TrackRule,
    UserRuleSet,
)
from trackrules.language import languages_match, normalize, normalize_many
from trackrules.resolver.context import (
    DISABLE_SUBTITLES,
    NO_CHANGE,
    ResolutionContext,
    ResolutionResult,
)
from trackrules.resolver.scoring import best_stream, score_audio_stream
from trackrules.resolver.subtitles import (
    SubtitleAction,
    SubtitleDecision,
    select_subtitle,
)

logger = logging.getLogger(__name__)


def resolve(
    rule_set: UserRuleSet | None,
    context: ResolutionContext,
) -> ResolutionResult:
    """Resolve the desired audio and subtitle streams for a playback.

    Steps:
    1. No rule set, no streams or no enabled rule: no change.
    2. Pick exactly one rule by scope precedence (series, library, global).
    3. Pick the audio stream by preference order, breaking ties by score.
    4. Pick the subtitle action according to the rule's subtitle mode.
    5. Drop anything that matches what is already playing.

    Args:
        rule_set: The user's rules, or None when none could be loaded.
        context: Streams and current indices of the playback.

    Returns:
        ResolutionResult. NO_CHANGE (no rule reference either) when nothing
        needs to switch.
    """
    if rule_set is None or not context.media_streams:
        return NO_CHANGE

    enabled_rules = rule_set.enabled_rules
    if not enabled_rules:
        return NO_CHANGE

    rule = select_rule(enabled_rules, context.series_id, context.library_id)
    if rule is None:
        logger.debug("No rule matched for user %s", context.user_id)
        return NO_CHANGE

    audio_preferences = normalize_or_fallback(rule.audio_preferences, ANY)
    subtitle_preferences = normalize_or_fallback(rule.subtitle_preferences, NONE)

    audio_streams = [s for s in context.media_streams if s.kind == StreamKind.AUDIO]
    subtitle_streams = [
        s for s in context.media_streams if s.kind == StreamKind.SUBTITLE
    ]

    audio_candidate = select_audio_stream(audio_streams, audio_preferences)
    selected_audio_language = (
        normalize(audio_candidate.language) if audio_candidate is not None else ""
    )

    decision = select_subtitle(
        subtitle_streams,
        subtitle_preferences,
        rule.subtitle_mode,
        audio_preferences,
        selected_audio_language,
    )

    audio_index = compute_audio_change(
        audio_candidate, context.current_audio_stream_index
    )
    subtitle_index = compute_subtitle_change(
        decision, context.current_subtitle_stream_index
    )

    if audio_index is None and subtitle_index is None:
        return NO_CHANGE

    logger.debug(
        "Resolved %s rule for user %s: audio=%s, subtitle=%s",
        rule.scope.name.lower(),
        context.user_id,
        audio_index,
        subtitle_index,
    )
    return ResolutionResult(
        applied_rule=rule,
        audio_stream_index=audio_index,
        subtitle_stream_index=subtitle_index,
        scope=rule.scope,
    )


def select_rule(
    rules: Sequence[TrackRule],
    series_id: str | None,
    library_id: str | None,
) -> TrackRule | None:
    """Select the single rule that governs a playback.

    The first series rule for series_id wins; otherwise the first library
    rule for library_id; otherwise the first global rule. Fields are never
    blended across tiers.
    """
    series_rule = next(
        (r for r in rules if r.scope == RuleScope.SERIES and r.applies_to(series_id)),
        None,
    )
    if series_rule is not None:
        return series_rule

    library_rule = next(
        (
            r
            for r in rules
            if r.scope == RuleScope.LIBRARY and r.applies_to(library_id)
        ),
        None,
    )
    if library_rule is not None:
        return library_rule

    return next((r for r in rules if r.scope == RuleScope.GLOBAL), None)


def normalize_or_fallback(values: Iterable[str] | None, fallback: str) -> list[str]:
    """Normalize preferences, substituting [fallback] when nothing is left."""
    normalized = normalize_many(values or ())
    if not normalized:
        return [fallback]
    return normalized


def select_audio_stream(
    audio_streams: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
) -> MediaStreamDescriptor | None:
    """Pick the audio stream for the first preference that matches anything.

    "any" matches every audio stream. Within a preference the highest
    score_audio_stream wins.
    """
    if not audio_streams:
        return None

    for preference in preferences:
        wanted = preference.casefold()
        if wanted == ANY:
            candidates: Iterable[MediaStreamDescriptor] = audio_streams
        else:
            candidates = [
                s for s in audio_streams if languages_match(s.language, preference)
            ]

        candidate = best_stream(candidates, score_audio_stream)
        if candidate is not None:
            return candidate

    return None


def compute_audio_change(
    candidate: MediaStreamDescriptor | None,
    current_index: int | None,
) -> int | None:
    """Return the audio index to switch to, or None if already playing."""
    if candidate is None:
        return None
    if current_index == candidate.index:
        return None
    return candidate.index


def compute_subtitle_change(
    decision: SubtitleDecision,
    current_index: int | None,
) -> int | None:
    """Return the subtitle index to switch to, or None to leave it alone.

    A missing or negative current index means subtitles are already off, so
    a disable decision produces no change in that case.
    """
    current = current_index if current_index is not None else DISABLE_SUBTITLES

    if decision.action == SubtitleAction.DISABLE:
        return None if current < 0 else DISABLE_SUBTITLES

    if decision.action == SubtitleAction.NO_CHANGE or decision.stream is None:
        return None

    desired = decision.stream.index
    return None if current == desired else desired
