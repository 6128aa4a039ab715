"""Subtitle selection.

Each SubtitleMode maps to a pure selection function over the available
subtitle streams and the rule's normalized preferences. The result is a
SubtitleDecision: turn subtitles off, leave them alone, or use a stream.

Keyword handling inside preference-ordered searches:
- "any" matches every candidate that passes the search predicate
- "none" is skipped; it only matters for the disable short-circuit
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from trackrules.domain import ANY, NONE, MediaStreamDescriptor, SubtitleMode
from trackrules.language import languages_match
from trackrules.resolver.scoring import best_stream, score_subtitle_stream

StreamPredicate = Callable[[MediaStreamDescriptor], bool]


class SubtitleAction(Enum):
    """What to do with the subtitle track."""

    DISABLE = "disable"
    NO_CHANGE = "no_change"
    USE = "use"


@dataclass(frozen=True)
class SubtitleDecision:
    """Outcome of subtitle selection."""

    action: SubtitleAction
    stream: MediaStreamDescriptor | None = None

    @classmethod
    def disable(cls) -> SubtitleDecision:
        return cls(SubtitleAction.DISABLE)

    @classmethod
    def no_change(cls) -> SubtitleDecision:
        return cls(SubtitleAction.NO_CHANGE)

    @classmethod
    def use(cls, stream: MediaStreamDescriptor) -> SubtitleDecision:
        return cls(SubtitleAction.USE, stream)


def _is_keyword(value: str, keyword: str) -> bool:
    return value.casefold() == keyword


def _always(_stream: MediaStreamDescriptor) -> bool:
    return True


def _is_forced(stream: MediaStreamDescriptor) -> bool:
    return stream.is_forced


def _is_default(stream: MediaStreamDescriptor) -> bool:
    return stream.is_default


def find_by_preference(
    candidates: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
    predicate: StreamPredicate = _always,
) -> MediaStreamDescriptor | None:
    """Walk preferences in order and return the first preference's best match.

    Args:
        candidates: Subtitle streams to search.
        preferences: Normalized language preferences.
        predicate: Extra filter every match must satisfy.

    Returns:
        Highest-scoring stream for the first preference that matches
        anything, or None.
    """
    if not candidates:
        return None

    for preference in preferences:
        if _is_keyword(preference, NONE):
            continue

        if _is_keyword(preference, ANY):
            matches = [s for s in candidates if predicate(s)]
        else:
            matches = [
                s
                for s in candidates
                if predicate(s) and languages_match(s.language, preference)
            ]

        match = best_stream(matches, score_subtitle_stream)
        if match is not None:
            return match

    return None


def select_default(
    subtitles: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
) -> SubtitleDecision:
    """Prefer default-flagged streams, then any preferred stream."""
    defaults = [s for s in subtitles if s.is_default]
    match = find_by_preference(defaults, preferences)
    if match is not None:
        return SubtitleDecision.use(match)

    fallback_default = next(iter(defaults), None)
    if fallback_default is not None:
        return SubtitleDecision.use(fallback_default)

    preferred = find_by_preference(subtitles, preferences)
    if preferred is not None:
        return SubtitleDecision.use(preferred)

    return SubtitleDecision.no_change()


def select_prefer_forced(
    subtitles: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
) -> SubtitleDecision:
    """Prefer forced streams in a wanted language, then any forced stream."""
    forced = find_by_preference(subtitles, preferences, _is_forced)
    if forced is not None:
        return SubtitleDecision.use(forced)

    fallback_forced = next((s for s in subtitles if s.is_forced), None)
    if fallback_forced is not None:
        return SubtitleDecision.use(fallback_forced)

    return select_default(subtitles, preferences)


def select_always(
    subtitles: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
) -> SubtitleDecision:
    """Always pick a stream when one exists.

    Falls back to the best-scored stream overall, even if its language was
    never requested.
    """
    first_preference = next(
        (p for p in preferences if not _is_keyword(p, NONE)),
        None,
    )
    if first_preference is not None:
        match = find_by_preference(subtitles, preferences)
        if match is not None:
            return SubtitleDecision.use(match)

    fallback = best_stream(subtitles, score_subtitle_stream)
    if fallback is None:
        return SubtitleDecision.no_change()
    return SubtitleDecision.use(fallback)


_MODE_SELECTORS: dict[
    SubtitleMode,
    Callable[[Sequence[MediaStreamDescriptor], Sequence[str]], SubtitleDecision],
] = {
    SubtitleMode.DEFAULT: select_default,
    SubtitleMode.PREFER_FORCED: select_prefer_forced,
    SubtitleMode.ALWAYS: select_always,
    SubtitleMode.ONLY_IF_AUDIO_NOT_PREFERRED: select_default,
}


def audio_matches_preference(
    selected_audio_language: str,
    audio_preferences: Sequence[str],
) -> bool:
    """Check if the chosen audio language is one the user explicitly asked for.

    The "any" keyword does not count as an explicit preference.
    """
    return any(
        not _is_keyword(preference, ANY)
        and languages_match(selected_audio_language, preference)
        for preference in audio_preferences
    )


def select_subtitle(
    subtitles: Sequence[MediaStreamDescriptor],
    preferences: Sequence[str],
    mode: SubtitleMode,
    audio_preferences: Sequence[str],
    selected_audio_language: str,
) -> SubtitleDecision:
    """Decide what to do with subtitles for one playback.

    Args:
        subtitles: Available subtitle streams.
        preferences: Normalized subtitle preferences (never empty).
        mode: The rule's subtitle mode.
        audio_preferences: Normalized audio preferences of the same rule.
        selected_audio_language: Normalized language of the audio stream the
            resolver picked, or "" when no audio stream was picked.

    Returns:
        The subtitle decision.
    """
    if mode == SubtitleMode.NONE or (
        len(preferences) == 1 and _is_keyword(preferences[0], NONE)
    ):
        return SubtitleDecision.disable()

    if not subtitles:
        return SubtitleDecision.no_change()

    if mode == SubtitleMode.ONLY_IF_AUDIO_NOT_PREFERRED and audio_matches_preference(
        selected_audio_language, audio_preferences
    ):
        return SubtitleDecision.disable()

    selector = _MODE_SELECTORS.get(mode, select_default)
    return selector(subtitles, preferences)
