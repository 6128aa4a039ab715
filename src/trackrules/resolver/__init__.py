"""Pure-function rule resolution.

This package computes, for one playback, which audio and subtitle streams
should become active according to the user's scoped rules. All functions
are pure (no side effects).

Re-exports the public API.
"""

from trackrules.resolver.context import (
    DISABLE_SUBTITLES,
    NO_CHANGE,
    ResolutionContext,
    ResolutionResult,
)
from trackrules.resolver.resolve import (
    compute_audio_change,
    compute_subtitle_change,
    normalize_or_fallback,
    resolve,
    select_audio_stream,
    select_rule,
)
from trackrules.resolver.scoring import (
    CODEC_PREFERENCE,
    score_audio_stream,
    score_subtitle_stream,
)
from trackrules.resolver.subtitles import (
    SubtitleAction,
    SubtitleDecision,
    select_subtitle,
)

__all__ = [
    # Values
    "DISABLE_SUBTITLES",
    "NO_CHANGE",
    "ResolutionContext",
    "ResolutionResult",
    # Resolution
    "resolve",
    "select_rule",
    "select_audio_stream",
    "normalize_or_fallback",
    "compute_audio_change",
    "compute_subtitle_change",
    # Scoring
    "CODEC_PREFERENCE",
    "score_audio_stream",
    "score_subtitle_stream",
    # Subtitles
    "SubtitleAction",
    "SubtitleDecision",
    "select_subtitle",
]
