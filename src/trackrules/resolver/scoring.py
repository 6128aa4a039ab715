"""Tie-break scoring for candidate streams.

Higher scores win. Scores only order streams that already satisfy a
language preference; they never override the preference order itself.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from trackrules.domain import MediaStreamDescriptor

# Audio codecs in descending order of preference
CODEC_PREFERENCE: tuple[str, ...] = (
    "eac3",
    "truehd",
    "dts",
    "dtshd",
    "ac3",
    "aac",
    "flac",
    "opus",
    "vorbis",
    "pcm",
    "mp3",
)

DEFAULT_AUDIO_BONUS = 1000
CHANNEL_WEIGHT = 10
DEFAULT_SUBTITLE_BONUS = 10
FORCED_SUBTITLE_BONUS = 5


def codec_rank(codec: str | None) -> int:
    """Return the position of codec in CODEC_PREFERENCE.

    Matching is case-insensitive. Unknown or missing codecs rank last, at
    len(CODEC_PREFERENCE).
    """
    value = (codec or "").strip().casefold()
    try:
        return CODEC_PREFERENCE.index(value)
    except ValueError:
        return len(CODEC_PREFERENCE)


def score_audio_stream(stream: MediaStreamDescriptor) -> int:
    """Score an audio stream.

    default flag (1000) + channels * 10 + codec term, where the codec term is
    len(CODEC_PREFERENCE) - rank: eac3 scores 11, mp3 scores 1 and an
    unknown codec scores 0.
    """
    default_score = DEFAULT_AUDIO_BONUS if stream.is_default else 0
    channel_score = (stream.channel_count or 0) * CHANNEL_WEIGHT
    codec_score = len(CODEC_PREFERENCE) - codec_rank(stream.codec)
    return default_score + channel_score + codec_score


def score_subtitle_stream(stream: MediaStreamDescriptor) -> int:
    """Score a subtitle stream: default flag (10) + forced flag (5)."""
    score = 0
    if stream.is_default:
        score += DEFAULT_SUBTITLE_BONUS
    if stream.is_forced:
        score += FORCED_SUBTITLE_BONUS
    return score


def best_stream(
    streams: Iterable[MediaStreamDescriptor],
    score: Callable[[MediaStreamDescriptor], int],
) -> MediaStreamDescriptor | None:
    """Return the highest-scoring stream, or None for an empty input.

    Ties keep the earliest stream in iteration order.
    """
    return max(streams, key=score, default=None)
