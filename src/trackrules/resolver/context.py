"""Input and output values of a resolution."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackrules.domain import MediaStreamDescriptor, RuleScope, TrackRule

# Subtitle index meaning "turn subtitles off"
DISABLE_SUBTITLES = -1


@dataclass(frozen=True)
class ResolutionContext:
    """Everything the resolver needs to know about the current playback."""

    user_id: str
    series_id: str | None = None
    library_id: str | None = None
    media_streams: Sequence[MediaStreamDescriptor] = field(default_factory=tuple)
    current_audio_stream_index: int | None = None
    current_subtitle_stream_index: int | None = None


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a resolution.

    An absent index means "leave that track as it is". A subtitle index of
    DISABLE_SUBTITLES means "turn subtitles off".
    """

    applied_rule: TrackRule | None = None
    audio_stream_index: int | None = None
    subtitle_stream_index: int | None = None
    scope: RuleScope | None = None

    @property
    def has_changes(self) -> bool:
        """Return True if either track should be switched."""
        return (
            self.audio_stream_index is not None
            or self.subtitle_stream_index is not None
        )


NO_CHANGE = ResolutionResult()
