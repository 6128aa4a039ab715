"""Domain enums and keywords for Track Rules.

Enum values match the integers used by the persisted rule format, so they
must never be renumbered.
"""

from enum import Enum, IntEnum

# Reserved preference keywords understood by the resolver
ANY = "any"
NONE = "none"

# Current version of the persisted rule schema
CURRENT_SCHEMA_VERSION = 1


class RuleScope(IntEnum):
    """Precedence tier of a rule (higher value is more specific)."""

    GLOBAL = 0
    LIBRARY = 1
    SERIES = 2


class SubtitleMode(IntEnum):
    """How the resolver picks a subtitle stream."""

    NONE = 0  # Always turn subtitles off
    DEFAULT = 1  # Prefer streams flagged default
    PREFER_FORCED = 2  # Prefer forced streams, then default behavior
    ALWAYS = 3  # Always pick a subtitle stream when one exists
    ONLY_IF_AUDIO_NOT_PREFERRED = 4  # Off when audio is already preferred


class StreamKind(Enum):
    """Kind of a media stream. Only audio and subtitle streams are resolved."""

    AUDIO = "audio"
    SUBTITLE = "subtitle"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: str | None) -> "StreamKind":
        """Map a host stream type label ("Audio", "subtitle", ...) to a kind."""
        if not label:
            return cls.OTHER
        try:
            return cls(label.strip().lower())
        except ValueError:
            return cls.OTHER
