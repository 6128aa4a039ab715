"""Transcode guards."""

from __future__ import annotations

import logging

from trackrules.session.interfaces import TranscodeEvaluationContext

logger = logging.getLogger(__name__)


class PassthroughTranscodeGuard:
    """Guard that never withholds changes.

    Used until the media server exposes enough stream-compatibility detail
    to predict whether a track switch forces a transcode.
    """

    async def should_skip(self, context: TranscodeEvaluationContext) -> bool:
        logger.debug(
            "Transcode guard allowing changes for session %s (audio=%s, subtitle=%s)",
            context.session.id,
            context.audio_stream_index,
            context.subtitle_stream_index,
        )
        return False
