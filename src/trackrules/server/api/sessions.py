"""API handlers for live sessions.

Endpoints:
    POST /TrackRules/apply                 - Switch tracks on a session now
    POST /TrackRules/events/playback-start - Notify that playback started
"""

from __future__ import annotations

import logging

from aiohttp import web

from trackrules.host import HostConnectionError
from trackrules.server.api.context import (
    host_unavailable,
    require_dispatcher,
    require_host,
)
from trackrules.server.api.errors import (
    INVALID_REQUEST,
    NOT_FOUND,
    ApiError,
    api_error,
)
from trackrules.server.api.models import (
    ApplyRequest,
    PlaybackStartRequest,
    read_model,
)
from trackrules.session import PlaybackEventBus, PlaybackStartEvent, SessionCommand

logger = logging.getLogger(__name__)


async def apply_handler(request: web.Request) -> web.Response:
    """Handle POST /TrackRules/apply.

    Sends the audio command first, then the subtitle command.
    """
    try:
        body = await read_model(request, ApplyRequest)
        if body.audio_stream_index is None and body.subtitle_stream_index is None:
            raise ApiError(
                "Provide at least one of audioStreamIndex or subtitleStreamIndex.",
                code=INVALID_REQUEST,
            )
        host = require_host(request)
        dispatcher = require_dispatcher(request)
    except ApiError as e:
        return e.response()

    try:
        session = await host.get_session(body.session_id)
        if session is None:
            return api_error("Session not found.", code=NOT_FOUND, status=404)

        if body.audio_stream_index is not None:
            await dispatcher.send_command(
                session.id,
                SessionCommand.SET_AUDIO_STREAM_INDEX,
                body.audio_stream_index,
                controlling_user_id=session.user_id,
            )
        if body.subtitle_stream_index is not None:
            await dispatcher.send_command(
                session.id,
                SessionCommand.SET_SUBTITLE_STREAM_INDEX,
                body.subtitle_stream_index,
                controlling_user_id=session.user_id,
            )
    except HostConnectionError as e:
        return host_unavailable(e)

    return web.json_response(
        {
            "sessionId": session.id,
            "audioStreamIndex": body.audio_stream_index,
            "subtitleStreamIndex": body.subtitle_stream_index,
        }
    )


async def playback_start_handler(request: web.Request) -> web.Response:
    """Handle POST /TrackRules/events/playback-start.

    Looks the session (and item, when given) up on the media server and
    publishes a playback-start event. Enforcement happens in the background;
    the response only acknowledges the event.
    """
    try:
        body = await read_model(request, PlaybackStartRequest)
        host = require_host(request)
    except ApiError as e:
        return e.response()

    try:
        session = await host.get_session(body.session_id)
        if session is None:
            return api_error("Session not found.", code=NOT_FOUND, status=404)

        item = None
        if body.item_id:
            item = await host.get_item(body.item_id, session.user_id)
            if item is None:
                return api_error(
                    f"Item {body.item_id} was not found.", code=NOT_FOUND, status=404
                )
    except HostConnectionError as e:
        return host_unavailable(e)

    event_bus: PlaybackEventBus = request.app["event_bus"]
    delivered = event_bus.publish(PlaybackStartEvent(session=session, item=item))
    logger.debug("Published playback start for session %s", session.id)

    return web.json_response(
        {"accepted": True, "sessionId": session.id, "subscribers": delivered},
        status=202,
    )


def setup_session_routes(app: web.Application) -> None:
    """Register live-session routes with the application."""
    app.router.add_post("/TrackRules/apply", apply_handler)
    app.router.add_post("/TrackRules/events/playback-start", playback_start_handler)
