"""API handler for dry-run resolution.

Endpoints:
    POST /TrackRules/preview - Show what rules would select for an item
"""

from __future__ import annotations

from aiohttp import web

from trackrules.domain import RuleScope
from trackrules.host import HostConnectionError
from trackrules.resolver import ResolutionContext, resolve
from trackrules.server.api.context import host_unavailable, require_host
from trackrules.server.api.errors import (
    INVALID_ID_FORMAT,
    NOT_FOUND,
    ApiError,
    api_error,
)
from trackrules.server.api.models import PreviewRequest, PreviewResult, read_model
from trackrules.store import InvalidUserIdError, RuleStore

REASON_NO_STREAMS = "Item has no media streams."
REASON_NO_RULES = "User has no Track Rules configured."
REASON_NO_MATCH = "No matching rule for this item."


def describe_scope(scope: RuleScope | None) -> str:
    """Human-readable reason for a successful resolution."""
    if scope is None:
        return "Rule applied"
    return f"{scope.name.capitalize()} rule applied"


async def preview_handler(request: web.Request) -> web.Response:
    """Handle POST /TrackRules/preview.

    Resolves as if playback were starting with no tracks selected, and
    dispatches nothing.
    """
    try:
        body = await read_model(request, PreviewRequest)
        host = require_host(request)
    except ApiError as e:
        return e.response()

    try:
        item = await host.get_item(body.item_id, body.user_id)
    except HostConnectionError as e:
        return host_unavailable(e)
    if item is None:
        return api_error(
            f"Item {body.item_id} was not found.", code=NOT_FOUND, status=404
        )

    if not item.streams:
        return web.json_response(PreviewResult(reason=REASON_NO_STREAMS).to_dict())

    store: RuleStore = request.app["store"]
    try:
        rule_set = await store.get(body.user_id)
    except InvalidUserIdError as e:
        return api_error(str(e), code=INVALID_ID_FORMAT)
    if not rule_set.rules:
        return web.json_response(PreviewResult(reason=REASON_NO_RULES).to_dict())

    context = ResolutionContext(
        user_id=body.user_id,
        series_id=item.series_id,
        library_id=item.library_id,
        media_streams=item.streams,
    )
    resolution = resolve(rule_set, context)
    if not resolution.has_changes:
        return web.json_response(PreviewResult(reason=REASON_NO_MATCH).to_dict())

    preview = PreviewResult(
        scope=resolution.scope,
        audio_stream_index=resolution.audio_stream_index,
        subtitle_stream_index=resolution.subtitle_stream_index,
        reason=describe_scope(resolution.scope),
        transcode_risk=False,
    )
    return web.json_response(preview.to_dict())


def setup_preview_routes(app: web.Application) -> None:
    """Register the preview route with the application."""
    app.router.add_post("/TrackRules/preview", preview_handler)
