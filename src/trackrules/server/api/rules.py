"""API handlers for per-user rule documents.

Endpoints:
    GET /TrackRules/user/{userId} - Get a user's rules
    PUT /TrackRules/user/{userId} - Replace a user's rules
"""

from __future__ import annotations

import logging

from aiohttp import web

from trackrules.core.validation import is_valid_uuid, same_identifier
from trackrules.server.api.errors import (
    INVALID_ID_FORMAT,
    INVALID_REQUEST,
    STORAGE_ERROR,
    ApiError,
    api_error,
)
from trackrules.server.api.models import read_json, validate_model
from trackrules.store import RuleStore, RuleStoreError, UserRulesDocument

logger = logging.getLogger(__name__)


def _route_user_id(request: web.Request) -> str:
    user_id = request.match_info["user_id"]
    if not is_valid_uuid(user_id):
        raise ApiError(f"Invalid user id: {user_id}", code=INVALID_ID_FORMAT)
    return user_id


async def get_user_rules_handler(request: web.Request) -> web.Response:
    """Handle GET /TrackRules/user/{userId}.

    Users without a rule file get an empty rule set, never 404.
    """
    try:
        user_id = _route_user_id(request)
    except ApiError as e:
        return e.response()

    store: RuleStore = request.app["store"]
    rule_set = await store.get(user_id)
    return web.json_response(UserRulesDocument.from_domain(rule_set).to_json_dict())


async def put_user_rules_handler(request: web.Request) -> web.Response:
    """Handle PUT /TrackRules/user/{userId}.

    Replaces the stored rules wholesale. A userId in the body must match
    the route (blank is accepted); the route value is what gets stored.
    The response echoes the stored document, at the current schema version.
    """
    try:
        user_id = _route_user_id(request)
        document = validate_model(await read_json(request), UserRulesDocument)
    except ApiError as e:
        return e.response()

    if document.user_id.strip() and not same_identifier(document.user_id, user_id):
        return api_error(
            "UserId mismatch between route and payload.", code=INVALID_REQUEST
        )

    store: RuleStore = request.app["store"]
    try:
        stored = await store.save(
            document.model_copy(update={"user_id": user_id}).to_domain()
        )
    except RuleStoreError as e:
        return api_error(str(e), code=STORAGE_ERROR, status=500)

    logger.info("Saved %d track rule(s) for user %s", len(stored.rules), user_id)
    return web.json_response(UserRulesDocument.from_domain(stored).to_json_dict())


def setup_rules_routes(app: web.Application) -> None:
    """Register rule document routes with the application."""
    app.router.add_get("/TrackRules/user/{user_id}", get_user_rules_handler)
    app.router.add_put("/TrackRules/user/{user_id}", put_user_rules_handler)
