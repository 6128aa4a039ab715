"""Request and response models for the Track Rules API."""

from __future__ import annotations

import json
from typing import Any, TypeVar

from aiohttp import web
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trackrules.domain import RuleScope
from trackrules.server.api.errors import INVALID_JSON, VALIDATION_FAILED, ApiError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _require_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
    return value


class PreviewRequest(_RequestModel):
    """POST /TrackRules/preview body."""

    user_id: str = Field(alias="userId")
    item_id: str = Field(alias="itemId")

    @field_validator("user_id", "item_id", mode="before")
    @classmethod
    def not_blank(cls, v: Any) -> Any:
        return _require_text(v)


class ApplyRequest(_RequestModel):
    """POST /TrackRules/apply body."""

    session_id: str = Field(alias="sessionId")
    audio_stream_index: int | None = Field(default=None, alias="audioStreamIndex")
    subtitle_stream_index: int | None = Field(
        default=None, alias="subtitleStreamIndex"
    )

    @field_validator("session_id", mode="before")
    @classmethod
    def not_blank(cls, v: Any) -> Any:
        return _require_text(v)


class PlaybackStartRequest(_RequestModel):
    """POST /TrackRules/events/playback-start body.

    itemId is optional; the session's now-playing item is used when absent.
    """

    session_id: str = Field(alias="sessionId")
    item_id: str | None = Field(default=None, alias="itemId")

    @field_validator("session_id", mode="before")
    @classmethod
    def not_blank(cls, v: Any) -> Any:
        return _require_text(v)


class PreviewResult(BaseModel):
    """Outcome of a dry-run resolution for one user and item."""

    model_config = ConfigDict(populate_by_name=True)

    scope: RuleScope | None = None
    audio_stream_index: int | None = Field(default=None, alias="audioStreamIndex")
    subtitle_stream_index: int | None = Field(
        default=None, alias="subtitleStreamIndex"
    )
    reason: str | None = None
    transcode_risk: bool = Field(default=False, alias="transcodeRisk")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


async def read_json(request: web.Request) -> Any:
    """Decode the request body as JSON.

    Raises:
        ApiError: INVALID_JSON when the body does not parse.
    """
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ApiError("Request body is not valid JSON", code=INVALID_JSON) from e


async def read_model(request: web.Request, model_cls: type[ModelT]) -> ModelT:
    """Decode the request body and validate it against a pydantic model."""
    return validate_model(await read_json(request), model_cls)


def validate_model(data: Any, model_cls: type[ModelT]) -> ModelT:
    """Validate already-decoded JSON against a pydantic model.

    Raises:
        ApiError: VALIDATION_FAILED, with per-field details when pydantic
            rejected the data.
    """
    if not isinstance(data, dict):
        raise ApiError("Request body must be a JSON object", code=VALIDATION_FAILED)
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise ApiError(
            "Validation failed", code=VALIDATION_FAILED, details=details
        ) from e
