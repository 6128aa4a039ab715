"""Environment variable access for configuration overrides."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Typed access to TRACKRULES_* variables.

    Pass ``env`` to read from a plain dict instead of os.environ:

        EnvReader(env={"TRACKRULES_SERVER_PORT": "9000"}).get_int(
            "TRACKRULES_SERVER_PORT", 8422
        )  # 9000

    Empty strings count as unset. Values that fail to convert are logged
    and replaced by the default rather than raised.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _convert(
        self, var: str, convert: Callable[[str], T], default: T | None
    ) -> T | None:
        raw = self.get_str(var)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r: not a valid %s", var, raw, convert.__name__
            )
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        return self._env.get(var) or default

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._convert(var, int, default)

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._convert(var, float, default)

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """true/1/yes/on in any case are true; anything else set is false."""
        return self._convert(var, _truthy, default)

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Paths are user-expanded, so ``~/rules`` works."""
        return self._convert(var, _expanded_path, default)


def _truthy(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def _expanded_path(raw: str) -> Path:
    return Path(raw).expanduser()
