"""File-backed rule store.

One JSON document per user under ``<data_dir>/TrackRules/<user>.json``.
UUID user ids are stored under their 32-character hex form so that dashed
and undashed spellings share a file.

Loads never fail on bad data: a missing file yields an empty rule set and
a corrupt one is logged and treated as empty. Saves raise RuleStoreError
when the file cannot be written.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path

from pydantic import ValidationError

from trackrules.core.validation import canonical_id, is_safe_identifier
from trackrules.domain import CURRENT_SCHEMA_VERSION, UserRuleSet
from trackrules.store.base import RuleSetMutator
from trackrules.store.documents import UserRulesDocument
from trackrules.store.exceptions import InvalidUserIdError, RuleStoreError
from trackrules.store.locks import UserLockRegistry

logger = logging.getLogger(__name__)

STORE_DIRNAME = "TrackRules"


class JsonRuleStore:
    """Rule store keeping one JSON file per user.

    All file I/O runs in a worker thread. Access for a single user is
    serialized through a per-user asyncio.Lock.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.root = Path(data_dir).expanduser() / STORE_DIRNAME
        self._locks = UserLockRegistry()

    def path_for(self, user_id: str) -> Path:
        """Return the file that holds user_id's rules.

        Raises:
            InvalidUserIdError: If user_id is blank or contains characters
                that are not allowed in a file name.
        """
        key = canonical_id(user_id)
        if not is_safe_identifier(key):
            raise InvalidUserIdError(user_id)
        return self.root / f"{key}.json"

    async def get(self, user_id: str) -> UserRuleSet:
        """Load a user's rules.

        Args:
            user_id: The user to load.

        Returns:
            The stored rule set upgraded to the current schema version, or an
            empty rule set when there is no file or it cannot be parsed.

        Raises:
            InvalidUserIdError: If user_id cannot be mapped to a file.
        """
        path = self.path_for(user_id)
        async with self._locks.get(path.stem):
            return await asyncio.to_thread(self._load, path, user_id)

    async def save(self, rule_set: UserRuleSet) -> UserRuleSet:
        """Persist a rule set, replacing whatever was stored for the user.

        The stored copy is always stamped with the current schema version.

        Returns:
            The rule set as written.

        Raises:
            InvalidUserIdError: If the rule set's user id cannot be mapped.
            RuleStoreError: If the file could not be written.
        """
        path = self.path_for(rule_set.user_id)
        stored = replace(rule_set, version=CURRENT_SCHEMA_VERSION)
        async with self._locks.get(path.stem):
            await asyncio.to_thread(self._write, path, stored)
        return stored

    async def update(self, user_id: str, mutate: RuleSetMutator) -> UserRuleSet:
        """Load, transform and save a rule set while holding the user's lock.

        Args:
            user_id: The user whose rules change.
            mutate: Function returning the new rule set from the current one.

        Returns:
            The rule set that was saved.
        """
        path = self.path_for(user_id)
        async with self._locks.get(path.stem):
            current = await asyncio.to_thread(self._load, path, user_id)
            updated = replace(
                mutate(current),
                user_id=current.user_id,
                version=CURRENT_SCHEMA_VERSION,
            )
            await asyncio.to_thread(self._write, path, updated)
            return updated

    def _load(self, path: Path, user_id: str) -> UserRuleSet:
        if not path.exists():
            return UserRuleSet.create(user_id)

        try:
            raw = path.read_text(encoding="utf-8")
            document = UserRulesDocument.model_validate_json(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.error("Failed to load track rules for user %s: %s", user_id, e)
            return UserRuleSet.create(user_id)

        rule_set = document.to_domain()
        if not rule_set.user_id:
            rule_set = replace(rule_set, user_id=user_id)

        if rule_set.version != CURRENT_SCHEMA_VERSION:
            logger.info(
                "Upgrading track rules for user %s from version %d to %d",
                user_id,
                rule_set.version,
                CURRENT_SCHEMA_VERSION,
            )
            rule_set = replace(rule_set, version=CURRENT_SCHEMA_VERSION)

        return rule_set

    def _write(self, path: Path, rule_set: UserRuleSet) -> None:
        document = UserRulesDocument.from_domain(rule_set)
        content = json.dumps(document.to_json_dict(), indent=2)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path_str = tempfile.mkstemp(
                suffix=".tmp", dir=path.parent, text=True
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                temp_path.replace(path)
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(
                "Failed to save track rules for user %s: %s", rule_set.user_id, e
            )
            raise RuleStoreError(
                f"Could not save rules for user {rule_set.user_id}: {e}"
            ) from e

        logger.debug(
            "Saved %d track rule(s) for user %s", len(rule_set.rules), rule_set.user_id
        )
