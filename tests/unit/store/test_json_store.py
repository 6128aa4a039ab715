"""Unit tests for JsonRuleStore."""

import asyncio
import gc
import json
import logging

import pytest

from trackrules.domain import CURRENT_SCHEMA_VERSION, RuleScope, UserRuleSet
from trackrules.store import (
    STORE_DIRNAME,
    InvalidUserIdError,
    JsonRuleStore,
    RuleStore,
    RuleStoreError,
    UserLockRegistry,
)


def _dashed(hex_id: str) -> str:
    return (
        f"{hex_id[:8]}-{hex_id[8:12]}-{hex_id[12:16]}-{hex_id[16:20]}-{hex_id[20:]}"
    )


class TestPathFor:
    """Tests for JsonRuleStore.path_for."""

    def test_layout(self, tmp_path, user_id):
        store = JsonRuleStore(tmp_path)
        assert store.path_for(user_id) == tmp_path / STORE_DIRNAME / f"{user_id}.json"

    def test_dashed_and_upper_case_share_a_file(self, rule_store, user_id):
        assert rule_store.path_for(_dashed(user_id).upper()) == rule_store.path_for(
            user_id
        )

    @pytest.mark.parametrize("bad", ["", "   ", "../evil", "a/b", "x.json"])
    def test_unsafe_ids_are_rejected(self, rule_store, bad):
        with pytest.raises(InvalidUserIdError) as exc_info:
            rule_store.path_for(bad)
        assert exc_info.value.user_id == bad

    def test_satisfies_protocol(self, rule_store):
        assert isinstance(rule_store, RuleStore)


class TestGet:
    """Tests for JsonRuleStore.get."""

    async def test_missing_file_yields_empty_set(self, rule_store, user_id):
        rule_set = await rule_store.get(user_id)
        assert rule_set == UserRuleSet.create(user_id)

    async def test_corrupt_file_yields_empty_set(self, rule_store, user_id, caplog):
        path = rule_store.path_for(user_id)
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="trackrules.store.json_store"):
            rule_set = await rule_store.get(user_id)

        assert rule_set.rules == ()
        assert "Failed to load track rules" in caplog.text

    async def test_schema_violation_yields_empty_set(self, rule_store, user_id):
        path = rule_store.path_for(user_id)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"rules": [{"scope": 42}]}), encoding="utf-8")

        rule_set = await rule_store.get(user_id)

        assert rule_set.rules == ()

    async def test_old_version_is_upgraded(self, rule_store, user_id, caplog):
        path = rule_store.path_for(user_id)
        path.parent.mkdir(parents=True)
        path.write_text(
            json.dumps({"version": 0, "rules": [{"scope": 0, "audio": ["jpn"]}]}),
            encoding="utf-8",
        )

        with caplog.at_level(logging.INFO, logger="trackrules.store.json_store"):
            rule_set = await rule_store.get(user_id)

        assert rule_set.version == CURRENT_SCHEMA_VERSION
        assert rule_set.user_id == user_id
        assert rule_set.rules[0].audio_preferences == ("jpn",)
        assert "Upgrading track rules" in caplog.text


class TestSave:
    """Tests for JsonRuleStore.save and update."""

    async def test_round_trip(self, rule_store, user_id, series_id, make_rule):
        rule = make_rule(RuleScope.SERIES, series_id, audio=["jpn"], subs=["eng"])
        await rule_store.save(UserRuleSet(user_id, rules=(rule,)))

        loaded = await rule_store.get(user_id)

        assert loaded.rules == (rule,)

    async def test_file_content_and_no_temp_leftovers(
        self, rule_store, user_id, make_rule
    ):
        await rule_store.save(UserRuleSet(user_id, rules=(make_rule(),)))

        path = rule_store.path_for(user_id)
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["userId"] == user_id
        assert "targetId" not in payload["rules"][0]
        assert list(path.parent.glob("*.tmp")) == []

    async def test_save_stamps_current_version(self, rule_store, user_id, make_rule):
        stored = await rule_store.save(
            UserRuleSet(user_id, version=7, rules=(make_rule(),))
        )

        payload = json.loads(rule_store.path_for(user_id).read_text(encoding="utf-8"))
        assert payload["version"] == CURRENT_SCHEMA_VERSION
        assert stored.version == CURRENT_SCHEMA_VERSION
        assert stored.rules == (make_rule(),)

    async def test_update_stamps_current_version(self, rule_store, user_id):
        updated = await rule_store.update(
            user_id, lambda current: UserRuleSet(user_id, version=0)
        )

        payload = json.loads(rule_store.path_for(user_id).read_text(encoding="utf-8"))
        assert updated.version == payload["version"] == CURRENT_SCHEMA_VERSION

    async def test_save_replaces_wholesale(self, rule_store, user_id, make_rule):
        await rule_store.save(
            UserRuleSet(user_id, rules=(make_rule(audio=["jpn"]), make_rule()))
        )
        await rule_store.save(UserRuleSet(user_id, rules=(make_rule(audio=["fra"]),)))

        loaded = await rule_store.get(user_id)

        assert [r.audio_preferences for r in loaded.rules] == [("fra",)]

    async def test_dashed_id_reads_undashed_save(self, rule_store, user_id, make_rule):
        await rule_store.save(UserRuleSet(user_id, rules=(make_rule(),)))

        loaded = await rule_store.get(_dashed(user_id))

        assert len(loaded.rules) == 1

    async def test_write_failure_raises(self, tmp_path, user_id):
        blocker = tmp_path / "blocked"
        blocker.write_text("", encoding="utf-8")
        store = JsonRuleStore(blocker)

        with pytest.raises(RuleStoreError):
            await store.save(UserRuleSet.create(user_id))

    async def test_update_applies_mutation(self, rule_store, user_id, make_rule):
        await rule_store.save(UserRuleSet(user_id, rules=(make_rule(audio=["jpn"]),)))

        updated = await rule_store.update(
            user_id,
            lambda current: current.with_rules(
                [*current.rules, make_rule(audio=["eng"])]
            ),
        )

        assert len(updated.rules) == 2
        assert (await rule_store.get(user_id)) == updated

    async def test_update_keeps_owner(self, rule_store, user_id):
        updated = await rule_store.update(
            user_id, lambda current: UserRuleSet("someone-else")
        )
        assert updated.user_id == user_id

    async def test_concurrent_updates_do_not_lose_writes(
        self, rule_store, user_id, make_rule
    ):
        def add_rule(current):
            return current.with_rules([*current.rules, make_rule()])

        await asyncio.gather(*(rule_store.update(user_id, add_rule) for _ in range(5)))

        assert len((await rule_store.get(user_id)).rules) == 5


class TestUserLockRegistry:
    """Tests for UserLockRegistry."""

    def test_same_key_same_lock(self):
        registry = UserLockRegistry()
        a = registry.get("a")
        assert registry.get("a") is a
        assert registry.get("b") is not a

    def test_unused_locks_are_released(self):
        registry = UserLockRegistry()
        held = registry.get("a")
        registry.get("b")
        gc.collect()

        assert len(registry) == 1
        assert registry.get("a") is held

    async def test_lock_survives_while_waited_on(self):
        registry = UserLockRegistry()
        order = []

        async def worker(name):
            async with registry.get("user"):
                order.append(f"{name}-in")
                await asyncio.sleep(0)
                order.append(f"{name}-out")

        await asyncio.gather(worker("first"), worker("second"))

        assert order == ["first-in", "first-out", "second-in", "second-out"]
