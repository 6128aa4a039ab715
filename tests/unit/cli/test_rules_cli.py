"""Tests for the rules command group."""

import json

from trackrules import __version__
from trackrules.cli import main
from trackrules.cli.exit_codes import ExitCode


class TestRulesCommands:
    """Tests for `trackrules rules show` and `rules import`."""

    def test_show_empty(self, runner, tmp_path, user_id):
        result = runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "show", user_id]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "version": 1,
            "userId": user_id,
            "rules": [],
        }

    def test_import_then_show(self, runner, tmp_path, user_id):
        rules = tmp_path / "rules.yaml"
        rules.write_text(
            "- scope: Library\n"
            "  targetId: 0f9e8d7c6b5a49382716a5b4c3d2e1f0\n"
            "  audio: [fra]\n"
            "  subsMode: Always\n"
            "  subs: [eng]\n",
            encoding="utf-8",
        )
        data_dir = tmp_path / "data"

        imported = runner.invoke(
            main, ["rules", "--data-dir", str(data_dir), "import", user_id, str(rules)]
        )
        assert imported.exit_code == 0, imported.output
        assert f"Imported 1 rule(s) for user {user_id}" in imported.output

        shown = runner.invoke(
            main, ["rules", "--data-dir", str(data_dir), "show", user_id]
        )
        document = json.loads(shown.output)
        assert document["rules"] == [
            {
                "scope": 1,
                "targetId": "0f9e8d7c6b5a49382716a5b4c3d2e1f0",
                "audio": ["fra"],
                "subs": ["eng"],
                "subsMode": 3,
                "dontTranscode": False,
                "enabled": True,
            }
        ]

    def test_import_user_mismatch(self, runner, tmp_path, user_id):
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps({"userId": "someone-else", "rules": []}), encoding="utf-8")

        result = runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "import", user_id, str(rules)]
        )

        assert result.exit_code == ExitCode.INVALID_INPUT
        assert "file belongs to user someone-else" in result.output

    def test_import_invalid_rules(self, runner, tmp_path, user_id):
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps({"rules": [{"subsMode": 12}]}), encoding="utf-8")

        result = runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "import", user_id, str(rules)]
        )

        assert result.exit_code == ExitCode.RULES_VALIDATION_ERROR

    def test_import_append_keeps_existing_rules(self, runner, tmp_path, user_id):
        data_dir = tmp_path / "data"
        first = tmp_path / "first.yaml"
        first.write_text("- audio: [jpn]\n", encoding="utf-8")
        second = tmp_path / "second.yaml"
        second.write_text("- audio: [eng]\n- audio: [fra]\n", encoding="utf-8")

        runner.invoke(
            main, ["rules", "--data-dir", str(data_dir), "import", user_id, str(first)]
        )
        appended = runner.invoke(
            main,
            [
                "rules", "--data-dir", str(data_dir),
                "import", "--append", user_id, str(second),
            ],
        )
        assert appended.exit_code == 0, appended.output
        assert "Imported 2 rule(s)" in appended.output
        assert "(3 stored)" in appended.output

        shown = runner.invoke(
            main, ["rules", "--data-dir", str(data_dir), "show", user_id]
        )
        document = json.loads(shown.output)
        assert [rule["audio"] for rule in document["rules"]] == [
            ["jpn"],
            ["eng"],
            ["fra"],
        ]

    def test_import_stale_version_is_stored_current(self, runner, tmp_path, user_id):
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps({"version": 0, "rules": []}), encoding="utf-8")

        runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "import", user_id, str(rules)]
        )
        shown = runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "show", user_id]
        )

        assert json.loads(shown.output)["version"] == 1

    def test_show_invalid_user(self, runner, tmp_path):
        result = runner.invoke(
            main, ["rules", "--data-dir", str(tmp_path), "show", "../escape"]
        )
        assert result.exit_code == ExitCode.INVALID_INPUT


class TestMain:
    """Tests for the top-level group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_commands_registered(self):
        assert {"resolve", "rules", "serve"} <= set(main.commands)
