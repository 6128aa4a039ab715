"""Tests for the resolve command."""

import json

import pytest

from trackrules.cli import main
from trackrules.cli.exit_codes import ExitCode
from trackrules.cli.files import (
    InputFileError,
    as_rules_document,
    as_stream_list,
    load_structured_file,
)

STREAMS = [
    {"Type": "Audio", "Index": 0, "Language": "eng", "IsDefault": True, "Channels": 2, "Codec": "aac"},
    {"Type": "Audio", "Index": 1, "Language": "jpn", "Channels": 6, "Codec": "dts"},
    {"Type": "Subtitle", "Index": 2, "Language": "eng", "IsForced": True},
    {"Type": "Subtitle", "Index": 3, "Language": "eng"},
]

RULES_YAML = """\
userId: 6f1c2a9e4b7d4e0f9a3c5d7e8f901234
rules:
  - scope: Series
    targetId: a1b2c3d4e5f60718293a4b5c6d7e8f90
    audio: [jpn, eng]
    subs: [eng]
    subsMode: PreferForced
  - scope: Global
    audio: [eng]
    subs: [none]
"""


@pytest.fixture
def streams_file(tmp_path):
    path = tmp_path / "streams.json"
    path.write_text(json.dumps({"MediaStreams": STREAMS}), encoding="utf-8")
    return path


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML, encoding="utf-8")
    return path


class TestResolveCommand:
    """Tests for `trackrules resolve`."""

    def test_series_rule_text(self, runner, rules_file, streams_file, series_id):
        result = runner.invoke(
            main,
            [
                "resolve",
                "--rules", str(rules_file),
                "--streams", str(streams_file),
                "--series-id", series_id,
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Rule:     series" in result.output
        assert "Audio:    #1" in result.output
        assert "Subtitle: #2" in result.output

    def test_global_rule_json(self, runner, rules_file, streams_file):
        result = runner.invoke(
            main,
            [
                "resolve",
                "--rules", str(rules_file),
                "--streams", str(streams_file),
                "--current-audio", "1",
                "--current-subtitle", "3",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "changed": True,
            "scope": 0,
            "audioStreamIndex": 0,
            "subtitleStreamIndex": -1,
        }

    def test_no_change(self, runner, rules_file, streams_file):
        result = runner.invoke(
            main,
            [
                "resolve",
                "--rules", str(rules_file),
                "--streams", str(streams_file),
                "--current-audio", "0",
            ],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "No change."

    def test_invalid_rules(self, runner, tmp_path, streams_file):
        rules = tmp_path / "bad.json"
        rules.write_text(json.dumps([{"scope": "Episode"}]), encoding="utf-8")

        result = runner.invoke(
            main, ["resolve", "--rules", str(rules), "--streams", str(streams_file)]
        )

        assert result.exit_code == ExitCode.RULES_VALIDATION_ERROR

    def test_unparseable_streams(self, runner, rules_file, tmp_path):
        streams = tmp_path / "streams.json"
        streams.write_text("{nope", encoding="utf-8")

        result = runner.invoke(
            main, ["resolve", "--rules", str(rules_file), "--streams", str(streams)]
        )

        assert result.exit_code == ExitCode.INVALID_INPUT
        assert "cannot parse file" in result.output


class TestFiles:
    """Tests for input file helpers."""

    def test_yaml_and_json(self, tmp_path):
        yaml_file = tmp_path / "a.yml"
        yaml_file.write_text("- audio: [jpn]\n", encoding="utf-8")
        json_file = tmp_path / "a.json"
        json_file.write_text('[{"audio": ["jpn"]}]', encoding="utf-8")

        assert load_structured_file(yaml_file) == load_structured_file(json_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError, match="cannot read file"):
            load_structured_file(tmp_path / "missing.json")

    def test_as_rules_document(self):
        assert as_rules_document([{"scope": 0}]) == {"rules": [{"scope": 0}]}
        assert as_rules_document(None) == {}
        with pytest.raises(ValueError):
            as_rules_document("rules")

    def test_as_stream_list(self):
        assert as_stream_list({"media_streams": []}) == []
        with pytest.raises(ValueError):
            as_stream_list({"Streams": []})
        with pytest.raises(ValueError):
            as_stream_list([1, 2])
