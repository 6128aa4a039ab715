"""CLI resolve command.

Runs the resolver offline against a rule document and a list of media
streams, without a media server or a rule store.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from trackrules.cli.exit_codes import ExitCode
from trackrules.cli.files import (
    InputFileError,
    as_rules_document,
    as_stream_list,
    load_structured_file,
)
from trackrules.host import parse_media_streams
from trackrules.resolver import (
    DISABLE_SUBTITLES,
    ResolutionContext,
    ResolutionResult,
    resolve,
)
from trackrules.store import UserRulesDocument


def _describe_subtitle(index: int | None) -> str:
    if index is None:
        return "no change"
    if index == DISABLE_SUBTITLES:
        return "off"
    return f"#{index}"


def format_result_text(result: ResolutionResult) -> str:
    """Human-readable summary of a resolution."""
    if not result.has_changes or result.scope is None:
        return "No change."
    audio = (
        f"#{result.audio_stream_index}"
        if result.audio_stream_index is not None
        else "no change"
    )
    lines = [
        f"Rule:     {result.scope.name.lower()}",
        f"Audio:    {audio}",
        f"Subtitle: {_describe_subtitle(result.subtitle_stream_index)}",
    ]
    return "\n".join(lines)


def result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    """JSON-ready representation of a resolution."""
    return {
        "changed": result.has_changes,
        "scope": int(result.scope) if result.scope is not None else None,
        "audioStreamIndex": result.audio_stream_index,
        "subtitleStreamIndex": result.subtitle_stream_index,
    }


@click.command("resolve")
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Rule document (JSON or YAML).",
)
@click.option(
    "--streams",
    "streams_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Media streams of the item (JSON or YAML list, or an item object).",
)
@click.option("--series-id", default=None, help="Series id of the item.")
@click.option("--library-id", default=None, help="Library id of the item.")
@click.option(
    "--current-audio", type=int, default=None, help="Audio index currently playing."
)
@click.option(
    "--current-subtitle",
    type=int,
    default=None,
    help="Subtitle index currently shown (-1 for off).",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def resolve_command(
    rules_path: Path,
    streams_path: Path,
    series_id: str | None,
    library_id: str | None,
    current_audio: int | None,
    current_subtitle: int | None,
    json_output: bool,
) -> None:
    """Show which tracks the rules would select for an item."""
    try:
        document = UserRulesDocument.model_validate(
            as_rules_document(load_structured_file(rules_path))
        )
        streams = parse_media_streams(as_stream_list(load_structured_file(streams_path)))
    except InputFileError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e
    except ValidationError as e:
        click.echo(f"Error: invalid rules in {rules_path}:\n{e}", err=True)
        raise SystemExit(ExitCode.RULES_VALIDATION_ERROR) from e
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e

    rule_set = document.to_domain()
    context = ResolutionContext(
        user_id=rule_set.user_id,
        series_id=series_id,
        library_id=library_id,
        media_streams=streams,
        current_audio_stream_index=current_audio,
        current_subtitle_stream_index=current_subtitle,
    )
    result = resolve(rule_set, context)

    if json_output:
        click.echo(json.dumps(result_to_dict(result), indent=2))
    else:
        click.echo(format_result_text(result))
