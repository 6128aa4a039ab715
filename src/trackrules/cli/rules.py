"""CLI commands for managing stored rules."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from trackrules.cli.exit_codes import ExitCode
from trackrules.cli.files import (
    InputFileError,
    as_rules_document,
    load_structured_file,
)
from trackrules.config import load_config
from trackrules.core.validation import same_identifier
from trackrules.store import (
    InvalidUserIdError,
    JsonRuleStore,
    RuleStoreError,
    UserRulesDocument,
)


def _open_store(data_dir: Path | None) -> JsonRuleStore:
    try:
        config = load_config(data_dir=data_dir)
    except ValueError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e
    return JsonRuleStore(config.storage.data_dir)


@click.group("rules")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding rule files (default: ~/.trackrules).",
)
@click.pass_context
def rules_group(ctx: click.Context, data_dir: Path | None) -> None:
    """Inspect and edit stored track rules."""
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


@rules_group.command("show")
@click.argument("user_id")
@click.pass_context
def show_command(ctx: click.Context, user_id: str) -> None:
    """Print USER_ID's rule document as JSON."""
    store = _open_store(ctx.obj.get("data_dir"))
    try:
        rule_set = asyncio.run(store.get(user_id))
    except InvalidUserIdError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e

    document = UserRulesDocument.from_domain(rule_set)
    click.echo(json.dumps(document.to_json_dict(), indent=2))


@rules_group.command("import")
@click.argument("user_id")
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--append",
    is_flag=True,
    default=False,
    help="Add the rules after the user's existing ones instead of replacing them.",
)
@click.pass_context
def import_command(
    ctx: click.Context, user_id: str, file: Path, append: bool
) -> None:
    """Replace USER_ID's rules with the document in FILE (JSON or YAML).

    With --append the file's rules go after the ones already stored.
    """
    try:
        document = UserRulesDocument.model_validate(
            as_rules_document(load_structured_file(file))
        )
    except InputFileError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e
    except ValidationError as e:
        click.echo(f"Error: invalid rules in {file}:\n{e}", err=True)
        raise SystemExit(ExitCode.RULES_VALIDATION_ERROR) from e
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e

    if document.user_id.strip() and not same_identifier(document.user_id, user_id):
        click.echo(
            f"Error: file belongs to user {document.user_id}, not {user_id}", err=True
        )
        raise SystemExit(ExitCode.INVALID_INPUT)

    rule_set = document.model_copy(update={"user_id": user_id}).to_domain()
    store = _open_store(ctx.obj.get("data_dir"))
    try:
        if append:
            stored = asyncio.run(
                store.update(
                    user_id,
                    lambda current: current.with_rules(current.rules + rule_set.rules),
                )
            )
        else:
            stored = asyncio.run(store.save(rule_set))
    except InvalidUserIdError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.INVALID_INPUT) from e
    except RuleStoreError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.OPERATION_FAILED) from e

    click.echo(
        f"Imported {len(rule_set.rules)} rule(s) for user {user_id}"
        f" ({len(stored.rules)} stored)"
    )
