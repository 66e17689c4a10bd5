"""Command-line interface for Automaton Builder."""

import logging
import sys

import click

from .automaton.runner import DFARunner, RunnerStatus
from .config import SettingsError, load_settings
from .editor.engine import EditorEngine
from .output.formatter import (
    format_automaton_summary,
    format_layout,
    format_run_result,
    format_validation_result,
)
from .schema.errors import SnapshotLoadError, SnapshotValidationError

OUTPUT_FORMAT = click.Choice(["text", "json"])


def _load_engine(ctx: click.Context, snapshot_file: str) -> EditorEngine:
    """Load a snapshot into a fresh engine, exiting with code 2 on failure."""
    engine = EditorEngine(settings=ctx.obj["settings"])
    try:
        engine.load_file(snapshot_file)
    except SnapshotLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except SnapshotValidationError as e:
        click.echo(f"Snapshot validation error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)
    return engine


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with editor settings",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.version_option()
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool):
    """Automaton Builder: inspect and run finite automata snapshots."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings(config_file)
    except SettingsError as e:
        click.echo(f"Settings error: {e}", err=True)
        sys.exit(2)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.argument("snapshot_file", type=click.Path(exists=True))
@click.option("--format", "output_format", type=OUTPUT_FORMAT, default="text", help="Output format")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors",
)
@click.pass_context
def validate(ctx: click.Context, snapshot_file: str, output_format: str, strict: bool):
    """Check whether a snapshot describes a valid DFA.

    SNAPSHOT_FILE is the path to a JSON or YAML snapshot.

    Exit codes:
      0 - Valid DFA
      1 - Validation failed (errors found)
      2 - File or schema error
    """
    engine = _load_engine(ctx, snapshot_file)
    result = engine.validate()

    click.echo(format_validation_result(result, output_format))  # type: ignore

    if result.has_errors:
        sys.exit(1)
    elif strict and result.has_warnings:
        sys.exit(1)
    else:
        sys.exit(0)


@main.command()
@click.argument("snapshot_file", type=click.Path(exists=True))
@click.argument("input_string", default="")
@click.option(
    "--separator",
    "-s",
    default=None,
    help="Split INPUT_STRING on this separator instead of per character",
)
@click.option("--format", "output_format", type=OUTPUT_FORMAT, default="text", help="Output format")
@click.pass_context
def run(
    ctx: click.Context,
    snapshot_file: str,
    input_string: str,
    separator: str | None,
    output_format: str,
):
    """Feed an input string through the automaton.

    SNAPSHOT_FILE is the path to a JSON or YAML snapshot. INPUT_STRING is
    read one symbol per character unless --separator is given.

    Exit codes:
      0 - Input accepted
      1 - Input rejected, invalid DFA or invalid input tokens
      2 - File or schema error
    """
    engine = _load_engine(ctx, snapshot_file)
    if separator is None:
        symbols = list(input_string)
    else:
        symbols = input_string.split(separator) if input_string else []

    runner = DFARunner(engine.project(), symbols)
    runner.run_until_conclusion()
    click.echo(format_run_result(runner, output_format))  # type: ignore

    sys.exit(0 if runner.status == RunnerStatus.ACCEPTED else 1)


@main.command()
@click.argument("snapshot_file", type=click.Path(exists=True))
@click.pass_context
def layout(ctx: click.Context, snapshot_file: str):
    """Print the arrow geometry of every transition as JSON.

    SNAPSHOT_FILE is the path to a JSON or YAML snapshot.
    """
    engine = _load_engine(ctx, snapshot_file)
    click.echo(format_layout(engine.arrow_layout()))
    sys.exit(0)


@main.command()
@click.argument("snapshot_file", type=click.Path(exists=True))
@click.pass_context
def info(ctx: click.Context, snapshot_file: str):
    """Summarize the states, alphabet and transitions of a snapshot."""
    engine = _load_engine(ctx, snapshot_file)
    click.echo(format_automaton_summary(engine.project()))
    sys.exit(0)


if __name__ == "__main__":
    main()
