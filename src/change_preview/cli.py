"""
Command line interface for the change_preview tool.

This module defines the ``main`` command group used as the entry point of
the ``change-preview`` command. It loads an operations file, builds the
preview against the workspace, and prints, exports or reviews it. Exit
codes are listed below.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from change_preview import __version__
from change_preview.config.loader import FORMAT_CHOICES, ConfigError, load_config
from change_preview.config.options import DiffFormat, DiffOptions
from change_preview.diff.models import Operation, OperationError
from change_preview.preview.assembler import PreviewAssembler
from change_preview.preview.models import Preview
from change_preview.preview.operations import load_operations
from change_preview.preview.workspace import WorkspaceReader
from change_preview.render import format_summary, format_unified, render_text
from change_preview.render.unified import format_patch
from change_preview.review.messages import ReviewError
from change_preview.review.session import ConfirmChoice, ReviewAction, ReviewSession, ReviewState
from change_preview.risk.assessor import assess_risk, default_rules

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_CONFIG_ERROR = 5
EXIT_OPERATIONS_ERROR = 6
EXIT_REVIEW_DECLINED = 8
EXIT_REVIEW_REQUIRED = 9


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


class EchoObserver:
    """Preview observer that reports per-file problems on the console."""

    def on_info(self, message: str) -> None:
        logger.info("%s", message)

    def on_warn(self, message: str) -> None:
        print_warning(message)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool) -> None:
    # force=True so repeated invocations (tests) reconfigure the handlers
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    # Module loggers start detached behind a NullHandler; route them to
    # the root handlers configured above.
    for name, candidate in list(logging.root.manager.loggerDict.items()):
        if name.startswith("change_preview") and isinstance(candidate, logging.Logger):
            candidate.propagate = True


def resolve_settings(
    config_path: Optional[Path],
    context: Optional[int],
    ignore_whitespace: Optional[bool],
    fmt: Optional[str],
) -> Tuple[DiffOptions, Dict[str, Any]]:
    """Merge command line overrides over the configuration file.

    Raises
    ------
    ConfigError
        If the configuration file or the resulting options are invalid.
    """
    config = load_config(config_path)
    if context is not None:
        config["context_lines"] = context
    if ignore_whitespace is not None:
        config["ignore_whitespace"] = ignore_whitespace
    if fmt is not None:
        config["format"] = fmt
    return DiffOptions.from_config(config), config


def read_operations(operations_file: Path) -> List[Operation]:
    try:
        operations = load_operations(operations_file)
    except OperationError as exc:
        print_error(f"Operations error: {exc}")
        raise click.exceptions.Exit(EXIT_OPERATIONS_ERROR)
    if not operations:
        print_warning("The operations file is empty.")
    return operations


def build_preview(
    operations: List[Operation],
    root: Path,
    options: DiffOptions,
    config: Dict[str, Any],
) -> Preview:
    assembler = PreviewAssembler(
        reader=WorkspaceReader(root),
        options=options,
        observer=EchoObserver(),
        max_workers=config["max_workers"],
        critical_files=config["critical_files"],
    )
    return assembler.generate_preview(operations)


def load_settings_or_exit(
    config_path: Optional[Path],
    context: Optional[int],
    ignore_whitespace: Optional[bool],
    fmt: Optional[str],
) -> Tuple[DiffOptions, Dict[str, Any]]:
    try:
        return resolve_settings(config_path, context, ignore_whitespace, fmt)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)


def parse_selection(answer: str, operation_ids: List[str]) -> Optional[List[str]]:
    """Interpret the selection prompt.

    ``all`` selects everything, ``none`` nothing, an empty answer cancels.
    Otherwise the answer is a comma separated list of ids or 1-based
    positions; a token matching an id is always read as the id.
    """
    answer = answer.strip()
    if not answer:
        return None
    if answer.lower() == "all":
        return list(operation_ids)
    if answer.lower() == "none":
        return []
    selected = []
    for token in (t.strip() for t in answer.split(",")):
        if not token:
            continue
        if token not in operation_ids and token.isdigit() and 1 <= int(token) <= len(operation_ids):
            selected.append(operation_ids[int(token) - 1])
        else:
            selected.append(token)
    return selected


def run_review(session: ReviewSession) -> None:
    """Drive ``session`` interactively until it is done."""
    while session.state is not ReviewState.DONE:
        if session.state is ReviewState.SELECTING:
            click.echo("\n📋 Operations:")
            for idx, diff in enumerate(session.preview.file_operations, start=1):
                click.echo(
                    f"   {idx}. [{diff.operation.id}] {diff.operation.type.value} {diff.path} "
                    f"({diff.stats.additions}+ {diff.stats.deletions}-)"
                )
            answer = click.prompt(
                "   Select operations (ids or numbers, 'all', 'none', empty to cancel)",
                default="",
                show_default=False,
            )
            try:
                session.select(parse_selection(answer, session.operation_ids))
            except ReviewError as exc:
                print_error(str(exc))
        elif session.state is ReviewState.CONFIRMING:
            choice = click.prompt(
                f"   Apply {len(session.selection)} file operation(s)? [A]pply / [V]iew diff / [C]ancel",
                type=click.Choice(["A", "V", "C", "a", "v", "c"], case_sensitive=False),
                default="A",
                show_choices=False,
            ).lower()
            session.confirm({"a": ConfirmChoice.APPLY, "v": ConfirmChoice.VIEW}.get(choice, ConfirmChoice.CANCEL))
        elif session.state is ReviewState.VIEWING:
            click.echo("")
            click.echo(format_unified(session.viewing), nl=False)
            session.back()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

_operations_argument = click.argument(
    "operations_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Workspace root that operation paths are relative to.",
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (defaults to .change_preview.json lookup).",
)
_context_option = click.option("--context", type=int, help="Number of context lines around changes.")
_whitespace_option = click.option(
    "--ignore-whitespace/--no-ignore-whitespace",
    default=None,
    help="Ignore whitespace differences when comparing lines.",
)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="change-preview")
def main(verbose: bool) -> None:
    """🔍 Preview proposed file operations before applying them.

    Builds per-file diffs, statistics and a risk assessment for a batch
    of operations described in a JSON file.
    """
    configure_logging(verbose)


@main.command()
@_operations_argument
@_root_option
@_config_option
@_context_option
@_whitespace_option
@click.option("--format", "fmt", type=click.Choice(FORMAT_CHOICES), help="Diff output format.")
@click.option("--summary-only", is_flag=True, help="Print the summary without file diffs.")
def preview(
    operations_file: Path,
    root: Path,
    config_path: Optional[Path],
    context: Optional[int],
    ignore_whitespace: Optional[bool],
    fmt: Optional[str],
    summary_only: bool,
) -> None:
    """Print the summary and the diff of every operation."""
    options, config = load_settings_or_exit(config_path, context, ignore_whitespace, fmt)
    operations = read_operations(operations_file)
    result = build_preview(operations, root, options, config)

    click.echo(format_summary(result), nl=False)
    if summary_only:
        return
    for file_diff in result.file_operations:
        text = render_text(file_diff, options.format)
        if text:
            click.echo("")
            click.echo(text, nl=False, color=options.format is DiffFormat.TERMINAL)


@main.command()
@_operations_argument
@click.argument("output", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@_root_option
@_config_option
@_context_option
@_whitespace_option
def export(
    operations_file: Path,
    output: Path,
    root: Path,
    config_path: Optional[Path],
    context: Optional[int],
    ignore_whitespace: Optional[bool],
) -> None:
    """Write the unified patch of all operations to OUTPUT."""
    options, config = load_settings_or_exit(config_path, context, ignore_whitespace, None)
    operations = read_operations(operations_file)
    result = build_preview(operations, root, options, config)

    patch_text = format_patch(result.file_operations)
    try:
        output.write_text(patch_text, encoding="utf-8")
    except OSError as exc:
        print_error(f"Failed to write {output}: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
    logger.info("Exported diff to %s", output)
    print_success(f"Exported {len(result.file_operations)} file diff(s) to {output}")


@main.command()
@_operations_argument
@_root_option
@_config_option
@_context_option
@click.option("--yes", "yes", is_flag=True, help="Accept all operations without prompting.")
def review(
    operations_file: Path,
    root: Path,
    config_path: Optional[Path],
    context: Optional[int],
    yes: bool,
) -> None:
    """Interactively select the operations to apply."""
    options, config = load_settings_or_exit(config_path, context, None, None)
    operations = read_operations(operations_file)
    result = build_preview(operations, root, options, config)
    click.echo(format_summary(result), nl=False)

    session = ReviewSession(result)
    if yes:
        print_info("Auto-accept mode enabled - accepting all operations")
        session.select(session.operation_ids)
        session.confirm(ConfirmChoice.APPLY)
    else:
        run_review(session)

    outcome = session.result
    if outcome is None or outcome.action is not ReviewAction.APPLY:
        print_warning("No operations accepted.")
        raise click.exceptions.Exit(EXIT_REVIEW_DECLINED)
    print_success(f"Accepted {len(outcome.selected_operations)} operation(s)")
    for op_id in outcome.selected_operations:
        click.echo(op_id)


@main.command()
@_operations_argument
@_config_option
@click.option("--strict", is_flag=True, help="Exit with a non-zero code when review is required.")
def risk(operations_file: Path, config_path: Optional[Path], strict: bool) -> None:
    """Print the risk assessment of the operations."""
    _, config = load_settings_or_exit(config_path, None, None, None)
    operations = read_operations(operations_file)
    assessment = assess_risk(operations, default_rules(config["critical_files"]))

    click.echo(f"Risk level: {assessment.level.value}")
    for factor in assessment.factors:
        click.echo(f"  • [{factor.severity.value}] {factor.type.value}: {factor.description}")
    for recommendation in assessment.recommendations:
        click.echo(f"  💡 {recommendation}")
    click.echo(f"Requires review: {'yes' if assessment.requires_review else 'no'}")

    if strict and assessment.requires_review:
        raise click.exceptions.Exit(EXIT_REVIEW_REQUIRED)
