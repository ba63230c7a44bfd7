"""Click CLI entry point for the csg2xcsg converter."""

from __future__ import annotations

from pathlib import Path

import click

from csg2xcsg import __version__
from csg2xcsg.converter import convert_file, dump_tree, read_csg
from csg2xcsg.errors import Csg2XcsgError
from csg2xcsg.lexer import lex_csg
from csg2xcsg.mapping import DEFAULT_TAG_MAPPING, TagMapping, load_tag_mapping
from csg2xcsg.tree import build_tree
from csg2xcsg.warning_policy import WarningPolicy, parse_code_list


def _build_warning_policy(
    warn_as_error: str | None, suppress_warning: str | None
) -> WarningPolicy | None:
    """Parse CLI warning options into a WarningPolicy, or None if unset."""
    if warn_as_error is None and suppress_warning is None:
        return None
    try:
        wae = parse_code_list(warn_as_error) if warn_as_error else frozenset()
        sup = parse_code_list(suppress_warning) if suppress_warning else frozenset()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    return WarningPolicy(warn_as_error=wae, suppress=sup)


def _load_mapping(mapping_file: Path | None) -> TagMapping:
    if mapping_file is None:
        return DEFAULT_TAG_MAPPING
    try:
        return load_tag_mapping(mapping_file)
    except Csg2XcsgError as e:
        raise click.ClickException(str(e)) from e


def _default_output(input_file: Path) -> Path:
    """Replace a .csg suffix with .xcsg, or append .xcsg."""
    stem = input_file.name
    if stem.lower().endswith(".csg"):
        stem = stem[: -len(".csg")]
    return input_file.parent / f"{stem}.xcsg"


@click.group()
@click.version_option(version=__version__, prog_name="csg2xcsg")
def main() -> None:
    """csg2xcsg: convert OpenSCAD .csg files to xcsg XML."""


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output .xcsg file path. Defaults to input name with .xcsg extension.",
)
@click.option(
    "--mapping",
    "mapping_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with tag mapping overrides.",
)
@click.option(
    "--warn-as-error",
    "warn_as_error",
    type=str,
    default=None,
    help="Comma-separated W-codes to treat as errors (e.g. W01,W02).",
)
@click.option(
    "--suppress-warning",
    "suppress_warning",
    type=str,
    default=None,
    help="Comma-separated W-codes to suppress (e.g. W03).",
)
def convert(
    input_file: Path,
    output: Path | None,
    mapping_file: Path | None = None,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Convert a .csg file to xcsg."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)
    mapping = _load_mapping(mapping_file)

    if output is None:
        output = _default_output(input_file)

    try:
        convert_file(input_file, output, mapping=mapping, warning_policy=warning_policy)
    except Csg2XcsgError as e:
        raise click.ClickException(str(e))
    click.echo(f"Converted: {output}")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def dump(input_file: Path) -> None:
    """Print the parsed .csg tree with its parameters."""
    try:
        root = build_tree(lex_csg(read_csg(input_file)))
    except Csg2XcsgError as e:
        raise click.ClickException(str(e))
    for line in dump_tree(root):
        click.echo(line)
