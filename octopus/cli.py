"""
octopus/cli.py
--------------
Command-line entry point: ``octopus create | convert | generate``.

Every option also reads an ``OCTOPUS_*`` environment variable. Missing
positional arguments and conversion failures exit with code 1.
"""
from __future__ import annotations

import logging

import typer

from octopus.config import CONFIG
from octopus.core.codec import CodecError, EncodeOptions, group_filter
from octopus.core.commands import convert, create_schema_file, generate
from octopus.core.prefix_mapper import PrefixMapper
from octopus.logger import get_logger, set_console_level

log = get_logger(__name__)

app = typer.Typer(
    name="octopus",
    help="Convert database schema descriptions between formats.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{CONFIG.app_name} {CONFIG.app_version}")
        raise typer.Exit()


@app.callback()
def root(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
) -> None:
    """octopus-db-tools: one schema, many formats."""
    if verbose:
        set_console_level(logging.DEBUG)
    elif quiet:
        set_console_level(logging.WARNING)


def _split_list(value: str | None) -> list[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _require(value: str | None, what: str) -> str:
    if not value:
        typer.echo(f"Error: {what} is not set", err=True)
        raise typer.Exit(code=1)
    return value


def _fail(exc: Exception) -> None:
    log.error("%s", exc)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


# ── octopus create ───────────────────────────────────────────────────────


@app.command("create")
def create_cmd(
    filename: str | None = typer.Argument(
        None, help=f"File to create (default: {CONFIG.default_schema_file})."
    ),
) -> None:
    """Write a template schema document in the canonical JSON format."""
    try:
        path = create_schema_file(filename)
    except (CodecError, OSError) as exc:
        _fail(exc)
    else:
        typer.echo(f"Created {path}")


# ── octopus convert ──────────────────────────────────────────────────────


@app.command("convert")
def convert_cmd(
    source: str | None = typer.Argument(None, help="Source file."),
    target: str | None = typer.Argument(None, help="Target file."),
    source_format: str | None = typer.Option(
        None, "--sourceFormat", "-sf",
        envvar="OCTOPUS_SOURCE_FORMAT", help="Source format (default: from extension).",
    ),
    target_format: str | None = typer.Option(
        None, "--targetFormat", "-tf",
        envvar="OCTOPUS_TARGET_FORMAT", help="Target format (default: from extension).",
    ),
    not_null: bool = typer.Option(
        False, "--notNull",
        envvar="OCTOPUS_USE_NOT_NULL",
        help="Spreadsheet output: write a 'not null' column instead of 'nullable'.",
    ),
) -> None:
    """Convert a schema into a single target file.

    Example:
        octopus convert database.xlsx database.ojson
        octopus convert db.ojson db.dbml -tf dbdiagram.io
    """
    source = _require(source, "source")
    target = _require(target, "target")
    options = EncodeOptions(use_not_null_column=not_null)
    try:
        path = convert(source, target, source_format, target_format, options)
    except (CodecError, OSError) as exc:
        _fail(exc)
    else:
        typer.echo(f"Wrote {path}")


# ── octopus generate ─────────────────────────────────────────────────────


@app.command("generate")
def generate_cmd(
    source: str | None = typer.Argument(None, help="Source file."),
    target_dir: str | None = typer.Argument(None, help="Output directory."),
    source_format: str | None = typer.Option(
        None, "--sourceFormat", "-sf", envvar="OCTOPUS_SOURCE_FORMAT",
    ),
    target_format: str | None = typer.Option(
        None, "--targetFormat", "-tf", envvar="OCTOPUS_TARGET_FORMAT",
        help="Format to generate, e.g. jpa-kotlin, protobuf, graphql.",
    ),
    package: str = typer.Option(
        "", "--package", "-p", envvar="OCTOPUS_PACKAGE",
        help="Target package / namespace.",
    ),
    go_package: str = typer.Option(
        "", "--goPackage", envvar="OCTOPUS_GO_PACKAGE",
        help="Protobuf 'option go_package'.",
    ),
    remove_prefix: str = typer.Option(
        "", "--removePrefix", envvar="OCTOPUS_REMOVE_PREFIX",
        help="Comma separated table name prefixes to strip.",
    ),
    prefix: str = typer.Option(
        "", "--prefix", envvar="OCTOPUS_PREFIX",
        help="Class name prefix per group, e.g. 'common:C,admin:Adm'.",
    ),
    groups: str = typer.Option(
        "", "--groups", envvar="OCTOPUS_GROUPS",
        help="Comma separated groups to include (default: all).",
    ),
) -> None:
    """Generate source files for every table under a directory.

    Example:
        octopus generate db.ojson src/main/kotlin -tf jpa-kotlin -p com.example.db
    """
    source = _require(source, "source")
    target_dir = _require(target_dir, "target")
    options = EncodeOptions(
        package=package,
        go_package=go_package,
        prefixes_to_remove=_split_list(remove_prefix),
        prefix_mapper=PrefixMapper(prefix),
        table_filter=group_filter(_split_list(groups)),
    )
    try:
        paths = generate(source, target_dir, source_format, target_format, options)
    except (CodecError, OSError) as exc:
        _fail(exc)
    else:
        typer.echo(f"Generated {len(paths)} file(s) in {target_dir}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
