"""
octopus/core/commands.py
------------------------
The three user-facing operations: create, convert and generate.

Both formats are resolved through the registry before the source is
opened, so an unsupported format name never causes any I/O. Encoders only
return artifacts; this module creates directories and writes files.
"""
from __future__ import annotations

import getpass
from pathlib import Path

from octopus.config import CONFIG
from octopus.core.codec import Artifact, EncodeError, EncodeOptions, Encoder, UnsupportedFormatError
from octopus.core.formats.octopus_json import dumps_schema
from octopus.core.registry import REGISTRY, FormatRegistry, infer_format
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, Schema, Table

log = get_logger(__name__)


def template_schema(author: str = "") -> Schema:
    """Starter schema written by ``octopus create``."""
    if not author:
        try:
            author = getpass.getuser()
        except (KeyError, OSError):
            author = ""
    user = Table(name="user", group="common", description="application users")
    user.add_column(Column(
        name="id", type=ColumnType.LONG.value,
        primary_key=True, auto_incremental=True,
    ))
    user.add_column(Column(
        name="name", type=ColumnType.STRING.value, size=100,
        unique_key=True, description="login name",
    ))
    user.add_column(Column(
        name="created_at", type=ColumnType.DATETIME.value, nullable=True,
    ))
    return Schema(author=author, name="", version="0.1.0", tables=[user])


def create_schema_file(path: Path | str | None = None, author: str = "") -> Path:
    """
    Write a template canonical JSON document.

    Args:
        path:   Target file; defaults to ``db.ojson`` in the working directory.
        author: Author recorded in the document; defaults to the login name.

    Returns:
        The path written.
    """
    out_path = Path(path or CONFIG.default_schema_file)
    if out_path.parent != Path("."):
        out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(dumps_schema(template_schema(author)), encoding="utf-8")
    log.info("[WRITE] %s", out_path)
    return out_path


def _format_or_infer(name: str | None, path: Path | str, direction: str) -> str:
    if name:
        return name
    inferred = infer_format(path)
    if not inferred:
        raise UnsupportedFormatError(
            f"Cannot infer {direction} format from '{path}'; pass it explicitly."
        )
    log.debug("Inferred %s format '%s' from '%s'.", direction, inferred, path)
    return inferred


def _write(path: Path, artifact: Artifact) -> None:
    path.write_bytes(artifact.content)
    log.info("[WRITE] %s (%d bytes)", path, len(artifact.content))


def _resolve(
    registry: FormatRegistry,
    source: Path,
    target: Path,
    source_format: str | None,
    target_format: str | None,
) -> tuple[Schema, Encoder]:
    decoder = registry.resolve_decoder(_format_or_infer(source_format, source, "source"))
    encoder = registry.resolve_encoder(_format_or_infer(target_format, target, "target"))
    log.info(
        "Reading '%s' as %s → %s.",
        source, decoder.format_name.value, encoder.format_name.value,
    )
    return decoder.decode(source), encoder


def convert(
    source: Path | str,
    target: Path | str,
    source_format: str | None = None,
    target_format: str | None = None,
    options: EncodeOptions | None = None,
    registry: FormatRegistry = REGISTRY,
) -> Path:
    """
    Convert *source* into the single file *target*.

    Formats default to what the file extensions suggest.

    Raises:
        UnsupportedFormatError: Unknown format names (before any I/O).
        DecodeError:            Unreadable or corrupt source.
        EncodeError:            Target format produces a directory tree.
    """
    source, target = Path(source), Path(target)
    options = options or EncodeOptions()
    schema, encoder = _resolve(registry, source, target, source_format, target_format)

    if encoder.multi_file:
        raise EncodeError(
            f"Format '{encoder.format_name.value}' writes several files; "
            "use 'generate' with a target directory."
        )
    artifacts = encoder.encode(schema, options)
    if len(artifacts) != 1:
        raise EncodeError(
            f"Format '{encoder.format_name.value}' produced {len(artifacts)} artifact(s), expected 1."
        )

    if not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
        log.info("[MKDIR] %s", target.parent)
    _write(target, artifacts[0])
    return target


def generate(
    source: Path | str,
    target_dir: Path | str,
    source_format: str | None = None,
    target_format: str | None = None,
    options: EncodeOptions | None = None,
    registry: FormatRegistry = REGISTRY,
) -> list[Path]:
    """
    Generate every artifact of *target_format* under *target_dir*.

    Returns:
        The written paths, in encoder order.
    """
    source, target_dir = Path(source), Path(target_dir)
    options = options or EncodeOptions()
    if not target_format:
        raise UnsupportedFormatError("Target format is required for 'generate'.")
    schema, encoder = _resolve(registry, source, target_dir, source_format, target_format)
    artifacts = encoder.encode(schema, options)

    written: list[Path] = []
    created: set[Path] = set()
    for artifact in artifacts:
        out_path = target_dir / artifact.name
        parent = out_path.parent
        if parent not in created:
            if not parent.exists():
                log.info("[MKDIR] %s", parent)
            parent.mkdir(parents=True, exist_ok=True)
            created.add(parent)
        _write(out_path, artifact)
        written.append(out_path)

    log.info("Generated %d file(s) under '%s'.", len(written), target_dir)
    return written
