"""
octopus/core/formats/xlsx.py
----------------------------
Spreadsheet workbook decoder and encoder.

Workbook layout::

    Meta sheet        author | <value>
                      name   | <value>
                      version| <value>

    one sheet per group
      row 0           Table/Reference | Column | Type | Key | nullable | Attributes | Description
      table row       user            |        | CUser|     |          |            | users of the app
      column rows     (ref)           | id     | long | P   |          | autoInc    |
                      group.id        | group_id | long |   | O        |            |
      empty row       (closes the table)

If the header's nullability cell reads ``not null`` the sheet records
"is not nullable" instead of "is nullable" for every row below.

The row grammar lives in :func:`read_group_rows`, a small state machine
that works on plain string rows so it can be tested without a workbook.
The encoder writes exactly that grammar.
"""
from __future__ import annotations

import datetime
import io
import re
import zipfile
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from octopus.config import CONFIG
from octopus.core.codec import (
    Artifact,
    DecodeError,
    Decoder,
    EncodeError,
    EncodeOptions,
    Encoder,
    unknown_type,
)
from octopus.core.type_normalizer import fix_boolean_default, parse_type
from octopus.logger import get_logger
from octopus.models.schema import Column, FormatName, Reference, Schema, Table

log = get_logger(__name__)

META_AUTHOR = "author"
META_NAME = "name"
META_VERSION = "version"

HEADER_NULLABLE = "nullable"
HEADER_NOT_NULL = "not null"

_HEADERS = ("Table/Reference", "Column", "Type", "Key", HEADER_NULLABLE, "Attributes", "Description")
_AUTO_INC_ALIASES = frozenset({"ai", "autoinc", "auto_inc", "auto_incremental"})
_FLAG_MARK = "O"

# Worksheet title limits
_SHEET_TITLE_MAX = 31
_SHEET_TITLE_INVALID_RE = re.compile(r"[\\/*?:\[\]]")

# Column positions in a group sheet
COL_TABLE, COL_NAME, COL_TYPE, COL_KEY, COL_NULL, COL_ATTR, COL_DESC = range(7)

# Fixed document timestamp so repeated encodes produce identical bytes
_FIXED_TIMESTAMP = datetime.datetime(1980, 1, 1)
_CORE_XML = "docProps/core.xml"
_MODIFIED_RE = re.compile(rb"(<dcterms:modified[^>]*>)[^<]*(</dcterms:modified>)")


class RowState(Enum):
    BETWEEN_TABLES = "between_tables"
    INSIDE_TABLE = "inside_table"


def _cell(row: Sequence[str], idx: int) -> str:
    return row[idx].strip() if idx < len(row) else ""


def _cell_text(value: Any) -> str:
    """Render a raw openpyxl cell value as the string the grammar expects."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def uses_not_null_column(header: Sequence[str]) -> bool:
    """True if the header row flips the nullability polarity."""
    return _cell(header, COL_NULL) == HEADER_NOT_NULL


def parse_column_row(row: Sequence[str], use_not_null_column: bool) -> Column:
    """Build one :class:`Column` from a column row of a group sheet."""
    col_type, size, scale = parse_type(_cell(row, COL_TYPE))
    key = _cell(row, COL_KEY)
    null_mark = _cell(row, COL_NULL)

    default_value = ""
    auto_incremental = False
    for attr in _cell(row, COL_ATTR).split(","):
        attr = attr.strip()
        if attr.startswith("default"):
            _, sep, value = attr.partition(":")
            if sep:
                default_value = fix_boolean_default(col_type, value.strip())
                continue
        if attr.lower() in _AUTO_INC_ALIASES:
            auto_incremental = True

    if use_not_null_column:
        nullable = null_mark == ""
    else:
        nullable = null_mark != ""

    table_cell = _cell(row, COL_TABLE)
    return Column(
        name=_cell(row, COL_NAME),
        type=col_type,
        size=size,
        scale=scale,
        nullable=nullable,
        primary_key=key == "P",
        unique_key=key == "U",
        auto_incremental=auto_incremental,
        default_value=default_value,
        description=_cell(row, COL_DESC),
        ref=Reference.parse(table_cell) if table_cell else None,
    )


def next_state(
    state: RowState,
    row: Sequence[str],
    group: str,
    current: Table | None,
    use_not_null_column: bool,
) -> tuple[RowState, Table | None, Table | None]:
    """
    Apply one row to the grammar.

    Returns:
        ``(new_state, open_table, closed_table)``; *closed_table* is the
        table finished by this row, if any.
    """
    if state is RowState.BETWEEN_TABLES:
        table_name = _cell(row, COL_TABLE)
        if not table_name:
            return state, None, None
        table = Table(
            name=table_name,
            class_name=_cell(row, COL_TYPE),
            description=_cell(row, COL_DESC),
            group=group,
        )
        return RowState.INSIDE_TABLE, table, None

    if current is None or not _cell(row, COL_NAME):
        return RowState.BETWEEN_TABLES, None, current

    current.add_column(parse_column_row(row, use_not_null_column))
    return state, current, None


def read_group_rows(group: str, rows: Iterable[Sequence[str]]) -> list[Table]:
    """
    Reconstruct the tables of one group sheet.

    Args:
        group: Group name (the sheet name).
        rows:  All rows of the sheet, header first, cells as strings.

    Returns:
        Tables in sheet order. A table still open at the end of the sheet
        is closed implicitly.
    """
    tables: list[Table] = []
    state = RowState.BETWEEN_TABLES
    current: Table | None = None
    use_not_null_column = False

    for i, row in enumerate(rows):
        if i == 0:
            use_not_null_column = uses_not_null_column(row)
            continue
        state, current, closed = next_state(state, row, group, current, use_not_null_column)
        if closed is not None:
            tables.append(closed)

    if state is RowState.INSIDE_TABLE and current is not None:
        tables.append(current)
    return tables


def read_meta_rows(rows: Iterable[Sequence[str]]) -> dict[str, str]:
    result: dict[str, str] = {}
    for row in rows:
        key = _cell(row, 0)
        if key:
            result[key] = _cell(row, 1)
    return result


def _sheet_rows(sheet: Worksheet) -> list[list[str]]:
    return [[_cell_text(v) for v in row] for row in sheet.iter_rows(values_only=True)]


class XlsxDecoder(Decoder):
    format_name = FormatName.XLSX

    def decode(self, source: Path) -> Schema:
        try:
            workbook = load_workbook(filename=source, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise DecodeError(f"Cannot read workbook '{source}': {exc}") from exc

        meta: dict[str, str] = {}
        tables: list[Table] = []
        try:
            for sheet in workbook.worksheets:
                if sheet.title == CONFIG.xlsx.meta_sheet:
                    meta = read_meta_rows(_sheet_rows(sheet))
                    continue
                group_tables = read_group_rows(sheet.title, _sheet_rows(sheet))
                log.debug("Sheet '%s': %d table(s).", sheet.title, len(group_tables))
                tables.extend(group_tables)
        finally:
            workbook.close()

        log.info("Read workbook '%s': %d table(s).", source, len(tables))
        return Schema(
            author=meta.get(META_AUTHOR, ""),
            name=meta.get(META_NAME, ""),
            version=meta.get(META_VERSION, ""),
            tables=tables,
        )


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------

class _Styles:
    """Cell styles of a group sheet."""

    def __init__(self) -> None:
        name, size = CONFIG.xlsx.font_name, CONFIG.xlsx.font_size
        left = Alignment(horizontal="general", vertical="center")
        center = Alignment(horizontal="center", vertical="center")
        thin = Side(style="thin")
        light = Side(style="thin", color="00B2B2B2")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)
        light_border = Border(left=light, right=light, top=light, bottom=light)

        self.font = Font(name=name, size=size)
        bold = Font(name=name, size=size, bold=True)
        ref_font = Font(name=name, size=8, italic=True)

        self.header = (self._fill("00CCFFCC"), border, center, bold)
        self.table = (self._fill("00CCFFFF"), border, center, bold)
        self.table_desc = (self._fill("00FFFBCC"), light_border, left, self.font)
        self.normal = (None, light_border, left, self.font)
        self.flag = (None, light_border, center, self.font)
        self.reference = (None, light_border, center, ref_font)

    @staticmethod
    def _fill(color: str) -> PatternFill:
        return PatternFill(fill_type="solid", start_color=color, end_color=color)


def _set_text(cell, value: str) -> None:
    cell.value = value
    # openpyxl reads a leading "=" as a formula
    if isinstance(value, str) and value.startswith("="):
        cell.data_type = "s"


def _put(sheet: Worksheet, row: int, col: int, value: str, style: tuple | None = None) -> None:
    cell = sheet.cell(row=row, column=col + 1)
    _set_text(cell, value)
    if style is None:
        return
    fill, border, alignment, font = style
    if fill is not None:
        cell.fill = fill
    cell.border = border
    cell.alignment = alignment
    cell.font = font


def _column_attributes(column: Column) -> str:
    attrs: list[str] = []
    if column.auto_incremental:
        attrs.append("autoInc")
    if column.default_value:
        attrs.append("default:" + column.default_value)
    return ", ".join(attrs)


def _key_mark(column: Column) -> str:
    if column.primary_key:
        return "P"
    if column.unique_key:
        return "U"
    return ""


def _normalize_archive(data: bytes) -> bytes:
    """Rewrite the saved zip with fixed entry and document timestamps."""
    stamp = _FIXED_TIMESTAMP.strftime("%Y-%m-%dT%H:%M:%SZ").encode("ascii")
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as src, \
            zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for info in src.infolist():
            content = src.read(info.filename)
            if info.filename == _CORE_XML:
                content = _MODIFIED_RE.sub(rb"\g<1>" + stamp + rb"\g<2>", content)
            entry = zipfile.ZipInfo(info.filename, date_time=_FIXED_TIMESTAMP.timetuple()[:6])
            entry.compress_type = zipfile.ZIP_DEFLATED
            entry.external_attr = info.external_attr
            dst.writestr(entry, content)
    return out.getvalue()


def sheet_title(group: str, taken: set[str]) -> str:
    """
    Worksheet title for *group*; the empty group maps to the default sheet.

    Raises:
        EncodeError: The title is not a legal worksheet name, or it matches
                     a title in *taken* (case-insensitively).
    """
    title = group or CONFIG.xlsx.default_group_sheet
    if len(title) > _SHEET_TITLE_MAX or _SHEET_TITLE_INVALID_RE.search(title):
        raise EncodeError(
            f"Group '{group}' is not a valid sheet name "
            f"(at most {_SHEET_TITLE_MAX} characters, none of \\ / * ? : [ ])."
        )
    if title.lower() in taken:
        raise EncodeError(f"Group '{group}' collides with sheet '{title}'.")
    return title


class XlsxEncoder(Encoder):
    format_name = FormatName.XLSX

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        tables = options.filter_tables(schema)
        workbook = Workbook()
        workbook.properties.creator = schema.author or CONFIG.app_name
        workbook.properties.created = _FIXED_TIMESTAMP

        meta_sheet = workbook.active
        meta_sheet.title = CONFIG.xlsx.meta_sheet
        self._fill_meta_sheet(meta_sheet, schema)

        styles = _Styles()
        groups: dict[str, None] = {}
        for table in tables:
            groups.setdefault(table.group, None)

        taken = {meta_sheet.title.lower()}
        for group in groups:
            title = sheet_title(group, taken)
            taken.add(title.lower())
            sheet = workbook.create_sheet(title)
            sheet.freeze_panes = "C2"
            group_tables = [t for t in tables if t.group == group]
            self._fill_group_sheet(sheet, group_tables, styles, options.use_not_null_column)

        buffer = io.BytesIO()
        workbook.save(buffer)
        name = f"{schema.name or 'schema'}.xlsx"
        return [Artifact(name=name, content=_normalize_archive(buffer.getvalue()))]

    def _fill_meta_sheet(self, sheet: Worksheet, schema: Schema) -> None:
        sheet.column_dimensions["A"].width = 10.5
        sheet.column_dimensions["B"].width = 10.5
        font = Font(name=CONFIG.xlsx.font_name, size=CONFIG.xlsx.font_size)
        for row, (key, value) in enumerate((
            (META_AUTHOR, schema.author),
            (META_NAME, schema.name),
            (META_VERSION, schema.version),
        ), start=1):
            for col, text in enumerate((key, value)):
                cell = sheet.cell(row=row, column=col + 1)
                _set_text(cell, text)
                cell.font = font

    def _fill_group_sheet(
        self,
        sheet: Worksheet,
        tables: list[Table],
        styles: _Styles,
        use_not_null_column: bool,
    ) -> None:
        widths = (18, 13.5, 9.5, 4.0, 6.0 if use_not_null_column else 4.0, 9.5, 50)
        for letter, width in zip("ABCDEFG", widths):
            sheet.column_dimensions[letter].width = width

        headers = list(_HEADERS)
        headers[COL_NULL] = HEADER_NOT_NULL if use_not_null_column else HEADER_NULLABLE
        for col, text in enumerate(headers):
            _put(sheet, 1, col, text, styles.header)

        row = 1
        for i, table in enumerate(tables):
            row += 1
            _put(sheet, row, COL_TABLE, table.name, styles.table)
            _put(sheet, row, COL_TYPE, table.class_name)
            _put(sheet, row, COL_DESC, table.description.strip(), styles.table_desc)

            for column in table.columns:
                row += 1
                self._fill_column_row(sheet, row, column, styles, use_not_null_column)

            # empty separator row
            if i < len(tables) - 1:
                row += 1

    def _fill_column_row(
        self,
        sheet: Worksheet,
        row: int,
        column: Column,
        styles: _Styles,
        use_not_null_column: bool,
    ) -> None:
        if column.column_type is None:
            unknown_type(log, self.format_name, column, column.type)

        if column.ref is not None:
            _put(sheet, row, COL_TABLE, str(column.ref), styles.reference)
        _put(sheet, row, COL_NAME, column.name, styles.normal)
        _put(sheet, row, COL_TYPE, column.format_type(), styles.normal)
        _put(sheet, row, COL_KEY, _key_mark(column), styles.flag)
        flagged = not column.nullable if use_not_null_column else column.nullable
        _put(sheet, row, COL_NULL, _FLAG_MARK if flagged else "", styles.flag)
        _put(sheet, row, COL_ATTR, _column_attributes(column), styles.normal)
        _put(sheet, row, COL_DESC, column.description.strip(), styles.normal)
