"""
Parser Module - Delimited-text record parsing.
==============================================

Turns raw rows of the CSV exports into header-keyed records shared by every
loader:

- One quoting convention: a field wrapped in double quotes may contain the
  delimiter, and a doubled quote inside it is a literal quote.
- Values are trimmed; columns absent from a short row read as "".
- A row that fails to parse is logged and skipped, never fatal to the load.
- Column names are resolved case-insensitively, either exactly (catalog) or
  by substring (evaluation exports, whose headers drift between releases).
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from gem_miner.shared.logging import get_logger
from gem_miner.shared.utils import read_text_lines

logger = get_logger(__name__)


class RowParseError(ValueError):
    """Raised when a single line of delimited text cannot be parsed."""


# ─────────────────────────────────────────────────────────────────────────────
# Line Parsing
# ─────────────────────────────────────────────────────────────────────────────


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """
    Split one line of delimited text into trimmed field values.

    Args:
        line: Raw line (without line terminator)
        delimiter: Field delimiter

    Returns:
        List of field values

    Raises:
        RowParseError: On malformed quoting (e.g. an unterminated quote)

    Example:
        >>> split_line('CS 50,"Intro, Part One",4.2')
        ['CS 50', 'Intro, Part One', '4.2']
    """
    try:
        rows = list(
            csv.reader(
                [line],
                delimiter=delimiter,
                quotechar='"',
                doublequote=True,
                skipinitialspace=True,
                strict=True,
            )
        )
    except csv.Error as e:
        raise RowParseError(str(e)) from e

    if not rows:
        return []
    return [value.strip() for value in rows[0]]


def parse_record(line: str, headers: list[str], delimiter: str = ",") -> dict[str, str]:
    """
    Parse a line into a mapping from column name to value.

    Columns missing from the row map to "". Extra trailing values without a
    header are ignored.

    Raises:
        RowParseError: If the line cannot be split
    """
    values = split_line(line, delimiter)
    return {
        header: values[idx] if idx < len(values) else ""
        for idx, header in enumerate(headers)
    }


# ─────────────────────────────────────────────────────────────────────────────
# Tables
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class DelimitedTable:
    """Header row plus parsed data rows of a delimited file."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.rows)


def parse_lines(lines: Iterable[str], delimiter: str = ",", source: str = "<text>") -> DelimitedTable:
    """
    Parse already-split lines, first line being the header row.

    Rows that fail to parse are logged with their line number and counted in
    ``skipped``.

    Raises:
        RowParseError: If the header row itself is malformed
    """
    iterator = iter(lines)
    header_line = next(iterator, None)
    if header_line is None:
        return DelimitedTable()

    headers = split_line(header_line, delimiter)
    table = DelimitedTable(headers=headers)

    for line_num, line in enumerate(iterator, start=2):
        if not line.strip():
            continue
        try:
            table.rows.append(parse_record(line, headers, delimiter))
        except RowParseError as e:
            table.skipped += 1
            logger.warning(f"Skipping malformed row {line_num} in {source}: {e}")

    return table


def read_delimited(file_path: Path, delimiter: str = ",") -> DelimitedTable:
    """
    Read a delimited text file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
        RowParseError: If the header row is malformed
    """
    lines = read_text_lines(file_path)
    return parse_lines(lines, delimiter=delimiter, source=str(file_path))


# ─────────────────────────────────────────────────────────────────────────────
# Column Resolution
# ─────────────────────────────────────────────────────────────────────────────


class ColumnResolver:
    """
    Resolve logical column names against a header row.

    Example:
        >>> resolver = ColumnResolver(["Course_Code", "course_score_mean"], substring=True)
        >>> resolver.resolve("course_code")
        'Course_Code'
    """

    def __init__(self, headers: list[str], substring: bool = False, source: str = ""):
        self.headers = headers
        self.substring = substring
        self.source = source
        self._lowered = [h.lower() for h in headers]

    def resolve(self, name: str, optional: bool = False) -> Optional[str]:
        """
        Find the header for a logical column name.

        Args:
            name: Logical column name
            optional: Whether a missing column is expected (no warning)

        Returns:
            Matching header name, or None if absent
        """
        wanted = name.lower()
        for header, lowered in zip(self.headers, self._lowered):
            if lowered == wanted or (self.substring and wanted in lowered):
                return header

        if not optional:
            logger.warning(f"Column not found in {self.source or 'source'}: {name}")
        return None

    def resolve_all(self, required: Iterable[str], optional: Iterable[str] = ()) -> dict[str, Optional[str]]:
        """Resolve several names at once into a logical-name → header mapping."""
        columns = {name: self.resolve(name) for name in required}
        columns.update({name: self.resolve(name, optional=True) for name in optional})
        return columns


def get_value(record: dict[str, str], column: Optional[str]) -> str:
    """Read a resolved column from a record ("" if the column is absent)."""
    if column is None:
        return ""
    return record.get(column, "")
