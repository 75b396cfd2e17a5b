"""
Sparse Matrix Text Format
Reading and writing matrices in the line-oriented entry format:

    rows=<R>
    cols=<C>
    (<row>, <col>, <value>)
    ...

Blank lines are ignored and every line is trimmed. Integers follow
leading-number extraction: an optional sign and decimal digits, with any
trailing characters after a valid prefix ignored ("12abc" -> 12).
"""

import logging
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from matrix_errors import FormatError
from matrix_formats import Entry, SparseMatrix


logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'[+-]?[0-9]+')

ROWS_PREFIX = 'rows='
COLS_PREFIX = 'cols='


class MatrixData(NamedTuple):
    """Declared dimensions plus entries in file order."""
    rows: int
    cols: int
    entries: List[Entry]


def parse_int(text: str) -> int:
    """
    Parse the leading integer of text.

    Raises:
        FormatError if text has no leading integer
    """
    match = _LEADING_INT.match(text.strip())
    if match is None:
        raise FormatError()
    return int(match.group())


def parse_entry(text: str) -> Entry:
    """
    Parse one "(row, col, value)" line.

    Args:
        text: A single entry line

    Returns:
        Entry triple

    Raises:
        FormatError on wrong bracketing, wrong field count, non-integer
        fields or negative indices
    """
    text = text.strip()
    if not text.startswith('(') or not text.endswith(')'):
        raise FormatError()

    parts = text[1:-1].split(',')
    if len(parts) != 3:
        raise FormatError()

    row, col, value = (parse_int(part) for part in parts)
    if row < 0 or col < 0:
        raise FormatError()

    return Entry(row, col, value)


def _parse_header(line: str, prefix: str) -> int:
    if not line.startswith(prefix):
        raise FormatError()
    size = parse_int(line.split('=', 1)[1])
    if size < 0:
        raise FormatError()
    return size


def parse_matrix_text(text: str) -> MatrixData:
    """
    Parse a whole document.

    Args:
        text: Document contents

    Returns:
        MatrixData(rows, cols, entries)

    Raises:
        FormatError if the header or any entry is malformed; nothing is
        returned for a partially valid document
    """
    if text.startswith('\ufeff'):
        text = text[1:]

    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        raise FormatError()

    rows = _parse_header(lines[0], ROWS_PREFIX)
    cols = _parse_header(lines[1], COLS_PREFIX)
    entries = [parse_entry(line) for line in lines[2:]]

    return MatrixData(rows, cols, entries)


def read_matrix(filepath: Union[str, Path]) -> MatrixData:
    """
    Read a matrix document from disk.

    Args:
        filepath: Path to the document

    Returns:
        MatrixData(rows, cols, entries)

    Raises:
        OSError if the file cannot be read
        FormatError if its contents are malformed or not valid UTF-8
    """
    filepath = Path(filepath)
    try:
        text = filepath.read_text(encoding='utf-8-sig')
    except UnicodeDecodeError as e:
        raise FormatError(f"Input file is not valid UTF-8: {filepath}") from e

    matrix_data = parse_matrix_text(text)

    logger.info(f"Read {filepath}: {matrix_data.rows}×{matrix_data.cols}, "
                f"{len(matrix_data.entries):,} entries")
    return matrix_data


def load_matrix(filepath: Union[str, Path]) -> SparseMatrix:
    """Read a document and build its SparseMatrix."""
    rows, cols, entries = read_matrix(filepath)
    return SparseMatrix.from_entries(rows, cols, entries)


def format_matrix(matrix: SparseMatrix, label: Optional[str] = None) -> str:
    """
    Render a matrix in the text format.

    Entries are emitted in sorted (row, col) order. The optional label line
    is for display only; a labelled document does not re-read.

    Args:
        matrix: Matrix to render
        label: Optional descriptive first line

    Returns:
        Newline-terminated document text
    """
    lines = []
    if label:
        lines.append(label)
    lines.append(f"{ROWS_PREFIX}{matrix.rows}")
    lines.append(f"{COLS_PREFIX}{matrix.cols}")
    for row, col, value in matrix.entries():
        lines.append(f"({row}, {col}, {value})")
    return "\n".join(lines) + "\n"


def write_matrix(matrix: SparseMatrix, filepath: Union[str, Path]):
    """
    Write a matrix document to disk.

    Args:
        matrix: Matrix to write
        filepath: Output path
    """
    filepath = Path(filepath)
    filepath.write_text(format_matrix(matrix), encoding='utf-8')
    logger.info(f"Wrote {matrix.nnz:,} entries to {filepath}")
