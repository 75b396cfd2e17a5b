"""
Sparse Matrix Storage
Dictionary-of-keys representation for integer sparse matrices.

Key Design:
- Nested mapping row -> {col -> value}, only nonzero values are stored
- Lookup of an absent coordinate yields 0
- Rows present in the outer mapping always hold at least one entry
- scipy.sparse conversions for verification and interop

Coordinates are not bounds-checked on write; callers (the matrix reader)
are trusted to respect the declared dimensions.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, NamedTuple, Tuple

import numpy as np
from scipy import sparse as sp


logger = logging.getLogger(__name__)


class Entry(NamedTuple):
    """A single (row, col, value) triple from the text format."""
    row: int
    col: int
    value: int


class SparseMatrix:
    """
    Sparse integer matrix with zero-suppressing storage.

    Storage:
    - data[row][col] = value for every nonzero value
    - rows with no nonzero values are absent from data
    """

    def __init__(self, rows: int, cols: int):
        """
        Args:
            rows: Number of rows
            cols: Number of columns
        """
        self.rows = rows
        self.cols = cols
        self.data: Dict[int, Dict[int, int]] = {}

    @classmethod
    def from_entries(cls, rows: int, cols: int, entries: Iterable[Entry]) -> 'SparseMatrix':
        """
        Build a matrix from entries in order.

        Duplicate coordinates are not merged: the last entry for a coordinate
        wins. A zero entry stores nothing and clears an earlier value at the
        same coordinate.

        Args:
            rows, cols: Declared dimensions
            entries: Iterable of (row, col, value) triples

        Returns:
            SparseMatrix instance
        """
        matrix = cls(rows, cols)
        for row, col, value in entries:
            matrix.store(row, col, value)
        return matrix

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def nnz(self) -> int:
        """Number of stored (nonzero) entries."""
        return sum(len(row_map) for row_map in self.data.values())

    def get(self, row: int, col: int) -> int:
        """Value at (row, col), 0 when nothing is stored there."""
        row_map = self.data.get(row)
        if row_map is None:
            return 0
        return row_map.get(col, 0)

    def set(self, row: int, col: int, value: int):
        """
        Store a nonzero value at (row, col), overwriting any previous value.

        Writing 0 is a no-op: it does not clear an existing value.
        """
        if value == 0:
            return
        self.data.setdefault(row, {})[col] = value

    def store(self, row: int, col: int, value: int):
        """
        Write value at (row, col), removing the coordinate when value is 0.

        Used by the arithmetic operations while building a result.
        """
        if value == 0:
            self._discard(row, col)
        else:
            self.data.setdefault(row, {})[col] = value

    def accumulate(self, row: int, col: int, delta: int):
        """Add delta to the value at (row, col); a running total of 0 is removed."""
        self.store(row, col, self.get(row, col) + delta)

    def _discard(self, row: int, col: int):
        row_map = self.data.get(row)
        if row_map is None:
            return
        row_map.pop(col, None)
        if not row_map:
            del self.data[row]

    def row_items(self, row: int) -> Mapping[int, int]:
        """Read-only view of one row's nonzero values as {col: value}; empty when the row is empty."""
        return MappingProxyType(self.data.get(row, {}))

    def iter_nonzero(self) -> Iterator[Entry]:
        """
        Iterate stored entries in storage order (row insertion, then column insertion).

        Yields:
            Entry tuples
        """
        for row, row_map in self.data.items():
            for col, value in row_map.items():
                yield Entry(row, col, value)

    def entries(self) -> Iterator[Entry]:
        """Iterate stored entries sorted by (row, col)."""
        for row in sorted(self.data):
            row_map = self.data[row]
            for col in sorted(row_map):
                yield Entry(row, col, row_map[col])

    def to_dict(self) -> Dict[Tuple[int, int], int]:
        """Nonzero values keyed by (row, col)."""
        return {(row, col): value for row, col, value in self.iter_nonzero()}

    def to_scipy_sparse(self) -> sp.coo_matrix:
        """
        Convert to scipy.sparse.coo_matrix for verification.

        Values are stored as int64; values outside that range raise OverflowError.

        Returns:
            scipy.sparse.coo_matrix
        """
        rows, cols, values = [], [], []
        for i, j, v in self.entries():
            rows.append(i)
            cols.append(j)
            values.append(v)

        logger.debug(f"Converting to scipy.sparse.coo_matrix: {len(rows)} entries")
        return sp.coo_matrix(
            (np.array(values, dtype=np.int64),
             (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
            shape=self.shape
        )

    @classmethod
    def from_scipy_sparse(cls, scipy_matrix) -> 'SparseMatrix':
        """
        Create SparseMatrix from any scipy.sparse matrix.

        Duplicate coordinates are summed and explicit zeros dropped, following
        scipy's own semantics.

        Args:
            scipy_matrix: scipy sparse matrix (any format)

        Returns:
            SparseMatrix instance
        """
        coo = sp.coo_matrix(scipy_matrix).tocsr().tocoo()
        coo.eliminate_zeros()
        matrix = cls(*coo.shape)
        for i, j, v in zip(coo.row, coo.col, coo.data):
            matrix.set(int(i), int(j), int(v))
        return matrix

    def __eq__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.shape == other.shape and self.data == other.data

    def __repr__(self):
        return f"SparseMatrix({self.rows}x{self.cols}, {self.nnz} nonzeros)"


def create_matrix(rows: int, cols: int, entries: Iterable[Entry]) -> SparseMatrix:
    """Build a SparseMatrix from parsed entries (last write wins per coordinate)."""
    return SparseMatrix.from_entries(rows, cols, entries)
