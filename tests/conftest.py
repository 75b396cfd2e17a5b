"""
Pytest configuration and shared fixtures for the sparse matrix tests.
"""

import numpy as np
import pytest
from scipy import sparse as sp

from matrix_formats import Entry, SparseMatrix


SAMPLE_DOCUMENT = "rows=3\ncols=3\n(0,0,5)\n(1,2,10)\n(2,1,3)\n"


@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_file(tmp_path):
    """Sample document written to disk."""
    path = tmp_path / "matrix.txt"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def identity_2x2():
    return SparseMatrix.from_entries(2, 2, [Entry(0, 0, 1), Entry(1, 1, 1)])


@pytest.fixture
def small_matrix():
    """3×4 matrix with an empty row."""
    return SparseMatrix.from_entries(3, 4, [
        Entry(0, 0, 1), Entry(0, 3, -2),
        Entry(2, 1, 4), Entry(2, 2, 7),
    ])


def _random_matrix(rows, cols, density=0.3, seed=0):
    rng = np.random.default_rng(seed)
    nnz = int(rows * cols * density)
    positions = rng.choice(rows * cols, size=nnz, replace=False)
    values = rng.integers(-9, 10, nnz)
    mat = sp.coo_matrix((values, (positions // cols, positions % cols)),
                        shape=(rows, cols), dtype=np.int64)
    return SparseMatrix.from_scipy_sparse(mat)


@pytest.fixture
def make_random_matrix():
    """Factory for random integer SparseMatrix instances built through scipy."""
    return _random_matrix


@pytest.fixture
def random_pair():
    """Two random 6×5 matrices with matching shapes."""
    return _random_matrix(6, 5, seed=1), _random_matrix(6, 5, seed=2)
