"""
Sparse Matrix Addition and Subtraction (A + B, A - B)
Implements copy-then-combine over dictionary-of-keys matrices.

Algorithm: Copy-Then-Combine
1. Copy every nonzero entry of A into a fresh result matrix
2. For every nonzero entry of B, combine it into the result (+ or -)
3. Coordinates whose combined value is exactly zero are dropped

Both operations share the same traversal so zero-suppression behaves
identically for addition and subtraction; A is never negated directly.

Time Complexity: O(nnz(A) + nnz(B))
Space Complexity: O(nnz(A) + nnz(B))
"""

import logging
import operator
import time
from typing import Callable

import numpy as np

from matrix_errors import DimensionMismatchError
from matrix_formats import SparseMatrix


logger = logging.getLogger(__name__)


# ============================================================================
# Shared Traversal
# ============================================================================

def _combine(matrix_a: SparseMatrix, matrix_b: SparseMatrix,
             combine: Callable[[int, int], int], name: str) -> SparseMatrix:
    """
    Copy A into a fresh result, then fold every entry of B into it.

    Args:
        matrix_a, matrix_b: Operands with equal shapes
        combine: Binary function applied as combine(current, value_b)
        name: Operation name for error messages and logging

    Returns:
        New SparseMatrix with A's shape
    """
    if matrix_a.shape != matrix_b.shape:
        raise DimensionMismatchError(
            f"Matrices dimensions must match for {name}: "
            f"{matrix_a.shape} vs {matrix_b.shape}"
        )

    logger.info(f"Sparse {name}: A{matrix_a.shape} ({matrix_a.nnz:,} nnz), "
                f"B{matrix_b.shape} ({matrix_b.nnz:,} nnz)")
    start = time.time()

    result = SparseMatrix(matrix_a.rows, matrix_a.cols)

    for row, col, value in matrix_a.iter_nonzero():
        result.set(row, col, value)

    for row, col, value in matrix_b.iter_nonzero():
        result.store(row, col, combine(result.get(row, col), value))

    elapsed = time.time() - start
    logger.info(f"✓ {name.capitalize()} complete in {elapsed:.4f}s, "
                f"result has {result.nnz:,} entries")
    return result


# ============================================================================
# Main Addition Functions
# ============================================================================

def sparse_add(matrix_a: SparseMatrix, matrix_b: SparseMatrix) -> SparseMatrix:
    """
    Add two sparse matrices: C = A + B

    Args:
        matrix_a: First matrix
        matrix_b: Second matrix, same shape as A

    Returns:
        SparseMatrix result

    Raises:
        DimensionMismatchError if the shapes differ
    """
    return _combine(matrix_a, matrix_b, operator.add, "addition")


def sparse_subtract(matrix_a: SparseMatrix, matrix_b: SparseMatrix) -> SparseMatrix:
    """
    Subtract two sparse matrices: C = A - B

    Args:
        matrix_a: Minuend
        matrix_b: Subtrahend, same shape as A

    Returns:
        SparseMatrix result

    Raises:
        DimensionMismatchError if the shapes differ
    """
    return _combine(matrix_a, matrix_b, operator.sub, "subtraction")


# ============================================================================
# Verification Against scipy
# ============================================================================

def _matches_scipy(result: SparseMatrix, expected) -> bool:
    diff = result.to_scipy_sparse().tocsr() - expected.tocsr()
    max_diff = np.abs(diff.data).max() if diff.nnz > 0 else 0

    if max_diff != 0:
        logger.error(f"✗ Verification failed: max difference = {max_diff}")
        return False

    logger.info("✓ Verification passed! Result matches scipy.sparse")
    return True


def verify_addition_scipy(matrix_a: SparseMatrix, matrix_b: SparseMatrix,
                          result: SparseMatrix) -> bool:
    """
    Verify addition result against scipy.sparse.

    Args:
        matrix_a, matrix_b: Input matrices
        result: Our result

    Returns:
        True if correct
    """
    logger.info("Verifying addition against scipy.sparse...")

    try:
        expected = matrix_a.to_scipy_sparse() + matrix_b.to_scipy_sparse()
        return _matches_scipy(result, expected)
    except (OverflowError, ValueError) as e:
        logger.error(f"Verification error: {e}")
        return False


def verify_subtraction_scipy(matrix_a: SparseMatrix, matrix_b: SparseMatrix,
                             result: SparseMatrix) -> bool:
    """
    Verify subtraction result against scipy.sparse.

    Args:
        matrix_a, matrix_b: Input matrices
        result: Our result

    Returns:
        True if correct
    """
    logger.info("Verifying subtraction against scipy.sparse...")

    try:
        expected = matrix_a.to_scipy_sparse() - matrix_b.to_scipy_sparse()
        return _matches_scipy(result, expected)
    except (OverflowError, ValueError) as e:
        logger.error(f"Verification error: {e}")
        return False
