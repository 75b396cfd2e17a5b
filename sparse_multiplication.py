"""
Sparse Matrix Multiplication (A × B)
Implements row-wise sparse accumulation (Gustavson) over dictionary-of-keys matrices.

Algorithm: Sparse Inner-Product Accumulation
1. For every nonzero A[i, k]
2. Look up row k of B; skip when it is empty
3. For every nonzero B[k, j]: C[i, j] += A[i, k] * B[k, j]

Only nonzero × nonzero pairs are visited.

Time Complexity: O(sum over nonzero A[i, k] of nnz(B[k, :]))
Space Complexity: O(nnz(C))
"""

import logging
import time

import numpy as np

from matrix_errors import DimensionMismatchError
from matrix_formats import SparseMatrix


logger = logging.getLogger(__name__)


# ============================================================================
# Main Multiplication Function
# ============================================================================

def sparse_multiply(matrix_a: SparseMatrix, matrix_b: SparseMatrix) -> SparseMatrix:
    """
    Multiply sparse matrices: C = A × B

    Args:
        matrix_a: Matrix A (m × k)
        matrix_b: Matrix B (k × n)

    Returns:
        SparseMatrix result (m × n)

    Raises:
        DimensionMismatchError if A's columns differ from B's rows
    """
    if matrix_a.cols != matrix_b.rows:
        raise DimensionMismatchError(
            f"Invalid matrix dimensions for multiplication: A is {matrix_a.shape}, "
            f"B is {matrix_b.shape}. A's columns ({matrix_a.cols}) must equal "
            f"B's rows ({matrix_b.rows})"
        )

    result_shape = (matrix_a.rows, matrix_b.cols)

    logger.info(f"Sparse multiplication: A{matrix_a.shape} × B{matrix_b.shape}")
    logger.info(f"A: {matrix_a.nnz:,} nonzeros, B: {matrix_b.nnz:,} nonzeros")
    start = time.time()

    result = SparseMatrix(*result_shape)
    pairs = 0

    for row_a, col_a, value_a in matrix_a.iter_nonzero():
        row_b = matrix_b.row_items(col_a)
        for col_b, value_b in row_b.items():
            result.accumulate(row_a, col_b, value_a * value_b)
        pairs += len(row_b)

    elapsed = time.time() - start
    logger.info(f"✓ Multiplication complete in {elapsed:.4f}s ({pairs:,} products)")
    logger.info(f"Result {result_shape[0]} × {result_shape[1]} has {result.nnz:,} nonzeros")

    return result


# ============================================================================
# Verification Against scipy
# ============================================================================

def verify_multiplication_scipy(matrix_a: SparseMatrix, matrix_b: SparseMatrix,
                                result: SparseMatrix) -> bool:
    """
    Verify multiplication result against scipy.sparse.

    Args:
        matrix_a, matrix_b: Input matrices
        result: Our result

    Returns:
        True if correct
    """
    logger.info("Verifying multiplication against scipy.sparse...")

    try:
        scipy_a = matrix_a.to_scipy_sparse().tocsr()
        scipy_b = matrix_b.to_scipy_sparse().tocsc()
        expected = scipy_a @ scipy_b

        diff = result.to_scipy_sparse().tocsr() - expected.tocsr()
        max_diff = np.abs(diff.data).max() if diff.nnz > 0 else 0

        if max_diff != 0:
            logger.error(f"✗ Verification failed: max difference = {max_diff}")
            return False

        logger.info("✓ Verification passed! Result matches scipy.sparse")
        return True

    except (OverflowError, ValueError) as e:
        logger.error(f"Verification error: {e}")
        return False
