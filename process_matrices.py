"""
Sparse Matrix Processing
Reads two matrix documents, applies add / subtract / multiply and writes the result
in the same text format.

Usage:
  # Add two matrices and print the result
  python process_matrices.py data/input/a.txt data/input/b.txt

  # Multiply and save, checking the result against scipy.sparse
  python process_matrices.py a.txt b.txt -op multiply -o product.txt --verify
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from matrix_errors import InvalidOperationError, MatrixError, VerificationError
from matrix_formats import SparseMatrix
from matrix_io import format_matrix, load_matrix, write_matrix
from sparse_addition import (
    sparse_add, sparse_subtract,
    verify_addition_scipy, verify_subtraction_scipy,
)
from sparse_multiplication import sparse_multiply, verify_multiplication_scipy


logger = logging.getLogger(__name__)

Operation = Callable[[SparseMatrix, SparseMatrix], SparseMatrix]

OPERATIONS: Dict[str, Operation] = {
    'add': sparse_add,
    'subtract': sparse_subtract,
    'multiply': sparse_multiply,
}

VERIFIERS = {
    'add': verify_addition_scipy,
    'subtract': verify_subtraction_scipy,
    'multiply': verify_multiplication_scipy,
}

RESULT_LABEL = "Resulting Matrix:"


def get_operation(name: str) -> Operation:
    """
    Resolve an operation selector.

    Raises:
        InvalidOperationError for anything other than add, subtract, multiply
    """
    try:
        return OPERATIONS[name]
    except KeyError:
        raise InvalidOperationError(
            f"Invalid operation: {name!r} (expected one of {', '.join(OPERATIONS)})"
        ) from None


def process_matrix_files(
    file_a: Union[str, Path],
    file_b: Union[str, Path],
    operation: str = 'add',
    output_file: Optional[Union[str, Path]] = None,
    verify: bool = False
) -> SparseMatrix:
    """
    Apply an operation to two matrix documents.

    Args:
        file_a: Path to matrix A
        file_b: Path to matrix B
        operation: 'add', 'subtract' or 'multiply'
        output_file: Optional output path; the result is printed when omitted
        verify: Also check the result against scipy.sparse

    Returns:
        SparseMatrix result

    Raises:
        InvalidOperationError, OSError, FormatError, DimensionMismatchError,
        VerificationError
    """
    operate = get_operation(operation)

    logger.info("Loading matrices from:")
    logger.info(f"  A: {file_a}")
    logger.info(f"  B: {file_b}")

    matrix_a = load_matrix(file_a)
    matrix_b = load_matrix(file_b)

    result = operate(matrix_a, matrix_b)

    if verify and not VERIFIERS[operation](matrix_a, matrix_b, result):
        raise VerificationError(f"{operation} result does not match scipy.sparse")

    if output_file:
        write_matrix(result, output_file)
    else:
        print(format_matrix(result, label=RESULT_LABEL), end='')

    return result


def main(argv=None) -> int:
    """Command-line entry point; returns the process exit status."""
    parser = argparse.ArgumentParser(
        description='Add, subtract or multiply sparse matrices stored in the rows=/cols= text format',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python process_matrices.py a.txt b.txt
  python process_matrices.py a.txt b.txt -op subtract -o diff.txt
  python process_matrices.py a.txt b.txt -op multiply --verify
        """
    )

    parser.add_argument('matrix_a', help='Path to matrix A')
    parser.add_argument('matrix_b', help='Path to matrix B')
    parser.add_argument('-op', '--operation', default='add',
                        help='Operation: add, subtract or multiply (default: add)')
    parser.add_argument('-o', '--output', help='Output file (default: print to stdout)')
    parser.add_argument('--verify', action='store_true',
                        help='Check the result against scipy.sparse')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(levelname)s: %(message)s')

    try:
        process_matrix_files(
            args.matrix_a,
            args.matrix_b,
            operation=args.operation,
            output_file=args.output,
            verify=args.verify
        )
    except (MatrixError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
