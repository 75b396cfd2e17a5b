"""
Sparse Matrix Data Generator
Generates synthetic sparse matrices in the rows=/cols= text format for testing.

Features:
- Control matrix size and sparsity
- Random, banded and identity patterns
- Memory estimation before generation
- Progress tracking
"""

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import numpy as np
from tqdm import tqdm

from matrix_io import COLS_PREFIX, ROWS_PREFIX


logger = logging.getLogger(__name__)


class SparseMatrixGenerator:
    """Generate synthetic sparse matrix documents for testing."""

    def __init__(self, output_dir: str = "data/input", max_memory_mb: float = 500):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.max_memory_mb = max_memory_mb

    def estimate_memory(self, nnz: int) -> dict:
        """
        Estimate memory requirements for generating and storing the matrix.

        Args:
            nnz: Number of nonzeros

        Returns:
            Dictionary with memory estimates in MB
        """
        # Each entry: row_idx (8 bytes) + col_idx (8 bytes) + value (8 bytes)
        memory_generation_mb = (nnz * 24) / (1024 * 1024)

        # Text file size: roughly 15-20 bytes per "(i, j, v)" line
        file_size_mb = (nnz * 20) / (1024 * 1024)

        return {
            'generation_mb': memory_generation_mb,
            'file_size_mb': file_size_mb,
            'total_mb': memory_generation_mb + file_size_mb
        }

    def check_safety(self, nnz: int):
        """
        Check that generation stays under the memory limit.

        Raises:
            ValueError if unsafe
        """
        estimates = self.estimate_memory(nnz)

        if estimates['total_mb'] > self.max_memory_mb:
            raise ValueError(
                f"Matrix too large! Estimated memory: {estimates['total_mb']:.1f} MB\n"
                f"Maximum allowed: {self.max_memory_mb} MB\n"
                f"Suggestion: Reduce nnz to {int(nnz * self.max_memory_mb / estimates['total_mb'])}"
            )

        logger.info(f"Memory estimate: {estimates['total_mb']:.1f} MB (SAFE)")

    def _write_document(self, filename: str, shape: Tuple[int, int],
                        entries: Iterable[Tuple[int, int, int]], total: int) -> str:
        filepath = self.output_dir / filename

        logger.info(f"Writing {total:,} entries to {filepath}...")
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(f"{ROWS_PREFIX}{shape[0]}\n")
            f.write(f"{COLS_PREFIX}{shape[1]}\n")
            for i, j, v in tqdm(entries, total=total, desc="Writing entries", unit=" entries"):
                f.write(f"({i}, {j}, {v})\n")

        file_size_mb = filepath.stat().st_size / (1024 * 1024)
        logger.info(f"✓ Generated {filepath} ({file_size_mb:.1f} MB)")

        return str(filepath)

    def generate_random(
        self,
        num_rows: int,
        num_cols: int,
        nnz: int,
        filename: str,
        seed: Optional[int] = None,
        low: int = -100,
        high: int = 100
    ) -> str:
        """
        Generate random sparse matrix with uniform distribution of positions.

        Positions are unique; values are nonzero integers in [low, high).

        Args:
            num_rows: Number of rows
            num_cols: Number of columns
            nnz: Number of nonzeros
            filename: Output filename
            seed: Random seed for reproducibility
            low, high: Value range

        Returns:
            Path to generated file
        """
        logger.info(f"Generating random matrix: {num_rows}×{num_cols}, {nnz:,} nonzeros")

        self.check_safety(nnz)

        total_possible = num_rows * num_cols
        if nnz > total_possible:
            raise ValueError(f"Cannot generate {nnz} unique entries in {num_rows}×{num_cols} matrix")

        if seed is not None:
            np.random.seed(seed)

        positions = np.random.choice(total_possible, size=nnz, replace=False)
        rows = positions // num_cols
        cols = positions % num_cols
        values = np.random.randint(low, high, nnz)
        # keep exactly nnz nonzeros
        values[values == 0] = 1

        order = np.lexsort((cols, rows))
        entries = zip(rows[order].tolist(), cols[order].tolist(), values[order].tolist())

        return self._write_document(filename, (num_rows, num_cols), entries, nnz)

    def generate_banded(
        self,
        size: int,
        bandwidth: int,
        filename: str,
        seed: Optional[int] = None
    ) -> str:
        """
        Generate banded matrix (nonzeros near diagonal).

        Args:
            size: Matrix size (size × size)
            bandwidth: Number of diagonals on each side of main diagonal
            filename: Output filename
            seed: Random seed

        Returns:
            Path to generated file
        """
        logger.info(f"Generating banded matrix: {size}×{size}, bandwidth={bandwidth}")

        if seed is not None:
            np.random.seed(seed)

        entries = []
        for i in range(size):
            for k in range(-bandwidth, bandwidth + 1):
                j = i + k
                if 0 <= j < size:
                    entries.append((i, j, int(np.random.randint(1, 10))))

        self.check_safety(len(entries))

        return self._write_document(filename, (size, size), entries, len(entries))

    def generate_identity(self, size: int, filename: str, scale: int = 1) -> str:
        """
        Generate a scaled identity matrix.

        Args:
            size: Matrix size (size × size)
            filename: Output filename
            scale: Diagonal value

        Returns:
            Path to generated file
        """
        if scale == 0:
            raise ValueError("Identity scale must be nonzero")

        logger.info(f"Generating identity matrix: {size}×{size}, scale={scale}")
        self.check_safety(size)

        entries = ((i, i, scale) for i in range(size))
        return self._write_document(filename, (size, size), entries, size)


def generate_preset_matrices(output_dir: str = "data/input", seed: int = 42,
                             max_memory_mb: float = 500):
    """Generate common sample matrices."""
    generator = SparseMatrixGenerator(output_dir, max_memory_mb=max_memory_mb)

    presets = [
        ("small_A.txt", "random", {"num_rows": 10, "num_cols": 10, "nnz": 15}),
        ("small_B.txt", "random", {"num_rows": 10, "num_cols": 10, "nnz": 15}),
        ("medium_A.txt", "random", {"num_rows": 1000, "num_cols": 800, "nnz": 5000}),
        ("medium_B.txt", "random", {"num_rows": 800, "num_cols": 1000, "nnz": 5000}),
        ("banded_100.txt", "banded", {"size": 100, "bandwidth": 2}),
        ("identity_100.txt", "identity", {"size": 100}),
    ]

    logger.info(f"Generating {len(presets)} preset matrices...")
    logger.info("=" * 70)

    for offset, (filename, pattern, params) in enumerate(presets):
        if pattern == "random":
            generator.generate_random(filename=filename, seed=seed + offset, **params)
        elif pattern == "banded":
            generator.generate_banded(filename=filename, seed=seed + offset, **params)
        elif pattern == "identity":
            generator.generate_identity(filename=filename, **params)

    logger.info("=" * 70)
    logger.info(f"✓ All presets written to {output_dir}")


def main(argv=None):
    """Command-line interface."""
    parser = argparse.ArgumentParser(
        description='Generate sparse matrix documents for testing',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate all preset test matrices
  python generate_data.py --preset

  # Generate custom random matrix
  python generate_data.py --random --rows 1000 --cols 1000 --nnz 5000 -o a.txt

  # Generate banded matrix
  python generate_data.py --banded --size 500 --bandwidth 3 -o banded.txt

  # Generate identity matrix
  python generate_data.py --identity --size 500 -o eye.txt
        """
    )

    parser.add_argument('--output-dir', default='data/input', help='Output directory')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    parser.add_argument('--max-memory', type=float, default=500, help='Max memory in MB (safety limit)')

    parser.add_argument('--preset', action='store_true', help='Generate all preset test matrices')

    parser.add_argument('--random', action='store_true', help='Generate random matrix')
    parser.add_argument('--banded', action='store_true', help='Generate banded matrix')
    parser.add_argument('--identity', action='store_true', help='Generate identity matrix')

    parser.add_argument('--rows', type=int, help='Number of rows')
    parser.add_argument('--cols', type=int, help='Number of columns')
    parser.add_argument('--nnz', type=int, help='Number of nonzeros')
    parser.add_argument('--size', type=int, help='Matrix size (for square matrices)')
    parser.add_argument('--bandwidth', type=int, help='Bandwidth for banded matrices')
    parser.add_argument('--scale', type=int, default=1, help='Diagonal value for identity matrices')

    parser.add_argument('-o', '--output', help='Output filename')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s: %(message)s'
    )

    if args.preset:
        generate_preset_matrices(args.output_dir, seed=args.seed, max_memory_mb=args.max_memory)
        return

    generator = SparseMatrixGenerator(args.output_dir, max_memory_mb=args.max_memory)

    if args.random:
        if not all([args.rows, args.cols, args.nnz, args.output]):
            parser.error("--random requires --rows, --cols, --nnz, and -o")

        generator.generate_random(
            num_rows=args.rows,
            num_cols=args.cols,
            nnz=args.nnz,
            filename=args.output,
            seed=args.seed
        )

    elif args.banded:
        if args.size is None or args.bandwidth is None or not args.output:
            parser.error("--banded requires --size, --bandwidth, and -o")

        generator.generate_banded(
            size=args.size,
            bandwidth=args.bandwidth,
            filename=args.output,
            seed=args.seed
        )

    elif args.identity:
        if not all([args.size, args.output]):
            parser.error("--identity requires --size and -o")

        generator.generate_identity(size=args.size, filename=args.output, scale=args.scale)

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
