"""
Tests for the file-to-file processing driver and its command line.
"""

import logging

import pytest

from matrix_errors import (
    DimensionMismatchError, FormatError, InvalidOperationError, VerificationError,
)
from matrix_io import load_matrix
from process_matrices import VERIFIERS, get_operation, main, process_matrix_files
from sparse_addition import sparse_add, sparse_subtract
from sparse_multiplication import sparse_multiply


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def matrix_files(tmp_path):
    a = _write(tmp_path / "a.txt", "rows=2\ncols=2\n(0, 0, 1)\n(1, 1, 1)\n")
    b = _write(tmp_path / "b.txt", "rows=2\ncols=2\n(0, 1, 7)\n(1, 1, -1)\n")
    return a, b


class TestGetOperation:

    @pytest.mark.parametrize("name,func", [
        ("add", sparse_add),
        ("subtract", sparse_subtract),
        ("multiply", sparse_multiply),
    ])
    def test_known(self, name, func):
        assert get_operation(name) is func

    @pytest.mark.parametrize("name", ["divide", "", "ADD", "Add "])
    def test_unknown(self, name):
        with pytest.raises(InvalidOperationError):
            get_operation(name)


class TestProcessMatrixFiles:

    def test_add_prints_labelled_result(self, matrix_files, capsys):
        result = process_matrix_files(*matrix_files, operation="add")
        assert result.to_dict() == {(0, 0): 1, (0, 1): 7}

        out = capsys.readouterr().out
        assert out == "Resulting Matrix:\nrows=2\ncols=2\n(0, 0, 1)\n(0, 1, 7)\n"

    def test_multiply_to_file(self, matrix_files, tmp_path):
        output = tmp_path / "product.txt"
        result = process_matrix_files(*matrix_files, operation="multiply", output_file=output)

        assert result.to_dict() == {(0, 1): 7, (1, 1): -1}
        assert load_matrix(output) == result

    def test_subtract_with_verify(self, matrix_files, caplog):
        with caplog.at_level(logging.INFO):
            result = process_matrix_files(*matrix_files, operation="subtract", verify=True)
        assert result.to_dict() == {(0, 0): 1, (0, 1): -7, (1, 1): 2}
        assert "Verification passed" in caplog.text

    def test_invalid_operation_before_reading(self, tmp_path):
        with pytest.raises(InvalidOperationError):
            process_matrix_files(tmp_path / "nope.txt", tmp_path / "nope.txt", operation="divide")

    def test_missing_file(self, matrix_files, tmp_path):
        with pytest.raises(FileNotFoundError):
            process_matrix_files(matrix_files[0], tmp_path / "missing.txt")

    def test_bad_format(self, matrix_files, tmp_path):
        bad = _write(tmp_path / "bad.txt", "x=2\ncols=2\n")
        with pytest.raises(FormatError):
            process_matrix_files(matrix_files[0], bad)

    def test_failed_verification_raises(self, matrix_files, monkeypatch):
        monkeypatch.setitem(VERIFIERS, "add", lambda a, b, result: False)
        with pytest.raises(VerificationError):
            process_matrix_files(*matrix_files, operation="add", verify=True)

    def test_dimension_mismatch(self, matrix_files, tmp_path):
        wide = _write(tmp_path / "wide.txt", "rows=3\ncols=2\n(2, 1, 1)\n")
        with pytest.raises(DimensionMismatchError):
            process_matrix_files(matrix_files[0], wide, operation="multiply")


class TestMain:

    def test_success(self, matrix_files, tmp_path):
        output = tmp_path / "sum.txt"
        status = main([str(matrix_files[0]), str(matrix_files[1]), "-o", str(output)])
        assert status == 0
        assert output.read_text(encoding="utf-8") == "rows=2\ncols=2\n(0, 0, 1)\n(0, 1, 7)\n"

    def test_error_exit_status(self, matrix_files, caplog):
        status = main([str(matrix_files[0]), str(matrix_files[1]), "-op", "divide"])
        assert status == 1
        assert "Invalid operation" in caplog.text

    def test_missing_file_exit_status(self, matrix_files, tmp_path):
        status = main([str(matrix_files[0]), str(tmp_path / "missing.txt")])
        assert status == 1

    def test_invalid_utf8_exit_status(self, matrix_files, tmp_path, caplog):
        bad = tmp_path / "latin1.txt"
        bad.write_bytes(b"rows=2\ncols=2\n(0, 0, \xff1)\n")
        status = main([str(matrix_files[0]), str(bad)])
        assert status == 1
        assert "not valid UTF-8" in caplog.text

    def test_format_error_reported_once(self, matrix_files, tmp_path, caplog):
        bad = _write(tmp_path / "bad.txt", "x=2\ncols=2\n")
        status = main([str(matrix_files[0]), str(bad)])
        assert status == 1
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1

    def test_failed_verification_exit_status(self, tmp_path, caplog):
        # int64 overflow makes the scipy cross-check fail
        a = _write(tmp_path / "big.txt", f"rows=1\ncols=1\n(0, 0, {2 ** 70})\n")
        b = _write(tmp_path / "one.txt", "rows=1\ncols=1\n(0, 0, 1)\n")
        output = tmp_path / "out.txt"
        status = main([str(a), str(b), "-op", "multiply", "--verify", "-o", str(output)])
        assert status == 1
        assert "does not match scipy.sparse" in caplog.text
        assert not output.exists()
