"""Tests for the pqconsolidator command line."""

import logging

import pyarrow.parquet as pq
import pytest

from pqconsolidator._constants import (
    EXIT_INTERRUPTED,
    EXIT_IO,
    EXIT_LOCATE,
    EXIT_NO_INPUTS,
    EXIT_OK,
    EXIT_SCHEMA,
    EXIT_USAGE,
)
from pqconsolidator.cli import main
from pqconsolidator.consolidate import ConsolidationRun


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("pqconsolidator")
    original_handlers = logger.handlers[:]
    original_level = logger.level
    original_propagate = logger.propagate
    yield
    logger.handlers = original_handlers
    logger.level = original_level
    logger.propagate = original_propagate


class TestCliSuccess:

    def test_non_recursive(self, data_tree, tmp_path, capsys):
        output = tmp_path / "consolidated_basic.parquet"

        code = main(["-i", str(data_tree), "-o", str(output)])

        assert code == EXIT_OK
        assert pq.read_metadata(output).num_rows == 300
        assert "Successfully consolidated 3 files (300 rows)" in capsys.readouterr().out

    def test_recursive(self, data_tree, tmp_path):
        output = tmp_path / "consolidated_recursive.parquet"

        code = main(["-i", str(data_tree), "-o", str(output), "-r"])

        assert code == EXIT_OK
        assert pq.read_metadata(output).num_rows == 500

    def test_single_file_input(self, data_tree, tmp_path):
        output = tmp_path / "single_file_output.parquet"

        code = main(["-i", str(data_tree / "file1.parquet"), "-o", str(output)])

        assert code == EXIT_OK
        assert pq.read_metadata(output).num_rows == 100

    def test_output_inside_input_directory_excluded(self, data_tree):
        output = data_tree / "merged.parquet"

        assert main(["-i", str(data_tree), "-o", str(output)]) == EXIT_OK
        assert main(["-i", str(data_tree), "-o", str(output)]) == EXIT_OK

        assert pq.read_metadata(output).num_rows == 300

    def test_options_forwarded(self, data_tree, tmp_path):
        output = tmp_path / "out.parquet"

        code = main([
            "-i", str(data_tree), "-o", str(output),
            "--compression", "zstd", "--workers", "2", "--schema-mode", "strict",
        ])

        assert code == EXIT_OK
        assert pq.read_metadata(output).row_group(0).column(0).compression == "ZSTD"

    def test_verbose_debug_configures_logging(self, data_tree, tmp_path):
        main(["-i", str(data_tree), "-o", str(tmp_path / "out.parquet"), "-vv"])

        assert logging.getLogger("pqconsolidator").level == logging.DEBUG


class TestCliErrors:

    def test_no_parquet_files(self, tmp_path, capsys):
        empty = tmp_path / "empty"
        empty.mkdir()

        code = main(["-i", str(empty), "-o", str(tmp_path / "out.parquet")])

        assert code == EXIT_NO_INPUTS
        assert "No parquet files found" in capsys.readouterr().err
        assert not (tmp_path / "out.parquet").exists()

    def test_text_file_input(self, data_tree, tmp_path, capsys):
        code = main(["-i", str(data_tree / "readme.txt"), "-o", str(tmp_path / "out.parquet")])

        assert code == EXIT_LOCATE
        assert "not a parquet file" in capsys.readouterr().err

    def test_missing_input(self, tmp_path):
        code = main(["-i", str(tmp_path / "nope"), "-o", str(tmp_path / "out.parquet")])
        assert code == EXIT_LOCATE

    def test_schema_mismatch(self, tmp_path, make_parquet, capsys):
        make_parquet(tmp_path / "in" / "file1.parquet", 0, 10)
        make_parquet(tmp_path / "in" / "file2.parquet", 10, 20, extra=True)
        output = tmp_path / "out.parquet"

        code = main(["-i", str(tmp_path / "in"), "-o", str(output)])

        assert code == EXIT_SCHEMA
        assert "incompatible schema" in capsys.readouterr().err
        assert not output.exists()

    def test_partial_output_removed_on_write_failure(self, data_tree, tmp_path, monkeypatch):
        def failing_write_batch(self, batch, row_group_size=None):
            raise OSError("simulated disk full")

        monkeypatch.setattr(pq.ParquetWriter, "write_batch", failing_write_batch)
        output = tmp_path / "out.parquet"

        code = main(["-i", str(data_tree), "-o", str(output)])

        assert code == EXIT_IO
        assert not output.exists()

    def test_invalid_workers(self, data_tree, tmp_path):
        code = main(["-i", str(data_tree), "-o", str(tmp_path / "o.parquet"), "--workers", "0"])
        assert code == EXIT_USAGE

    def test_missing_required_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", "data"])
        assert exc_info.value.code == 2

    def test_existing_output_kept_on_schema_mismatch(self, tmp_path, make_parquet):
        make_parquet(tmp_path / "in" / "file1.parquet", 0, 10)
        make_parquet(tmp_path / "in" / "file2.parquet", 10, 20, extra=True)
        output = tmp_path / "out.parquet"
        output.write_bytes(b"previous result")

        code = main(["-i", str(tmp_path / "in"), "-o", str(output)])

        assert code == EXIT_SCHEMA
        assert output.read_bytes() == b"previous result"

    def test_interrupted_run_removes_partial_output(self, data_tree, tmp_path, monkeypatch, capsys):
        original = ConsolidationRun._conform

        def interrupt_on_last_file(self, batch, output_schema, path, batch_index):
            if path.name == "file3.parquet":
                raise KeyboardInterrupt
            return original(self, batch, output_schema, path, batch_index)

        monkeypatch.setattr(ConsolidationRun, "_conform", interrupt_on_last_file)
        output = tmp_path / "out.parquet"

        code = main(["-i", str(data_tree), "-o", str(output)])

        assert code == EXIT_INTERRUPTED
        assert "interrupted" in capsys.readouterr().err
        assert not output.exists()
