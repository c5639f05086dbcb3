"""
Main consolidation orchestrator.

Coordinates the two-phase run:
1. Validation: read every footer and check it against the canonical schema
2. Streaming: reopen each input and append its batches to a single writer

No output is created until Phase 1 passes for every input, so a run that is
doomed by a late incompatible file never truncates the destination.

State machine:
    IDLE -> VALIDATING_SCHEMAS -> STREAMING -> FINALIZING -> DONE
    any phase -> FAILED
"""

from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from pqconsolidator._exceptions import (
    BatchReadError,
    BatchWriteError,
    ConsolidatorError,
    EmptyInputSetError,
    OutputCreateError,
)
from pqconsolidator._format import same_file
from pqconsolidator._logging import get_logger, phase_timer
from pqconsolidator.consolidate._unify import align_batch
from pqconsolidator.consolidate._validation import ValidationResult, validate_inputs
from pqconsolidator.consolidate._writer import OutputWriter
from pqconsolidator.options import ConsolidateOptions
from pqconsolidator.schema import CanonicalSchema

logger = get_logger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    VALIDATING_SCHEMAS = "validating_schemas"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class ConsolidationRun:
    """
    One consolidation of an ordered list of Parquet files.

    Not resumable: a failed run must be recreated with corrected inputs.

    Attributes:
        inputs: Input files, in output row order
        output: Destination file
        options: Validated run options
        state: Current RunState
        canonical: Canonical schema (after Phase 1)
        rows_written: Rows appended so far
        output_created: True once the output file has been opened for writing

    Example:
        >>> run = ConsolidationRun(["a.parquet", "b.parquet"], "out.parquet")
        >>> run.run()
        1500
        >>> run.state
        <RunState.DONE: 'done'>
    """

    def __init__(
        self,
        inputs: Sequence[str | Path],
        output: str | Path,
        options: ConsolidateOptions | None = None,
    ) -> None:
        self.inputs = [Path(p) for p in inputs]
        self.output = Path(output)
        self.options = options or ConsolidateOptions()
        self.state = RunState.IDLE
        self.canonical: CanonicalSchema | None = None
        self.rows_written = 0
        self.output_created = False

    def run(self) -> int:
        """
        Execute both phases.

        Returns:
            Total number of rows written

        Raises:
            ConsolidatorError: If the run was already started
            ConsolidateError: Subclass describing the first failure
        """
        if self.state is not RunState.IDLE:
            raise ConsolidatorError(
                f"Consolidation run already {self.state.value}; create a new run"
            )

        try:
            if not self.inputs:
                raise EmptyInputSetError()

            logger.info(f"Consolidating {len(self.inputs)} files into {self.output}")

            self.state = RunState.VALIDATING_SCHEMAS
            with phase_timer(logger, "Schema validation"):
                validation = validate_inputs(
                    self.inputs,
                    schema_mode=self.options.schema_mode,
                    max_workers=self.options.max_workers,
                )
            self.canonical = validation.canonical

            self.state = RunState.STREAMING
            with phase_timer(logger, "Streaming"):
                self._stream(validation)
        except BaseException:
            # Interrupts included
            self.state = RunState.FAILED
            raise

        self.state = RunState.DONE
        logger.info(
            f"Consolidated {len(self.inputs)} files ({self.rows_written:,} rows) "
            f"into {self.output}"
        )
        return self.rows_written

    def _stream(self, validation: ValidationResult) -> None:
        """Phase 2: copy every batch of every input, then finalize."""
        for path in validation.files:
            if same_file(path, self.output):
                raise OutputCreateError(
                    self.output, f"output path is also an input ({path})"
                )

        writer = OutputWriter(
            self.output,
            validation.output_schema,
            compression=self.options.writer_compression,
        )
        writer.open()
        self.output_created = True

        try:
            for path in validation.files:
                self._stream_file(path, writer, validation.output_schema)

            self.state = RunState.FINALIZING
            writer.finalize()
        finally:
            # No-op after a successful finalize
            writer.abort()

    def _stream_file(
        self, path: Path, writer: OutputWriter, output_schema: pa.Schema
    ) -> None:
        """Append all batches of one input, in source order."""
        try:
            parquet_file = pq.ParquetFile(path)
        except (OSError, pa.ArrowException) as e:
            raise BatchReadError(path, 0, str(e)) from e

        rows_before = self.rows_written
        try:
            batches = parquet_file.iter_batches(batch_size=self.options.batch_size)
            batch_index = 0
            while True:
                try:
                    batch = next(batches)
                except StopIteration:
                    break
                except (OSError, pa.ArrowException) as e:
                    raise BatchReadError(path, batch_index, str(e)) from e

                batch = self._conform(batch, output_schema, path, batch_index)
                writer.write(batch, path, batch_index)
                self.rows_written += batch.num_rows
                batch_index += 1
        finally:
            parquet_file.close()

        logger.debug(
            f"  {path}: {self.rows_written - rows_before:,} rows in {batch_index} batches"
        )

    def _conform(
        self,
        batch: pa.RecordBatch,
        output_schema: pa.Schema,
        path: Path,
        batch_index: int,
    ) -> pa.RecordBatch:
        """Rebind a batch to the writer schema (zero-copy unless unifying)."""
        try:
            if self.options.schema_mode == "unify":
                return align_batch(batch, output_schema)
            return pa.RecordBatch.from_arrays(batch.columns, schema=output_schema)
        except pa.ArrowException as e:
            raise BatchWriteError(path, batch_index, str(e)) from e


def _options(options: ConsolidateOptions | None, overrides: dict[str, Any]) -> ConsolidateOptions:
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if options is None:
        return ConsolidateOptions(**overrides)
    if overrides:
        return ConsolidateOptions(**{**options.model_dump(), **overrides})
    return options


def consolidate(
    inputs: Sequence[str | Path],
    output: str | Path,
    *,
    schema_mode: str | None = None,
    batch_size: int | None = None,
    compression: str | None = None,
    max_workers: int | None = None,
    options: ConsolidateOptions | None = None,
) -> int:
    """
    Merge Parquet files into one output file.

    Validates every input schema against the first file's before creating
    the output, then streams batches in input order.

    Args:
        inputs: Ordered, non-empty list of Parquet files
        output: Destination file (overwritten if it exists)
        schema_mode: "positional" (default), "strict" or "unify"
        batch_size: Maximum rows per streamed batch
        compression: Output codec (default "snappy")
        max_workers: Threads for Phase 1 schema reads
        options: Pre-built ConsolidateOptions (keyword arguments override it)

    Returns:
        Total number of rows written

    Raises:
        EmptyInputSetError: If inputs is empty
        SchemaReadError: If an input footer cannot be read
        SchemaMismatchError: If an input schema is incompatible
        OutputCreateError: If the output cannot be created
        BatchReadError: If reading an input batch fails
        BatchWriteError: If appending a batch fails
        FinalizeError: If closing the output fails

    Examples:
        >>> import pqconsolidator
        >>> files = pqconsolidator.locate("data/", recursive=True)
        >>> pqconsolidator.consolidate(files, "merged.parquet")
        22
    """
    run_options = _options(
        options,
        {
            "schema_mode": schema_mode,
            "batch_size": batch_size,
            "compression": compression,
            "max_workers": max_workers,
        },
    )
    return ConsolidationRun(inputs, output, run_options).run()


def validate(
    inputs: Sequence[str | Path],
    schema_mode: str = "positional",
    max_workers: int | None = None,
) -> CanonicalSchema:
    """
    Run Phase 1 only. Never touches any output path.

    Returns:
        Canonical schema of the inputs

    Raises:
        EmptyInputSetError, SchemaReadError, SchemaMismatchError
    """
    run_options = ConsolidateOptions(schema_mode=schema_mode, max_workers=max_workers)
    result = validate_inputs(
        inputs,
        schema_mode=run_options.schema_mode,
        max_workers=run_options.max_workers,
    )
    return result.canonical
