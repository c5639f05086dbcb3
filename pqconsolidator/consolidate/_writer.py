"""
Output writer for a consolidation run.

Single owner of the destination handle. Batches are appended in call order;
the Parquet footer is written exactly once by finalize(). abort() releases
the handle without writing a footer, so a failed run never leaves a file
that reads back as a valid (truncated) dataset.
"""

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from pqconsolidator._exceptions import (
    BatchWriteError,
    FinalizeError,
    OutputCreateError,
)
from pqconsolidator._logging import get_logger

logger = get_logger(__name__)


class OutputWriter:
    """
    Parquet writer bound to the run's output schema.

    Usage:
        writer = OutputWriter("out.parquet", schema, compression="snappy")
        writer.open()
        try:
            writer.write(batch, source="part-1.parquet", batch_index=0)
            writer.finalize()
        finally:
            writer.abort()
    """

    def __init__(
        self, path: str | Path, schema: pa.Schema, compression: str | None
    ) -> None:
        self.path = Path(path)
        self.schema = schema
        self.compression = compression
        self.rows_written = 0
        self.batches_written = 0
        self._sink: pa.NativeFile | None = None
        self._writer: pq.ParquetWriter | None = None
        self._finalized = False

    @property
    def is_open(self) -> bool:
        return self._writer is not None and not self._finalized

    def open(self) -> None:
        """Create the destination file (and missing parent directories)."""
        if self._writer is not None:
            raise OutputCreateError(self.path, "writer already opened")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._sink = pa.OSFile(str(self.path), mode="wb")
            self._writer = pq.ParquetWriter(
                self._sink, self.schema, compression=self.compression
            )
        except (OSError, pa.ArrowException) as e:
            self._release_sink()
            raise OutputCreateError(self.path, str(e)) from e

        logger.debug(f"Opened {self.path} (compression={self.compression})")

    def write(self, batch: pa.RecordBatch, source: str | Path, batch_index: int) -> None:
        """Append one batch. source and batch_index are only used for errors."""
        if not self.is_open:
            raise BatchWriteError(source, batch_index, "output writer is not open")

        try:
            self._writer.write_batch(batch)
        except (OSError, ValueError, pa.ArrowException) as e:
            raise BatchWriteError(source, batch_index, str(e)) from e

        self.rows_written += batch.num_rows
        self.batches_written += 1

    def finalize(self) -> None:
        """Write the footer and close the file. Only valid once."""
        if not self.is_open:
            raise FinalizeError(self.path, "output writer is not open")

        try:
            self._writer.close()
            self._release_sink()
        except (OSError, pa.ArrowException) as e:
            self.abort()
            raise FinalizeError(self.path, str(e)) from e
        self._finalized = True

        logger.debug(
            f"Finalized {self.path}: {self.rows_written:,} rows in "
            f"{self.batches_written} batches"
        )

    def abort(self) -> None:
        """Release the handle without finalizing. The file on disk is invalid."""
        if self._finalized:
            return

        self._release_sink()
        if self._writer is not None:
            # ParquetWriter.close() and __del__ only write the footer while
            # is_open is true; clearing it keeps a collected writer from
            # turning the partial file into a valid, truncated one
            self._writer.is_open = False
        self._finalized = True
        logger.debug(f"Aborted {self.path}; partial output must be discarded")

    def _release_sink(self) -> None:
        if self._sink is not None and not self._sink.closed:
            self._sink.close()
