"""
Exception hierarchy for pqconsolidator.

All consolidator exceptions inherit from ConsolidatorError.
Every error is terminal for the current run and carries the context
(offending file, batch index, field-level schema diff) needed to build
an actionable message without re-deriving it.

Usage:
    from pqconsolidator._exceptions import ConsolidatorError, SchemaMismatchError

    try:
        rows = pqconsolidator.consolidate(paths, "out.parquet")
    except SchemaMismatchError as e:
        # Report the offending file and fields
        logger.error(f"{e.file} differs at {len(e.mismatches)} position(s)")
    except ConsolidatorError:
        # Catch-all for other consolidator errors
        raise
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pyarrow as pa

    from pqconsolidator.schema import FieldMismatch


class ConsolidatorError(Exception):
    """Base exception for all consolidator errors."""

    pass


class BackendError(ConsolidatorError):
    """
    DataFrame backend error.

    Raised when:
    - Backend not registered or unavailable
    - Backend dependencies missing

    Examples:
        - "Unknown backend: 'spark'. Available: ['pyarrow', ...]"
    """

    pass


# Locate errors


class LocateError(ConsolidatorError):
    """Input discovery failed. Only raised for the root path itself."""

    def __init__(self, message: str, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class PathNotFoundError(LocateError):
    """Root path does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Input path not found: {path}", path)


class NotTargetFormatError(LocateError):
    """Root path is a regular file without a .parquet extension."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(
            f"Input file is not a parquet file: {path}\n"
            f"Expected extension '.parquet' (case-insensitive)",
            path,
        )


# Consolidate errors


class ConsolidateError(ConsolidatorError):
    """Consolidation run failed. Any output artifact must be discarded."""

    pass


class EmptyInputSetError(ConsolidateError):
    """consolidate() called without input files."""

    def __init__(self) -> None:
        super().__init__("No input files provided")


class SchemaReadError(ConsolidateError):
    """
    Input file could not be opened or its footer parsed.

    Examples:
        - "Cannot read schema from data/part-3.parquet: Parquet magic bytes not found"
    """

    def __init__(self, file: str | Path, reason: str = "") -> None:
        self.file = Path(file)
        message = f"Cannot read schema from {file}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SchemaMismatchError(ConsolidateError):
    """
    Input schema is incompatible with the canonical schema.

    Attributes:
        file: Offending input file
        index: Position of the file in the input list (>= 1)
        expected: Canonical schema (from the first input)
        found: Schema of the offending file
        mismatches: Field-level differences, ordered by position
    """

    def __init__(
        self,
        file: str | Path,
        index: int,
        expected: pa.Schema,
        found: pa.Schema,
        mismatches: list[FieldMismatch] | None = None,
    ) -> None:
        self.file = Path(file)
        self.index = index
        self.expected = expected
        self.found = found
        self.mismatches = list(mismatches or [])

        details = "\n".join(f"  {m}" for m in self.mismatches)
        super().__init__(
            f"File {index} has incompatible schema: {file}\n"
            f"All files must share the schema of the first file.\n"
            f"\n"
            f"Differences:\n{details or '  (schemas cannot be unified)'}"
        )


class OutputCreateError(ConsolidateError):
    """Output file could not be created."""

    def __init__(self, file: str | Path, reason: str = "") -> None:
        self.file = Path(file)
        message = f"Cannot create output file {file}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class BatchReadError(ConsolidateError):
    """Reading a record batch from an input failed mid-stream."""

    def __init__(self, file: str | Path, batch_index: int, reason: str = "") -> None:
        self.file = Path(file)
        self.batch_index = batch_index
        message = f"Failed to read batch {batch_index} from {file}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class BatchWriteError(ConsolidateError):
    """Appending a record batch to the output failed."""

    def __init__(self, file: str | Path, batch_index: int, reason: str = "") -> None:
        self.file = Path(file)
        self.batch_index = batch_index
        message = f"Failed to write batch {batch_index} of {file}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FinalizeError(ConsolidateError):
    """Flushing or closing the output writer failed."""

    def __init__(self, file: str | Path, reason: str = "") -> None:
        self.file = Path(file)
        message = f"Failed to finalize output file {file}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
