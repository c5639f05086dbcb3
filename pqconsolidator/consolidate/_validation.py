"""
Phase 1: schema establishment and validation.

Reads only Parquet footers. The first input defines the canonical schema;
every other input is checked against it in input order and the first
mismatch aborts the run. Nothing here touches the output path.

Schema reads are independent and side-effect free, so they may run on a
thread pool. Results are still consumed in input order, which keeps the
reported error identical to a sequential scan.
"""

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from pqconsolidator._constants import DEFAULT_SCHEMA_MODE, SchemaMode
from pqconsolidator._exceptions import (
    EmptyInputSetError,
    SchemaMismatchError,
    SchemaReadError,
)
from pqconsolidator._logging import get_logger
from pqconsolidator.consolidate._unify import nullable_schema, unify_step
from pqconsolidator.schema import CanonicalSchema

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of Phase 1.

    Attributes:
        canonical: Schema of the first input
        output_schema: Schema the writer is bound to
        files: Validated inputs, in input order
    """

    canonical: CanonicalSchema
    output_schema: pa.Schema
    files: tuple[Path, ...]


def read_schema(path: str | Path) -> pa.Schema:
    """Read the Arrow schema from a Parquet footer."""
    try:
        return pq.read_schema(path)
    except (OSError, pa.ArrowException) as e:
        raise SchemaReadError(path, str(e)) from e


def validate_inputs(
    inputs: Sequence[str | Path],
    schema_mode: SchemaMode = DEFAULT_SCHEMA_MODE,
    max_workers: int | None = None,
) -> ValidationResult:
    """
    Establish the canonical schema and check every input against it.

    Raises:
        EmptyInputSetError: If inputs is empty
        SchemaReadError: If an input cannot be opened or parsed
        SchemaMismatchError: On the first incompatible input
    """
    files = tuple(Path(p) for p in inputs)
    if not files:
        raise EmptyInputSetError()

    logger.debug(f"Validating schemas of {len(files)} files (mode={schema_mode})")

    canonical: CanonicalSchema | None = None
    schemas: list[pa.Schema] = []
    target: pa.Schema | None = None

    with closing(_iter_schemas(files, max_workers)) as results:
        for index, path, schema in results:
            if canonical is None:
                canonical = CanonicalSchema(schema, path, schema_mode)
                target = schema
                logger.debug(f"Canonical schema from {path}: {canonical.names}")
            elif schema_mode == "unify":
                target = unify_step(target, schema, canonical, index, path)
            else:
                mismatches = canonical.diff(schema)
                if mismatches:
                    raise SchemaMismatchError(
                        path, index, canonical.schema, schema, mismatches
                    )
            schemas.append(schema)
            logger.debug(f"  [{index}] {path}: ok")

    if schema_mode == "unify":
        output_schema = nullable_schema(target)
    else:
        output_schema = _widen_nullability(canonical.schema, schemas)

    logger.debug("All schemas compatible")
    return ValidationResult(canonical, output_schema, files)


def _iter_schemas(
    files: tuple[Path, ...], max_workers: int | None
) -> Iterator[tuple[int, Path, pa.Schema]]:
    """Yield (index, path, schema) in input order."""
    if not max_workers or max_workers <= 1 or len(files) <= 1:
        for index, path in enumerate(files):
            yield index, path, read_schema(path)
        return

    executor = ThreadPoolExecutor(
        max_workers=min(max_workers, len(files)),
        thread_name_prefix="pqconsolidator-schema",
    )
    try:
        futures = [executor.submit(read_schema, path) for path in files]
        for index, (path, future) in enumerate(zip(files, futures)):
            yield index, path, future.result()
    finally:
        executor.shutdown(wait=True, cancel_futures=True)


def _widen_nullability(canonical: pa.Schema, schemas: list[pa.Schema]) -> pa.Schema:
    """
    Canonical schema with a field made nullable if any input has it nullable.

    Identical to the canonical schema unless nullability differs between
    inputs (possible in positional mode only).
    """
    fields = [
        field.with_nullable(any(s.field(i).nullable for s in schemas))
        for i, field in enumerate(canonical)
    ]
    return pa.schema(fields, metadata=canonical.metadata)
