"""
Optional "unify" schema policy.

Instead of rejecting inputs that differ from the canonical schema, builds a
target schema that every input can be promoted to (pyarrow permissive
promotion) and aligns each batch to it: target column order, missing columns
filled with nulls, differing types cast.
"""

from pathlib import Path

import pyarrow as pa
import pyarrow.compute as pc

from pqconsolidator._exceptions import SchemaMismatchError
from pqconsolidator.schema import CanonicalSchema


def unify_step(
    target: pa.Schema,
    schema: pa.Schema,
    canonical: CanonicalSchema,
    index: int,
    path: str | Path,
) -> pa.Schema:
    """Merge schema into the running target, or fail for this file."""
    try:
        return pa.unify_schemas([target, schema], promote_options="permissive")
    except (pa.ArrowInvalid, pa.ArrowTypeError) as e:
        raise SchemaMismatchError(
            path, index, canonical.schema, schema, canonical.diff(schema)
        ) from e


def nullable_schema(schema: pa.Schema) -> pa.Schema:
    """Every field nullable, so columns absent from some inputs can hold nulls."""
    return pa.schema(
        [field.with_nullable(True) for field in schema], metadata=schema.metadata
    )


def align_batch(batch: pa.RecordBatch, target: pa.Schema) -> pa.RecordBatch:
    """
    Conform a batch to the unified target schema.

    Raises:
        pa.ArrowInvalid: If a column cannot be cast to its target type
    """
    columns = []
    for field in target:
        index = batch.schema.get_field_index(field.name)
        if index == -1:
            columns.append(pa.nulls(batch.num_rows, type=field.type))
            continue

        column = batch.column(index)
        if not column.type.equals(field.type):
            column = pc.cast(column, field.type)
        columns.append(column)

    return pa.RecordBatch.from_arrays(columns, schema=target)
