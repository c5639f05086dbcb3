"""
Canonical schema for a consolidation run.

The schema of the first input file is the reference every other input is
checked against. Compatibility is a per-position check, not unification:

    - positional: same field count, same name and same type at each position
    - strict: positional plus identical nullability

Names are compared case-sensitively and field order is significant.

Main classes:
    CanonicalSchema: Reference schema with compatibility check and field diff
    FieldMismatch: One positional difference between two schemas
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import pyarrow as pa

from pqconsolidator._constants import DEFAULT_SCHEMA_MODE, SCHEMA_MODES, SchemaMode

MismatchReason = Literal["missing", "extra", "name", "type", "nullability"]


@dataclass(frozen=True)
class FieldMismatch:
    """
    Difference at one field position.

    expected is None for fields the file has beyond the canonical schema,
    found is None for canonical fields the file lacks.
    """

    position: int
    reason: MismatchReason
    expected: pa.Field | None
    found: pa.Field | None

    def __str__(self) -> str:
        if self.reason == "missing":
            return f"[{self.position}] missing field {_describe(self.expected)}"
        if self.reason == "extra":
            return f"[{self.position}] unexpected field {_describe(self.found)}"
        return (
            f"[{self.position}] {self.reason} differs: "
            f"expected {_describe(self.expected)}, found {_describe(self.found)}"
        )


def _describe(field: pa.Field | None) -> str:
    if field is None:
        return "<none>"
    nullable = "" if field.nullable else " not null"
    return f"'{field.name}': {field.type}{nullable}"


class CanonicalSchema:
    """
    Reference schema taken from the first input of a run.

    Immutable; created once per run and passed explicitly to both phases.
    """

    def __init__(
        self,
        schema: pa.Schema,
        source: str | Path,
        mode: SchemaMode = DEFAULT_SCHEMA_MODE,
    ) -> None:
        if mode not in SCHEMA_MODES:
            raise ValueError(
                f"Invalid schema mode: '{mode}'. Use one of {list(SCHEMA_MODES)}"
            )
        self._schema = schema
        self._source = Path(source)
        self._mode = mode

    @property
    def schema(self) -> pa.Schema:
        return self._schema

    @property
    def source(self) -> Path:
        """File the schema was read from."""
        return self._source

    @property
    def mode(self) -> SchemaMode:
        return self._mode

    @property
    def names(self) -> list[str]:
        return list(self._schema.names)

    def __len__(self) -> int:
        return len(self._schema)

    def __repr__(self) -> str:
        fields = ", ".join(f"{f.name}: {f.type}" for f in self._schema)
        return f"CanonicalSchema({{{fields}}}, source='{self._source}', mode='{self._mode}')"

    def diff(self, other: pa.Schema) -> list[FieldMismatch]:
        """
        Positional differences between this schema and other.

        In "unify" mode the positional rules of "positional" apply; unify
        compatibility is decided by promotion, not by this diff.
        """
        check_nullability = self._mode == "strict"
        mismatches = []

        for i in range(max(len(self._schema), len(other))):
            if i >= len(other):
                mismatches.append(FieldMismatch(i, "missing", self._schema.field(i), None))
                continue
            if i >= len(self._schema):
                mismatches.append(FieldMismatch(i, "extra", None, other.field(i)))
                continue

            expected = self._schema.field(i)
            found = other.field(i)

            if expected.name != found.name:
                mismatches.append(FieldMismatch(i, "name", expected, found))
            elif not expected.type.equals(found.type):
                mismatches.append(FieldMismatch(i, "type", expected, found))
            elif check_nullability and expected.nullable != found.nullable:
                mismatches.append(FieldMismatch(i, "nullability", expected, found))

        return mismatches

    def is_compatible(self, other: pa.Schema) -> bool:
        """Check if other can be merged under the positional or strict rule."""
        return not self.diff(other)
