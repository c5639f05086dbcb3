"""
Per-run configuration for consolidate().

Validated before any I/O so a bad option never leaves a partial output.
"""

from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator

from pqconsolidator._constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_COMPRESSION,
    DEFAULT_SCHEMA_MODE,
    SUPPORTED_COMPRESSIONS,
    SchemaMode,
)


class ConsolidateOptions(BaseModel):
    """
    Options for one consolidation run.

    Attributes:
        schema_mode: "positional" (default), "strict" or "unify"
        batch_size: Maximum rows per record batch read from inputs
        compression: Output codec, applied to every column ("none" disables)
        max_workers: Threads used for Phase 1 schema reads (None = sequential)

    Example:
        >>> ConsolidateOptions(schema_mode="strict", max_workers=4)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_mode: SchemaMode = DEFAULT_SCHEMA_MODE
    batch_size: PositiveInt = DEFAULT_BATCH_SIZE
    compression: str = DEFAULT_COMPRESSION
    max_workers: PositiveInt | None = None

    @field_validator("compression")
    @classmethod
    def _check_compression(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_COMPRESSIONS:
            raise ValueError(
                f"Unsupported compression '{value}'. "
                f"Use one of {sorted(SUPPORTED_COMPRESSIONS)}"
            )
        return value

    @property
    def writer_compression(self) -> str | None:
        """Codec in the form pyarrow's ParquetWriter expects."""
        return None if self.compression == "none" else self.compression
