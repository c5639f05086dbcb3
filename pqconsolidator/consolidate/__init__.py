"""
Consolidate multiple Parquet files into a single file.

Public API:
    consolidate(inputs, output, ...) -> int
        Validates all schemas, then streams every batch into one output.
    validate(inputs, ...) -> CanonicalSchema
        Phase 1 only; never touches the output path.
    ConsolidationRun, RunState
        Run object exposing the state machine.

Internal modules (not exported):
    _orchestrator: Two-phase run and state machine
    _validation: Canonical schema establishment and per-file checks
    _unify: Optional type-promoting schema policy
    _writer: Single-owner output writer
"""

from pqconsolidator.consolidate._orchestrator import (
    ConsolidationRun,
    RunState,
    consolidate,
    validate,
)

__all__ = ["ConsolidationRun", "RunState", "consolidate", "validate"]
