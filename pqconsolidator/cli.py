"""
Command line entry point.

    pqconsolidator -i data/ -o merged.parquet -r -v

Locates inputs, rejects an empty result, runs the consolidation and maps
each error class to an exit code. A partial output left by a failed
or interrupted run is removed.
"""

import argparse
import sys
from pathlib import Path

from pqconsolidator._constants import (
    DEFAULT_COMPRESSION,
    DEFAULT_SCHEMA_MODE,
    EXIT_INTERRUPTED,
    EXIT_IO,
    EXIT_LOCATE,
    EXIT_NO_INPUTS,
    EXIT_OK,
    EXIT_SCHEMA,
    EXIT_USAGE,
    SCHEMA_MODES,
    SUPPORTED_COMPRESSIONS,
)
from pqconsolidator._exceptions import (
    ConsolidateError,
    EmptyInputSetError,
    LocateError,
    SchemaMismatchError,
    SchemaReadError,
)
from pqconsolidator._format import same_file
from pqconsolidator._logging import (
    get_logger,
    setup_basic_logging,
    verbosity_to_level,
)
from pqconsolidator.consolidate import ConsolidationRun
from pqconsolidator.locate import locate
from pqconsolidator.options import ConsolidateOptions

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pqconsolidator",
        description="Consolidate Parquet files with a shared schema into a single file.",
    )
    parser.add_argument(
        "-i", "--input", required=True, type=Path,
        help="Parquet file or directory containing Parquet files",
    )
    parser.add_argument(
        "-o", "--output", required=True, type=Path, help="Consolidated output file"
    )
    parser.add_argument(
        "-r", "--recursive", action="store_true",
        help="Search subdirectories of --input",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress (-v info, -vv debug)",
    )
    parser.add_argument(
        "--schema-mode", choices=SCHEMA_MODES, default=DEFAULT_SCHEMA_MODE,
        help="Schema compatibility policy (default: %(default)s)",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Threads used to read input schemas",
    )
    parser.add_argument(
        "--compression", choices=sorted(SUPPORTED_COMPRESSIONS),
        default=DEFAULT_COMPRESSION, help="Output codec (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        setup_basic_logging(verbosity_to_level(args.verbose))

    if args.workers is not None and args.workers < 1:
        print("error: --workers must be a positive integer", file=sys.stderr)
        return EXIT_USAGE

    try:
        files = locate(args.input, recursive=args.recursive)
    except LocateError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_LOCATE

    # Re-running into a directory that already holds the output
    files = [f for f in files if not same_file(f, args.output)]

    if not files:
        print(f"error: No parquet files found in {args.input}", file=sys.stderr)
        return EXIT_NO_INPUTS

    options = ConsolidateOptions(
        schema_mode=args.schema_mode,
        compression=args.compression,
        max_workers=args.workers,
    )
    run = ConsolidationRun(files, args.output, options)
    try:
        rows = run.run()
    except ConsolidateError as e:
        print(f"error: {e}", file=sys.stderr)
        _discard_partial_output(run)
        return _exit_code(e)
    except KeyboardInterrupt:
        print("error: interrupted", file=sys.stderr)
        _discard_partial_output(run)
        return EXIT_INTERRUPTED

    print(f"Successfully consolidated {len(files)} files ({rows:,} rows) into {args.output}")
    return EXIT_OK


def _exit_code(error: ConsolidateError) -> int:
    if isinstance(error, EmptyInputSetError):
        return EXIT_NO_INPUTS
    if isinstance(error, (SchemaMismatchError, SchemaReadError)):
        return EXIT_SCHEMA
    return EXIT_IO


def _discard_partial_output(run: ConsolidationRun) -> None:
    """Remove the unfinalized output of a failed run. Untouched files are kept."""
    if not run.output_created:
        return
    output = run.output
    try:
        output.unlink(missing_ok=True)
        logger.debug(f"Removed partial output {output}")
    except OSError as e:
        print(f"warning: could not remove partial output {output}: {e}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
