"""CLI entry point for test discovery."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from suite_discovery.collector import IncompatibleEngineError, TestCollector
from suite_discovery.models.result import Result

EXIT_INCOMPATIBLE_ENGINE = 2


def parse_engines(engines: str) -> Sequence[str]:
    """Parse comma-separated engine ids."""
    if not engines.strip():
        return ()
    return tuple(e.strip() for e in engines.split(",") if e.strip())


def run(
    artifact_directory: Path,
    search_path: Sequence[Path] = (),
    engines: Sequence[str] = (),
) -> int:
    """Collect tests, print them as JSON and return the exit code."""
    log = logging.getLogger("suite_discovery")

    collector = (
        TestCollector.builder()
        .with_search_path(search_path)
        .with_artifact_directory(artifact_directory)
        .build()
    )

    log.info(
        "Collecting tests from %s (engines=%s)",
        artifact_directory,
        ", ".join(engines) or "all",
    )
    try:
        result = collector.collect_tests(engines)
    except IncompatibleEngineError as e:
        log.error("%s", e)
        return EXIT_INCOMPATIBLE_ENGINE

    print(format_output(result))
    return 0


def format_output(result: Result) -> str:
    """Format a result as JSON for the host."""
    return result.model_dump_json(indent=2)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discover tests and print them as JSON"
    )
    parser.add_argument(
        "--artifact-directory",
        type=Path,
        required=True,
        help="Directory containing the test modules",
    )
    parser.add_argument(
        "--search-path",
        type=Path,
        action="append",
        default=[],
        help="Location holding test dependencies (repeatable)",
    )
    parser.add_argument(
        "--engines",
        default="",
        help="Comma-separated engine ids to run (default: all installed engines)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = run(
        artifact_directory=args.artifact_directory,
        search_path=args.search_path,
        engines=parse_engines(args.engines),
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
