"""CLI entry point for the VM test runner."""

import argparse
import asyncio
import json
import logging
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from vm_test_runner.compiler import Javac
from vm_test_runner.discovery import find_tests
from vm_test_runner.driver import TestDriver
from vm_test_runner.environment import HostEnvironment
from vm_test_runner.harness import HarnessPreparationError, TestHarness
from vm_test_runner.models.config import HarnessConfig
from vm_test_runner.models.result import Result, TestRun
from vm_test_runner.modes.loading import load_mode_config, load_mode_manifest

RESULT_SYMBOLS = {
    Result.SUCCESS: "✅",
    Result.COMPILE_FAILED: "🛠️",
    Result.EXEC_FAILED: "❌",
    Result.EXEC_TIMEOUT: "⏱️",
    Result.ERROR: "❗",
    Result.UNSUPPORTED: "➖",
}

FAILED_RESULTS = frozenset(
    {Result.COMPILE_FAILED, Result.EXEC_FAILED, Result.EXEC_TIMEOUT, Result.ERROR}
)

EXIT_PREPARATION_FAILED = 2


def log_results_summary(log: logging.Logger, test_runs: Sequence[TestRun]) -> None:
    """Log a formatted summary of test results with their diagnostics."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for test_run in test_runs:
        symbol = RESULT_SYMBOLS.get(test_run.result, "?")
        log.info("%s %s: %s", symbol, test_run.qualified_name, test_run.result)
        if test_run.result in FAILED_RESULTS:
            for line in test_run.output:
                log.info("  %s", line)


def parse_path_list(value: str) -> Sequence[Path]:
    """Parse a path-separator or comma separated list of paths."""
    entries = value.replace(",", ":").split(":")
    return tuple(Path(entry.strip()) for entry in entries if entry.strip())


def find_runner_sources(runner_source_root: Path) -> Sequence[Path]:
    """Return every Java source below the runner source root."""
    return sorted(runner_source_root.rglob("*.java"))


async def run(
    mode_key: str,
    mode_config_json: str,
    harness_config: HarnessConfig,
    test_paths: Sequence[Path],
    runner_classpath: Sequence[Path] = (),
    work_dir: Path | None = None,
    keep_files: bool = False,
    javac: str = "javac",
) -> int:
    """Run tests and return exit code."""
    log = logging.getLogger("vm_test_runner")

    log.info("Loading mode: %s", mode_key)
    manifest = load_mode_manifest(mode_key)

    config = load_mode_config(manifest, mode_config_json)

    test_runs = find_tests(test_paths)
    if not test_runs:
        log.info("No tests found")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    base_dir = work_dir or Path(tempfile.mkdtemp(prefix="vm-test-runner-"))
    environment = HostEnvironment(base_dir=base_dir, keep_files=keep_files)

    async with manifest.mode_factory(config) as mode:
        harness = TestHarness(
            mode=mode,
            environment=environment,
            config=harness_config,
            compiler=Javac(executable=javac),
        )
        driver = TestDriver(harness=harness)
        try:
            await driver.run_tests(
                test_runs,
                find_runner_sources(harness_config.runner_source_root),
                runner_classpath,
            )
        except HarnessPreparationError as e:
            log.error("%s", e)
            return EXIT_PREPARATION_FAILED

    log_results_summary(log, test_runs)

    output = format_output(test_runs)
    print(json.dumps(output, indent=2))

    has_failures = any(test_run.result in FAILED_RESULTS for test_run in test_runs)

    return 1 if has_failures else 0


def format_output(test_runs: Sequence[TestRun]) -> dict[str, Any]:
    """Format test results for JSON output."""
    all_results = [
        {
            "test": test_run.qualified_name,
            "source": str(test_run.test_java),
            "result": test_run.result,
            "output": test_run.output,
        }
        for test_run in test_runs
    ]

    def count(result: Result) -> int:
        return sum(1 for r in all_results if r["result"] == result)

    return {
        "total": len(all_results),
        "passed": count(Result.SUCCESS),
        "failed": count(Result.EXEC_FAILED),
        "compile_failed": count(Result.COMPILE_FAILED),
        "errors": count(Result.ERROR),
        "timeouts": count(Result.EXEC_TIMEOUT),
        "unsupported": count(Result.UNSUPPORTED),
        "results": all_results,
    }


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compile and run single-file Java tests on a VM"
    )
    parser.add_argument(
        "--mode",
        required=True,
        help="Execution mode key (jvm, dalvikvm)",
    )
    parser.add_argument(
        "--mode-config",
        default="{}",
        help="JSON configuration for the mode",
    )
    parser.add_argument(
        "--sdk-jar",
        type=Path,
        required=True,
        help="Jar used as boot classpath for every compile",
    )
    parser.add_argument(
        "--javac",
        default="javac",
        help="Java compiler executable",
    )
    parser.add_argument(
        "--runner-source-root",
        type=Path,
        required=True,
        help="Source root of the test runner support code",
    )
    parser.add_argument(
        "--runner-classpath",
        type=parse_path_list,
        default=(),
        help="Classpath the test runner depends on",
    )
    parser.add_argument(
        "--library-classpath",
        type=parse_path_list,
        default=(),
        help="Archives added to the classpath of every test compile",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=60,
        help="Seconds each test may run before it is killed",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Fail a test when any of its setup commands exits non-zero",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        default=None,
        help="Directory for compiled classes (default: a new temporary dir)",
    )
    parser.add_argument(
        "--keep-files",
        action="store_true",
        help="Keep compiled classes and working directories after the run",
    )
    parser.add_argument(
        "tests",
        type=Path,
        nargs="+",
        help="Test sources or directories containing them",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    harness_config = HarnessConfig(
        sdk_jar=args.sdk_jar,
        runner_source_root=args.runner_source_root,
        library_classpath=args.library_classpath,
        timeout_seconds=args.timeout,
        fail_fast=args.fail_fast,
    )

    exit_code = asyncio.run(
        run(
            mode_key=args.mode,
            mode_config_json=args.mode_config,
            harness_config=harness_config,
            test_paths=args.tests,
            runner_classpath=args.runner_classpath,
            work_dir=args.work_dir,
            keep_files=args.keep_files,
            javac=args.javac,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
