"""Find test sources and describe them as test runs."""

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from vm_test_runner.models.result import TestRun

log = logging.getLogger(__name__)

PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)


def find_tests(paths: Iterable[Path]) -> Sequence[TestRun]:
    """Create a test run for each test source under ``paths``.

    Directories are searched recursively for ``.java`` files. Files are taken
    as given, whatever their extension.
    """
    test_runs: list[TestRun] = []
    for path in paths:
        if path.is_dir():
            sources = sorted(path.rglob("*.java"))
            log.debug("Found %d test source(s) in %s", len(sources), path)
        else:
            sources = [path]
        test_runs.extend(create_test_run(source) for source in sources)
    return test_runs


def create_test_run(source: Path) -> TestRun:
    """Describe the test declared in ``source``."""
    package = read_package(source)
    class_name = source.stem
    qualified_name = f"{package}.{class_name}" if package else class_name

    return TestRun(
        qualified_name=qualified_name,
        test_class=class_name,
        test_java=source.absolute(),
        test_directory=package_root(source.absolute(), package),
    )


def read_package(source: Path) -> str | None:
    """Return the package declared in a Java source file, if any."""
    if source.suffix != ".java":
        return None
    try:
        text = source.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.warning("Cannot read %s: %s", source, e)
        return None

    match = PACKAGE_PATTERN.search(text)
    return match.group(1) if match else None


def package_root(source: Path, package: str | None) -> Path:
    """Return the source root containing ``source``'s package directories.

    Falls back to the source's own directory when the file does not sit in
    a directory tree matching its package.
    """
    directory = source.parent
    if not package:
        return directory

    parts = package.split(".")
    if directory.parts[-len(parts) :] != tuple(parts):
        return directory
    return directory.parents[len(parts) - 1]
