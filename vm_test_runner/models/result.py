"""Models for a single test run and its outcome."""

import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from vm_test_runner.models.classpath import Classpath


class Result(StrEnum):
    """Terminal outcome of a test run."""

    SUCCESS = "success"
    COMPILE_FAILED = "compile_failed"
    EXEC_FAILED = "exec_failed"
    EXEC_TIMEOUT = "exec_timeout"
    ERROR = "error"
    UNSUPPORTED = "unsupported"


@dataclass(kw_only=True)
class TestRun:
    """Identity and mutable outcome of one test.

    The harness only assigns ``classpath`` and the outcome; everything else
    belongs to the caller.
    """

    __test__ = False

    qualified_name: str
    test_class: str
    test_java: Path
    test_directory: Path | None = None
    classpath: Classpath | None = None
    result: Result | None = None
    output: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.test_directory is None:
            self.test_directory = self.test_java.parent

    @property
    def is_runnable(self) -> bool:
        """Whether the test has been installed and not yet classified."""
        return self.classpath is not None and self.result is None

    def set_classpath(self, classpath: Classpath) -> None:
        self.classpath = classpath

    def set_result(self, result: Result, output: Sequence[str]) -> None:
        """Record the terminal outcome. May only be called once."""
        if self.result is not None:
            raise RuntimeError(
                f"Result for {self.qualified_name} already set to {self.result}"
            )
        self.result = result
        self.output = list(output)

    def set_error(self, error: BaseException) -> None:
        """Record an ERROR outcome describing an unexpected fault."""
        lines = [f"{type(error).__name__}: {error}"]
        for chunk in traceback.format_exception(error):
            lines.extend(chunk.rstrip("\n").splitlines())
        self.set_result(Result.ERROR, lines)
