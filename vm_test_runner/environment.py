"""Working areas in which tests are compiled and executed."""

import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from vm_test_runner.models.result import TestRun

log = logging.getLogger(__name__)


class Environment(ABC):
    """Owns the directories used by the harness and the tests it runs."""

    @abstractmethod
    def prepare(self) -> None:
        """Set up directories shared by every test."""

    @abstractmethod
    def runner_classes_dir(self) -> Path:
        """Directory receiving the compiled test runner."""

    @abstractmethod
    def test_dir(self, test_run: TestRun) -> Path:
        """Per-test scratch directory."""

    def test_classes_dir(self, test_run: TestRun) -> Path:
        """Directory receiving the test's compiled classes."""
        return self.test_dir(test_run) / "classes"

    def test_user_dir(self, test_run: TestRun) -> Path:
        """Working directory of the test's process."""
        return self.test_dir(test_run) / "user.dir"

    @abstractmethod
    def prepare_user_dir(self, test_run: TestRun) -> None:
        """Create a fresh working directory for the test's process."""

    @abstractmethod
    def cleanup(self, test_run: TestRun) -> None:
        """Remove per-test state. Must not raise."""

    @abstractmethod
    def shutdown(self) -> None:
        """Remove state shared by all tests. Must not raise."""


@dataclass(frozen=True, kw_only=True)
class HostEnvironment(Environment):
    """Environment rooted in a directory of the local filesystem."""

    base_dir: Path
    keep_files: bool = False

    def prepare(self) -> None:
        self.runner_classes_dir().mkdir(parents=True, exist_ok=True)

    def runner_classes_dir(self) -> Path:
        return self.base_dir / "testrunner"

    def test_dir(self, test_run: TestRun) -> Path:
        return self.base_dir / test_run.qualified_name

    def prepare_user_dir(self, test_run: TestRun) -> None:
        user_dir = self.test_user_dir(test_run)
        shutil.rmtree(user_dir, ignore_errors=True)
        user_dir.mkdir(parents=True)

    def cleanup(self, test_run: TestRun) -> None:
        if self.keep_files:
            log.debug("Keeping files for %s", test_run.qualified_name)
            return
        shutil.rmtree(self.test_dir(test_run), ignore_errors=True)

    def shutdown(self) -> None:
        if self.keep_files:
            log.info("Test files kept in %s", self.base_dir)
            return
        shutil.rmtree(self.base_dir, ignore_errors=True)
