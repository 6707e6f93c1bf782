"""Abstract base class for execution modes."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel

from vm_test_runner.command import Command
from vm_test_runner.environment import Environment
from vm_test_runner.models.classpath import Classpath
from vm_test_runner.models.result import TestRun

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class PreparedRunner:
    """Test runner support code, compiled once before any test.

    Attributes:
        sources: Runner source files that were compiled
        classpath: Classpath the runner was compiled against
        classes_dir: Directory holding the compiled runner classes

    """

    sources: frozenset[Path]
    classpath: Classpath
    classes_dir: Path


class ExecutionMode(ABC):
    """How compiled tests are installed and run on a target VM.

    The harness drives the pipeline; a mode only supplies the steps that
    differ between targets.
    """

    async def post_compile_test_runner(
        self, runner: PreparedRunner, environment: Environment
    ) -> None:
        """Perform mode-specific setup once the test runner is compiled."""
        return None

    @abstractmethod
    async def post_compile_test(
        self, test_run: TestRun, environment: Environment
    ) -> Classpath:
        """Install a compiled test and return the classpath to run it with.

        Args:
            test_run: Test whose classes are in the environment's classes dir
            environment: Environment the test was compiled in

        Returns:
            Classpath holding the installed test (directory or archive)

        Raises:
            CommandFailedError: If an install step fails
            OSError: If the installed files cannot be written

        """

    def extra_properties(self, test_run: TestRun) -> Mapping[str, str]:
        """Properties added to the generated record for ``test_run``."""
        return {}

    @abstractmethod
    def build_commands(
        self,
        test_run: TestRun,
        runner: PreparedRunner,
        environment: Environment,
    ) -> Sequence[Command]:
        """Return the commands executing ``test_run``, in order.

        Only the output of the last command is classified.
        """


@dataclass(frozen=True, kw_only=True)
class ModeManifest(Generic[ConfigT]):
    """Entry-point object tying a mode's configuration to its factory.

    Attributes:
        config_cls: Pydantic model validating the mode's JSON configuration
        mode_factory: Async context manager yielding a ready mode for a config

    """

    config_cls: type[ConfigT]
    mode_factory: Callable[[ConfigT], AbstractAsyncContextManager[ExecutionMode]]
