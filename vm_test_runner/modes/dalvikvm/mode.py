"""Host Dalvik VM mode implementation."""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from vm_test_runner.command import Command
from vm_test_runner.environment import Environment
from vm_test_runner.models.classpath import Classpath
from vm_test_runner.models.result import TestRun
from vm_test_runner.modes.base import ExecutionMode, PreparedRunner
from vm_test_runner.modes.dalvikvm.config import DalvikVmConfig

log = logging.getLogger(__name__)

RUNNER_JAR = "runner.jar"
TEST_JAR = "test.jar"


@dataclass(frozen=True, kw_only=True)
class DalvikVmMode(ExecutionMode):
    """Converts compiled classes to dex archives and runs them on dalvikvm."""

    config: DalvikVmConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: DalvikVmConfig
    ) -> AsyncGenerator["DalvikVmMode", None]:
        """Create mode from its configuration."""
        yield cls(config=config)

    async def dex(self, classes: Path, output: Path) -> Path:
        """Convert a directory of classes to a dex archive.

        Raises:
            CommandFailedError: If dx fails

        """
        log.debug("Dexing %s into %s", classes, output)
        await Command(
            [self.config.dx, "--dex", f"--output={output}", classes]
        ).execute()
        return output

    def runner_jar(self, runner: PreparedRunner) -> Path:
        return runner.classes_dir.parent / RUNNER_JAR

    async def post_compile_test_runner(
        self, runner: PreparedRunner, environment: Environment
    ) -> None:
        await self.dex(runner.classes_dir, self.runner_jar(runner))

    async def post_compile_test(
        self, test_run: TestRun, environment: Environment
    ) -> Classpath:
        jar = await self.dex(
            environment.test_classes_dir(test_run),
            environment.test_dir(test_run) / TEST_JAR,
        )
        return Classpath.of(jar)

    def build_commands(
        self,
        test_run: TestRun,
        runner: PreparedRunner,
        environment: Environment,
    ) -> Sequence[Command]:
        classpath = (test_run.classpath or Classpath()) + Classpath.of(
            self.runner_jar(runner)
        )

        return [
            Command(
                [
                    self.config.dalvikvm,
                    *self.config.vm_args,
                    "-classpath",
                    str(classpath),
                    self.config.runner_main_class,
                ],
                cwd=environment.test_user_dir(test_run),
            )
        ]
