"""Host JVM mode implementation."""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from vm_test_runner.command import Command
from vm_test_runner.environment import Environment
from vm_test_runner.models.classpath import Classpath
from vm_test_runner.models.result import TestRun
from vm_test_runner.modes.base import ExecutionMode, PreparedRunner
from vm_test_runner.modes.jvm.config import JavaVmConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class JavaVmMode(ExecutionMode):
    """Runs compiled test classes in place on the host's JVM."""

    config: JavaVmConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: JavaVmConfig
    ) -> AsyncGenerator["JavaVmMode", None]:
        """Create mode from its configuration."""
        yield cls(config=config)

    async def post_compile_test(
        self, test_run: TestRun, environment: Environment
    ) -> Classpath:
        """The classes directory is directly runnable."""
        return Classpath.of(environment.test_classes_dir(test_run))

    def build_commands(
        self,
        test_run: TestRun,
        runner: PreparedRunner,
        environment: Environment,
    ) -> Sequence[Command]:
        classpath = (test_run.classpath or Classpath()) + Classpath.of(
            runner.classes_dir
        )
        classpath += runner.classpath
        log.debug("Running %s with classpath %s", test_run.qualified_name, classpath)

        return [
            Command(
                [
                    self.config.java,
                    *self.config.vm_args,
                    "-classpath",
                    str(classpath),
                    self.config.runner_main_class,
                ],
                cwd=environment.test_user_dir(test_run),
            )
        ]
