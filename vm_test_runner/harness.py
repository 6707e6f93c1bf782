"""Compile, install, run and classify tests through an execution mode."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from vm_test_runner import properties
from vm_test_runner.command import CommandFailedError
from vm_test_runner.compiler import Compiler, Javac
from vm_test_runner.environment import Environment
from vm_test_runner.models.classpath import Classpath
from vm_test_runner.models.config import HarnessConfig
from vm_test_runner.models.result import Result, TestRun
from vm_test_runner.modes.base import ExecutionMode, PreparedRunner
from vm_test_runner.output_reader import OutputReader

log = logging.getLogger(__name__)

JAVA_TEST_PATTERN = re.compile(r"/\w+\.java$")


class HarnessPreparationError(Exception):
    """Raised when the test runner cannot be prepared. No test can run."""


@dataclass(frozen=True, kw_only=True)
class TestHarness:
    """Runs tests one at a time through a single execution mode."""

    __test__ = False

    mode: ExecutionMode
    environment: Environment
    config: HarnessConfig
    compiler: Compiler = field(default_factory=Javac)
    output_reader: OutputReader = field(default_factory=OutputReader)

    def _ensure_open(self) -> None:
        if self.output_reader.is_closed:
            raise RuntimeError("Test harness has been shut down")

    async def prepare(
        self, runner_sources: Iterable[Path], runner_classpath: Iterable[Path]
    ) -> PreparedRunner:
        """Set up the environment and compile the test runner.

        Args:
            runner_sources: Source files of the test runner
            runner_classpath: Classpath the test runner depends on

        Returns:
            Snapshot of the compiled runner, passed to every later call

        Raises:
            HarnessPreparationError: If the test runner fails to compile

        """
        self._ensure_open()
        runner = PreparedRunner(
            sources=frozenset(runner_sources),
            classpath=Classpath(tuple(runner_classpath)),
            classes_dir=self.environment.runner_classes_dir(),
        )

        log.debug("Building test runner into %s", runner.classes_dir)
        try:
            self.environment.prepare()
            runner.classes_dir.mkdir(parents=True, exist_ok=True)
            await self.compiler.compile(
                sorted(runner.sources),
                boot_classpath=Classpath.of(self.config.sdk_jar),
                classpath=runner.classpath,
                sourcepath=self.config.runner_source_root,
                destination=runner.classes_dir,
            )
            await self.mode.post_compile_test_runner(runner, self.environment)
        except CommandFailedError as e:
            raise HarnessPreparationError(
                "Failed to build test runner:\n" + "\n".join(e.output_lines)
            ) from e
        except OSError as e:
            raise HarnessPreparationError(f"Failed to build test runner: {e}") from e

        return runner

    async def build_and_install(
        self, test_run: TestRun, runner: PreparedRunner
    ) -> None:
        """Compile the test and make it ready for execution.

        If the test cannot be compiled it is classified instead; no error is
        raised to the caller.
        """
        self._ensure_open()
        log.debug("Building %s", test_run.qualified_name)

        if not JAVA_TEST_PATTERN.search(test_run.test_java.as_posix()):
            test_run.set_result(Result.UNSUPPORTED, [])
            return

        try:
            classpath = await self._compile_test(test_run, runner)
            self.environment.prepare_user_dir(test_run)
        except CommandFailedError as e:
            test_run.set_result(Result.COMPILE_FAILED, e.output_lines)
            return
        except Exception as e:
            log.debug("Installing %s failed", test_run.qualified_name, exc_info=True)
            test_run.set_error(e)
            return

        test_run.set_classpath(classpath)

    async def _compile_test(
        self, test_run: TestRun, runner: PreparedRunner
    ) -> Classpath:
        classes_dir = self.environment.test_classes_dir(test_run)
        classes_dir.mkdir(parents=True, exist_ok=True)

        record = {
            properties.TEST_CLASS: test_run.test_class,
            properties.QUALIFIED_NAME: test_run.qualified_name,
            **self.mode.extra_properties(test_run),
        }
        properties.write_properties(
            classes_dir, record, comment=f"generated by {__package__}"
        )

        await self.compiler.compile(
            [test_run.test_java],
            boot_classpath=Classpath.of(self.config.sdk_jar),
            classpath=self.config.library + runner.classpath,
            sourcepath=test_run.test_directory or test_run.test_java.parent,
            destination=classes_dir,
        )
        return await self.mode.post_compile_test(test_run, self.environment)

    async def run_test(self, test_run: TestRun, runner: PreparedRunner) -> None:
        """Execute an installed test and record its result.

        Raises:
            ValueError: If the test has not been installed or already has a result

        """
        if not test_run.is_runnable:
            raise ValueError(f"{test_run.qualified_name} is not runnable")
        self._ensure_open()

        timeout = self.config.timeout_seconds
        commands = self.mode.build_commands(test_run, runner, self.environment)

        output: list[str] = []
        for index, command in enumerate(commands):
            is_last = index == len(commands) - 1
            try:
                await command.start()
                output = await self.output_reader.read(command, timeout)
            except TimeoutError:
                test_run.set_result(
                    Result.EXEC_TIMEOUT, [f"Exceeded timeout! ({timeout}s)"]
                )
                return
            except Exception as e:
                test_run.set_error(e)
                return
            finally:
                await command.terminate()

            if self.config.fail_fast and not is_last and command.returncode != 0:
                log.debug("%r exited with %s", command, command.returncode)
                test_run.set_result(Result.EXEC_FAILED, output)
                return

        if not output:
            test_run.set_result(Result.ERROR, ["No output returned!"])
            return

        if output[-1] == properties.RESULT_SUCCESS:
            test_run.set_result(Result.SUCCESS, output[:-1])
        else:
            test_run.set_result(Result.EXEC_FAILED, output)

    async def cleanup(self, test_run: TestRun) -> None:
        """Release files and resources used by ``test_run``."""
        self.environment.cleanup(test_run)

    async def shutdown(self) -> None:
        """Release everything once all tests are done."""
        if self.output_reader.is_closed:
            return
        self.output_reader.close()
        self.environment.shutdown()
