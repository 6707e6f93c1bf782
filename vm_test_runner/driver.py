"""Test driver running a suite through a single harness."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from vm_test_runner.harness import TestHarness
from vm_test_runner.models.result import TestRun
from vm_test_runner.modes.base import PreparedRunner

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestDriver:
    """Prepares the harness once, then runs each test to completion."""

    __test__ = False

    harness: TestHarness

    async def run_tests(
        self,
        test_runs: Sequence[TestRun],
        runner_sources: Iterable[Path],
        runner_classpath: Iterable[Path],
    ) -> Sequence[TestRun]:
        """Build, run and clean up every test, in order.

        Args:
            test_runs: Tests to run; their outcome is recorded on them
            runner_sources: Source files of the test runner
            runner_classpath: Classpath the test runner depends on

        Returns:
            The given test runs, each with a result

        Raises:
            HarnessPreparationError: If the test runner cannot be built

        """
        if not test_runs:
            log.info("No tests to run")
            return []

        try:
            runner = await self.harness.prepare(runner_sources, runner_classpath)
            log.info("Running %d test(s)...", len(test_runs))

            for test_run in test_runs:
                await self._run_test(test_run, runner)
        finally:
            await self.harness.shutdown()

        log.info("Test execution completed")
        return test_runs

    async def _run_test(self, test_run: TestRun, runner: PreparedRunner) -> None:
        try:
            await self.harness.build_and_install(test_run, runner)
            if test_run.is_runnable:
                await self.harness.run_test(test_run, runner)
        finally:
            await self.harness.cleanup(test_run)

        log.info(
            "Test completed: test=%s result=%s",
            test_run.qualified_name,
            test_run.result,
        )
        for line in test_run.output:
            log.debug("  %s", line)
