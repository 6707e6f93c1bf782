"""Tests for the test driver."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from vm_test_runner import properties
from vm_test_runner.driver import TestDriver
from vm_test_runner.environment import HostEnvironment
from vm_test_runner.harness import HarnessPreparationError, TestHarness
from vm_test_runner.models.config import HarnessConfig
from vm_test_runner.models.result import Result
from vm_test_runner.testing.factories import TestRunFactory
from vm_test_runner.testing.fakes import (
    RecordingCompiler,
    ScriptedMode,
    printing_command,
)


@pytest.fixture
def harness(tmp_path: Path) -> TestHarness:
    """Harness whose tests all pass."""
    return TestHarness(
        mode=ScriptedMode(
            commands=lambda: [printing_command("ok", properties.RESULT_SUCCESS)]
        ),
        environment=HostEnvironment(base_dir=tmp_path / "work"),
        config=HarnessConfig(
            sdk_jar=tmp_path / "sdk.jar", runner_source_root=tmp_path / "runner"
        ),
        compiler=RecordingCompiler(),
    )


async def test_returns_empty_when_no_tests(tmp_path: Path) -> None:
    """Nothing is prepared when there are no tests."""
    harness_mock = Mock(spec=TestHarness)
    driver = TestDriver(harness=harness_mock)

    results = await driver.run_tests([], [], [])

    assert results == []
    harness_mock.prepare.assert_not_called()


async def test_runs_every_test(harness: TestHarness, tmp_path: Path) -> None:
    """Each test is built, run and classified, then the harness shuts down."""
    test_runs = [
        TestRunFactory.build(
            qualified_name="a.ATest", test_java=tmp_path / "a" / "ATest.java"
        ),
        TestRunFactory.build(qualified_name="Notes", test_java=tmp_path / "Notes.txt"),
    ]
    driver = TestDriver(harness=harness)

    results = await driver.run_tests(test_runs, [], [])

    assert [r.result for r in results] == [Result.SUCCESS, Result.UNSUPPORTED]
    assert results[0].output == ["ok"]
    assert harness.output_reader.is_closed
    assert not (tmp_path / "work").exists()


async def test_shuts_down_when_preparation_fails(tmp_path: Path) -> None:
    """Preparation failures propagate after the harness is shut down."""
    harness_mock = Mock(spec=TestHarness)
    harness_mock.prepare = AsyncMock(side_effect=HarnessPreparationError("boom"))
    harness_mock.shutdown = AsyncMock()
    driver = TestDriver(harness=harness_mock)

    with pytest.raises(HarnessPreparationError):
        await driver.run_tests([TestRunFactory.build()], [], [])

    harness_mock.build_and_install.assert_not_called()
    harness_mock.shutdown.assert_awaited_once()


async def test_cleans_up_each_test(tmp_path: Path) -> None:
    """Cleanup runs for every test, whatever its result."""
    harness_mock = Mock(spec=TestHarness)
    harness_mock.prepare = AsyncMock(return_value=Mock())
    harness_mock.build_and_install = AsyncMock()
    harness_mock.cleanup = AsyncMock()
    harness_mock.shutdown = AsyncMock()
    test_runs = [TestRunFactory.build(), TestRunFactory.build()]
    driver = TestDriver(harness=harness_mock)

    await driver.run_tests(test_runs, [], [])

    assert harness_mock.cleanup.await_count == 2
    harness_mock.run_test.assert_not_called()
