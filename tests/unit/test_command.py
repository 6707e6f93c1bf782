"""Tests for Command."""

import sys
import time
from pathlib import Path

import pytest

from vm_test_runner.command import Command, CommandFailedError, split_lines
from vm_test_runner.testing.fakes import printing_command, python_command


async def test_gathers_output_lines_in_order() -> None:
    """Collects every line of output without line terminators."""
    command = printing_command("hello", "world")

    await command.start()
    output = await command.gather_output()
    await command.terminate()

    assert output == ["hello", "world"]
    assert command.returncode == 0


async def test_merges_stderr_into_output() -> None:
    """Standard error is part of the gathered output."""
    command = python_command("import sys; sys.stderr.write('oops\\n')")

    await command.start()
    output = await command.gather_output()

    assert output == ["oops"]


async def test_runs_in_working_directory(tmp_path: Path) -> None:
    """Processes start in the requested working directory."""
    command = python_command("import os; print(os.getcwd())", cwd=tmp_path)

    output = await command.execute()

    assert Path(output[0]).resolve() == tmp_path.resolve()


async def test_passes_extra_environment() -> None:
    """Environment overrides are merged into the inherited environment."""
    command = Command(
        [sys.executable, "-c", "import os; print(os.environ['VM_TEST_VALUE'])"],
        env={"VM_TEST_VALUE": "42"},
    )

    assert await command.execute() == ["42"]


async def test_execute_raises_on_failure() -> None:
    """Non-zero exit raises with the captured output."""
    command = printing_command("error: cannot find symbol", exit_code=3)

    with pytest.raises(CommandFailedError) as exc_info:
        await command.execute()

    assert exc_info.value.returncode == 3
    assert exc_info.value.output_lines == ["error: cannot find symbol"]
    assert command.is_terminated


async def test_gather_before_start_raises() -> None:
    """Output cannot be read from a process that was never started."""
    with pytest.raises(RuntimeError, match="not started"):
        await printing_command("x").gather_output()


async def test_start_twice_raises() -> None:
    """A command starts at most once."""
    command = printing_command("x")
    await command.start()

    with pytest.raises(RuntimeError, match="already started"):
        await command.start()

    await command.terminate()


async def test_terminate_kills_running_process() -> None:
    """Terminating a running process kills it."""
    command = python_command("import time; time.sleep(30)")
    await command.start()

    await command.terminate()

    assert command.is_terminated
    assert command.returncode is not None
    assert command.returncode != 0


async def test_terminate_is_safe_when_not_started_or_repeated() -> None:
    """Terminate never raises, whatever the state."""
    command = printing_command("x")
    await command.terminate()
    assert not command.is_started

    await command.start()
    await command.gather_output()
    await command.terminate()
    await command.terminate()

    assert command.is_terminated


async def test_gathers_lines_longer_than_stream_buffer() -> None:
    """A single very long line is read whole."""
    command = python_command("print('x' * 100000); print('done')")

    output = await command.execute()

    assert output == ["x" * 100000, "done"]


async def test_strips_exactly_one_line_terminator() -> None:
    """Only one ``\\n`` or ``\\r\\n`` is removed from each line."""
    command = python_command(
        "import sys; sys.stdout.buffer.write(b'crlf\\r\\nlone-cr\\r\\r\\nlast')"
    )

    output = await command.execute()

    assert output == ["crlf", "lone-cr\r", "last"]


async def test_terminate_kills_spawned_children() -> None:
    """Children holding the output pipe do not delay termination."""
    command = Command(["sh", "-c", "sleep 30 & wait"])
    await command.start()

    started = time.monotonic()
    await command.terminate()

    assert time.monotonic() - started < 3
    assert command.returncode is not None


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"", []),
        (b"\n", [""]),
        (b"a\nb", ["a", "b"]),
        (b"a\r\n\r\n", ["a", ""]),
        (b"All tests passed!\r\r\n", ["All tests passed!\r"]),
    ],
)
def test_split_lines(data: bytes, expected: list[str]) -> None:
    """Splitting keeps empty lines and stray carriage returns."""
    assert split_lines(data) == expected
