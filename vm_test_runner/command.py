"""Handle to one external process."""

import asyncio
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from pathlib import Path

log = logging.getLogger(__name__)

TERMINATE_GRACE_SECONDS = 5.0


class CommandFailedError(Exception):
    """Raised when a command exits with a non-zero status."""

    def __init__(
        self, args: Sequence[str], returncode: int, output_lines: Sequence[str]
    ) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {list(args)}")
        self.command_args = list(args)
        self.returncode = returncode
        self.output_lines = list(output_lines)


class Command:
    """An external process: started once, read once, terminated at most once.

    Standard error is merged into standard output so that diagnostics keep
    their position relative to regular output.
    """

    def __init__(
        self,
        args: Sequence[str | os.PathLike[str]],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.args = [str(arg) for arg in args]
        self.cwd = cwd
        self.env = dict(env) if env is not None else None
        self._process: asyncio.subprocess.Process | None = None
        self._terminated = False

    def __repr__(self) -> str:
        return f"Command({self.args!r})"

    @property
    def is_started(self) -> bool:
        return self._process is not None

    @property
    def is_terminated(self) -> bool:
        return self._terminated

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    async def start(self) -> None:
        """Spawn the process in its own session so it can be killed as a group."""
        if self._process is not None:
            raise RuntimeError(f"{self!r} already started")

        log.debug("Starting %s (cwd=%s)", self.args, self.cwd)
        env = {**os.environ, **self.env} if self.env is not None else None
        self._process = await asyncio.create_subprocess_exec(
            *self.args,
            cwd=self.cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            start_new_session=True,
        )

    async def gather_output(self) -> list[str]:
        """Read every output line until the process exits.

        Lines of any length are accepted. Each line loses exactly one
        ``\\n`` or ``\\r\\n`` terminator and nothing else.
        """
        if self._process is None or self._process.stdout is None:
            raise RuntimeError(f"{self!r} not started")

        data = await self._process.stdout.read()
        await self._process.wait()
        return split_lines(data)

    async def terminate(self) -> None:
        """Kill the process and everything it spawned. Never raises.

        Waiting for the killed process is bounded by
        ``TERMINATE_GRACE_SECONDS``; a process that outlives it is left
        behind.
        """
        if self._process is None or self._terminated:
            return
        self._terminated = True

        try:
            os.killpg(self._process.pid, signal.SIGKILL)
        except ProcessLookupError:
            log.debug("Process group for %s already gone", self.args)
        except PermissionError:
            log.debug("Cannot signal process group for %s", self.args)
            if self._process.returncode is None:
                self._process.kill()

        try:
            await asyncio.wait_for(self._process.wait(), TERMINATE_GRACE_SECONDS)
        except TimeoutError:
            log.debug(
                "Process for %s did not exit within %ss after kill",
                self.args,
                TERMINATE_GRACE_SECONDS,
            )

    async def execute(self) -> list[str]:
        """Run to completion and return output lines.

        Raises:
            CommandFailedError: If the process exits with a non-zero status

        """
        await self.start()
        try:
            output = await self.gather_output()
        finally:
            await self.terminate()

        if self.returncode != 0:
            raise CommandFailedError(self.args, self.returncode or -1, output)
        return output


def split_lines(data: bytes) -> list[str]:
    """Split raw process output into lines, removing one terminator per line."""
    *terminated, tail = data.split(b"\n")
    lines = [line.removesuffix(b"\r") for line in terminated]
    if tail:
        lines.append(tail)
    return [line.decode(errors="replace") for line in lines]
