"""Single-slot worker gathering process output under a deadline."""

import asyncio
import logging

from vm_test_runner.command import Command

log = logging.getLogger(__name__)


class OutputReader:
    """Gathers a command's output on its own task, bounded by a timeout.

    Only one command is read at a time. The caller owns the process and must
    terminate it once ``read`` returns or raises.
    """

    def __init__(self) -> None:
        self._slot = asyncio.Semaphore(1)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def read(self, command: Command, timeout: float) -> list[str]:
        """Return all output lines of ``command``.

        Raises:
            TimeoutError: If the output is not complete within ``timeout`` seconds
            RuntimeError: If the reader has been closed

        """
        if self._closed:
            raise RuntimeError("Output reader is closed")

        async with self._slot:
            task = asyncio.create_task(command.gather_output())
            try:
                return await asyncio.wait_for(task, timeout)
            except TimeoutError:
                log.debug("No complete output from %s after %ss", command, timeout)
                raise

    def close(self) -> None:
        """Refuse further reads."""
        self._closed = True
