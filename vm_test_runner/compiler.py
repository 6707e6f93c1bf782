"""Adapter around the Java compiler."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from vm_test_runner.command import Command
from vm_test_runner.models.classpath import Classpath

log = logging.getLogger(__name__)


class Compiler(Protocol):
    """Compiles Java sources into a destination directory."""

    async def compile(
        self,
        sources: Iterable[Path],
        *,
        boot_classpath: Classpath,
        classpath: Classpath,
        sourcepath: Path,
        destination: Path,
    ) -> None:
        """Compile ``sources``.

        Raises:
            CommandFailedError: If the compiler reports a failure

        """
        ...


@dataclass(frozen=True, kw_only=True)
class Javac:
    """Compiler backed by a ``javac`` executable."""

    executable: str = "javac"
    encoding: str = "UTF-8"
    debug: bool = True

    def build_args(
        self,
        sources: Iterable[Path],
        *,
        boot_classpath: Classpath,
        classpath: Classpath,
        sourcepath: Path,
        destination: Path,
    ) -> list[str]:
        args = [self.executable, "-encoding", self.encoding]
        if self.debug:
            args.append("-g")
        if boot_classpath:
            args.extend(["-bootclasspath", str(boot_classpath)])
        if classpath:
            args.extend(["-classpath", str(classpath)])
        args.extend(["-sourcepath", str(sourcepath), "-d", str(destination)])
        args.extend(str(source) for source in sources)
        return args

    async def compile(
        self,
        sources: Iterable[Path],
        *,
        boot_classpath: Classpath,
        classpath: Classpath,
        sourcepath: Path,
        destination: Path,
    ) -> None:
        """Run javac, raising CommandFailedError with its diagnostics on failure."""
        args = self.build_args(
            sources,
            boot_classpath=boot_classpath,
            classpath=classpath,
            sourcepath=sourcepath,
            destination=destination,
        )
        log.debug("Compiling into %s", destination)
        await Command(args).execute()
