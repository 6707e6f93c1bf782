"""Harness-wide configuration."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from vm_test_runner.models.classpath import Classpath


class HarnessConfig(BaseModel):
    """Settings fixed for the lifetime of a harness."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sdk_jar: Path = Field(..., description="Boot classpath for every compile")
    runner_source_root: Path = Field(
        ..., description="Source path used when compiling the test runner"
    )
    library_classpath: Sequence[Path] = Field(
        default_factory=tuple,
        description="Archives merged into the classpath of every test compile",
    )
    timeout_seconds: PositiveInt = Field(
        default=60, description="Wall-clock limit applied to each test's commands"
    )
    fail_fast: bool = Field(
        default=False,
        description="Fail a test as soon as any non-last command exits non-zero",
    )

    @property
    def library(self) -> Classpath:
        """Library classpath as a Classpath."""
        return Classpath.of(*self.library_classpath)
