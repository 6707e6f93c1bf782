"""Configuration for the host JVM mode."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class JavaVmConfig(BaseModel):
    """Configuration for running tests on a host JVM."""

    model_config = ConfigDict(extra="forbid")

    java: str = "java"
    runner_main_class: str = "vmtest.TestRunner"
    vm_args: Sequence[str] = ()
