"""Configuration for the host Dalvik VM mode."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class DalvikVmConfig(BaseModel):
    """Configuration for running dexed tests on a host Dalvik VM."""

    model_config = ConfigDict(extra="forbid")

    dalvikvm: str = "dalvikvm"
    dx: str = "dx"
    runner_main_class: str = "vmtest.TestRunner"
    vm_args: Sequence[str] = ()
