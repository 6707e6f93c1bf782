"""Host Dalvik VM execution mode."""

from vm_test_runner.modes.dalvikvm.config import DalvikVmConfig
from vm_test_runner.modes.dalvikvm.manifest import dalvikvm_manifest
from vm_test_runner.modes.dalvikvm.mode import DalvikVmMode

__all__ = ["DalvikVmConfig", "DalvikVmMode", "dalvikvm_manifest"]
