"""Host JVM execution mode."""

from vm_test_runner.modes.jvm.config import JavaVmConfig
from vm_test_runner.modes.jvm.manifest import jvm_manifest
from vm_test_runner.modes.jvm.mode import JavaVmMode

__all__ = ["JavaVmConfig", "JavaVmMode", "jvm_manifest"]
