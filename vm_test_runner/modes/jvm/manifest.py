"""Host JVM mode manifest."""

from vm_test_runner.modes.base import ModeManifest
from vm_test_runner.modes.jvm.config import JavaVmConfig
from vm_test_runner.modes.jvm.mode import JavaVmMode

jvm_manifest = ModeManifest(
    config_cls=JavaVmConfig,
    mode_factory=JavaVmMode.from_config,
)
