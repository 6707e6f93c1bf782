"""Host Dalvik VM mode manifest."""

from vm_test_runner.modes.base import ModeManifest
from vm_test_runner.modes.dalvikvm.config import DalvikVmConfig
from vm_test_runner.modes.dalvikvm.mode import DalvikVmMode

dalvikvm_manifest = ModeManifest(
    config_cls=DalvikVmConfig,
    mode_factory=DalvikVmMode.from_config,
)
