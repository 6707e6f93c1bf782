"""Discovery of execution modes registered as entry points."""

from importlib.metadata import entry_points
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from vm_test_runner.modes.base import ModeManifest

ENTRY_POINT_GROUP = "vm_test_runner.modes"

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class ModeNotFoundError(LookupError):
    """Raised when no usable mode is registered under a key."""


class ModeConfigError(ValueError):
    """Raised when a mode configuration does not validate."""


def available_modes() -> list[str]:
    """Sorted keys of every registered mode."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_mode_manifest(key: str) -> ModeManifest[Any]:
    """Load the manifest registered under ``key``.

    Raises:
        ModeNotFoundError: If the key is unknown or does not name a manifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ModeNotFoundError(
            f"Unknown mode '{key}'. Available modes: {', '.join(available_modes())}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, ModeManifest):
        raise ModeNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not a mode manifest"
        )
    return manifest


def load_mode_config(
    manifest: ModeManifest[ConfigT], config_json: str
) -> ConfigT:
    """Validate a JSON mode configuration against the manifest's model.

    Raises:
        ModeConfigError: If the JSON is malformed or has unknown or invalid fields

    """
    try:
        return manifest.config_cls.model_validate_json(config_json)
    except ValidationError as e:
        raise ModeConfigError(
            f"Invalid configuration for {manifest.config_cls.__name__}: {e}"
        ) from e
