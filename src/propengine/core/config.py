"""Engine settings schema and loading.

Uses Pydantic for validation with frozen (immutable) models. Settings supply
the DEFAULT limits for every PropertyTestBuilder created by a runner; a test
can still override any of them with the builder's with_* methods.

Configuration precedence (highest to lowest):
1. overrides - Direct keyword overrides from the caller
2. environment - PROPENGINE_<FIELD> variables (e.g. PROPENGINE_SEED), via Dynaconf
3. config_file - User's YAML configuration file
4. preset - Named preset (PROPENGINE_PRESET or a `preset:` key in the config
   file selects one if none is given)
5. defaults - Built-in Pydantic defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "PROPENGINE"

# PROPENGINE_PRESET picks the preset; it is not itself a setting
_PRESET_KEY = "preset"


class EngineSettings(BaseModel):
    """Default limits for property test runs."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_tests: int = Field(
        default=100,
        ge=0,
        description="Generation cycles per run",
    )
    max_shrinks: int = Field(
        default=100,
        ge=0,
        description="Probe budget for shrinking a single failure",
    )
    timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Per-execution timeout for the property function",
    )
    min_size: int = Field(
        default=1,
        ge=0,
        description="Size hint used for the first generated case",
    )
    max_size: int = Field(
        default=200,
        ge=0,
        description="Size hint reached by the last generated case",
    )
    seed: int | None = Field(
        default=None,
        description="Fixed seed for every run (None derives one from the clock)",
    )
    preset_name: str | None = Field(
        default=None,
        description="Preset name used to build these settings (if any)",
    )

    @model_validator(mode="after")
    def validate_size_range(self) -> EngineSettings:
        """Ensure min_size <= max_size."""
        if self.min_size > self.max_size:
            raise ValueError(f"min_size ({self.min_size}) must be <= max_size ({self.max_size})")
        return self


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Returns:
        Merged configuration dict (new dict, does not mutate inputs).
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _get_presets_dir() -> Path:
    """Get the presets directory path."""
    return Path(__file__).parent / "presets"


def list_presets(presets_dir: Path | None = None) -> list[str]:
    """List available preset names (without .yaml extension), sorted."""
    directory = presets_dir if presets_dir is not None else _get_presets_dir()
    if not directory.exists():
        return []
    return sorted(p.stem for p in directory.glob("*.yaml"))


def _read_yaml_mapping(path: Path, label: str) -> dict[str, Any]:
    with path.open() as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{label} must be a YAML mapping, got {type(loaded).__name__}")
    return loaded


def load_preset(preset_name: str, presets_dir: Path | None = None) -> dict[str, Any]:
    """Load a preset configuration by name.

    Raises:
        FileNotFoundError: If preset does not exist.
        yaml.YAMLError: If preset YAML is malformed.
        ValueError: If preset is not a YAML mapping.
    """
    directory = presets_dir if presets_dir is not None else _get_presets_dir()
    preset_path = directory / f"{preset_name}.yaml"

    if not preset_path.exists():
        available = list_presets(directory)
        raise FileNotFoundError(f"Preset '{preset_name}' not found. Available presets: {available}")

    return _read_yaml_mapping(preset_path, f"Preset '{preset_name}'")


def _file_and_environment_layers(config_file: Path | None) -> dict[str, Any]:
    """Config file plus PROPENGINE_* variables, merged by Dynaconf (environment wins).

    Keeps EngineSettings fields, the preset selector, and every key the config
    file names (so a misspelt key in the file still fails validation). Other
    PROPENGINE_* variables and Dynaconf's own bookkeeping are dropped.
    """
    from dynaconf import Dynaconf

    settings_files: list[str] = []
    file_keys: set[str] = set()
    if config_file is not None:
        # Explicit check for file existence (Dynaconf silently accepts missing files)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        file_keys = {str(key).lower() for key in _read_yaml_mapping(config_file, f"Config file {config_file}")}
        settings_files.append(str(config_file))

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENV_PREFIX,
        settings_files=settings_files,
        environments=False,  # No [default]/[production] sections
        load_dotenv=False,  # Don't auto-load .env
        merge_enabled=True,
    )

    known_keys = set(EngineSettings.model_fields) | {_PRESET_KEY} | file_keys
    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items()}
    return {k: v for k, v in raw_config.items() if k in known_keys}


def load_settings(
    *,
    preset: str | None = None,
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
    presets_dir: Path | None = None,
) -> EngineSettings:
    """Load engine settings with precedence handling.

    Args:
        preset: Optional preset name to use as base.
        config_file: Optional path to YAML config file.
        overrides: Optional dict of explicit overrides.
        presets_dir: Alternative presets directory (defaults to the bundled one).

    Returns:
        Validated EngineSettings.

    Raises:
        FileNotFoundError: If preset or config_file not found.
        yaml.YAMLError: If YAML is malformed.
        ValueError: If the preset or config file is not a YAML mapping.
        pydantic.ValidationError: If final settings fail validation, e.g. an
            unknown key in the config file or a non-integer PROPENGINE_SEED.
    """
    layered = _file_and_environment_layers(config_file)
    selected_preset = layered.pop(_PRESET_KEY, None)

    if preset is None and selected_preset:
        preset = str(selected_preset)

    config_dict: dict[str, Any] = {}
    if preset is not None:
        config_dict = load_preset(preset, presets_dir)

    config_dict = deep_merge(config_dict, layered)

    if overrides is not None:
        config_dict = deep_merge(config_dict, overrides)

    config_dict["preset_name"] = preset

    return EngineSettings(**config_dict)
