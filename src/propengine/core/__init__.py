"""Core utilities: seeded randomness, canonical serialization, settings, logging."""

from propengine.core.canonical import canonical_json, input_key, to_serializable
from propengine.core.config import EngineSettings, list_presets, load_preset, load_settings
from propengine.core.logging import configure_logging, get_logger, run_context
from propengine.core.random import SeededRandom

__all__ = [
    "EngineSettings",
    "SeededRandom",
    "canonical_json",
    "configure_logging",
    "get_logger",
    "input_key",
    "list_presets",
    "load_preset",
    "load_settings",
    "run_context",
    "to_serializable",
]
