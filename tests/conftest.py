# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Engine fixtures:
- runner: PropertyTestRunner with small limits and a fixed seed, so unit
  tests are fast and reproducible
- fake_clock: Manually advanced timer for sync-timeout tests
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from propengine import EngineSettings, PropertyTestRunner
from tests.helpers.engine_fakes import FakeClock

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fast_settings() -> EngineSettings:
    """Small limits with a fixed seed: fast and reproducible."""
    return EngineSettings(max_tests=50, max_shrinks=50, timeout_ms=1000, min_size=1, max_size=20, seed=12345)


@pytest.fixture
def runner(fast_settings: EngineSettings) -> PropertyTestRunner:
    return PropertyTestRunner(fast_settings)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
