# tests/property/__init__.py
"""Property-based tests for propengine.

Hypothesis checks the engine's own guarantees for ALL inputs, not just the
handful of examples a unit test pins down.

Test categories:
- test_random_properties: LCG determinism and range bounds
- test_shrinker_properties: shrink results stay valid, failing and bounded
- test_generator_properties: built-in generators respect their own is_valid()
"""
