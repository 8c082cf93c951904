# tests/unit/generators/test_primitive_generators.py
"""Tests for the built-in generators."""

from __future__ import annotations

import math

import pytest

from propengine import GeneratorProtocol, SeededRandom
from propengine.generators import (
    FunctionGenerator,
    booleans,
    constant,
    floats,
    integers,
    lists,
    one_of,
    sampled_from,
    text,
    tuples,
)


@pytest.fixture
def rng() -> SeededRandom:
    return SeededRandom(2024)


class TestProtocolConformance:
    @pytest.mark.parametrize(
        "generator",
        [
            integers(),
            floats(),
            booleans(),
            text(),
            lists(integers()),
            sampled_from([1, 2]),
            one_of(integers(), booleans()),
            constant(1),
            tuples(integers(), text()),
            FunctionGenerator(lambda rng, size: size),
        ],
    )
    def test_is_generator_protocol(self, generator) -> None:
        assert isinstance(generator, GeneratorProtocol)


class TestIntegers:
    def test_upper_bound_scales_with_size(self, rng: SeededRandom) -> None:
        gen = integers(10)
        values = [gen.generate(rng, 5) for _ in range(200)]
        assert min(values) >= 10
        assert max(values) <= 15

    def test_explicit_bounds(self, rng: SeededRandom) -> None:
        gen = integers(-3, 3)
        assert all(-3 <= gen.generate(rng, 1000) <= 3 for _ in range(100))

    def test_inverted_bounds_rejected(self) -> None:
        with pytest.raises(ValueError):
            integers(5, 1)

    def test_shrink_toward_lower_bound_by_halving(self) -> None:
        assert integers(0).shrink(100) == [0, 50, 75, 88, 94, 97, 99]

    def test_shrink_toward_nonzero_lower_bound(self) -> None:
        assert integers(10).shrink(18) == [10, 14, 16, 17]

    def test_shrink_toward_zero_when_in_range(self) -> None:
        assert integers(-100, 100).shrink(-8) == [0, -4, -6, -7]

    def test_mixed_range_targets_zero_not_lower_bound(self) -> None:
        assert integers(-50, 50).shrink(12) == [0, 6, 9, 11]
        assert integers(-5).shrink(3) == [0, 2]

    def test_shrink_toward_upper_bound_when_all_negative(self) -> None:
        assert integers(-100, -10).shrink(-14) == [-10, -12, -13]

    def test_minimal_value_has_no_candidates(self) -> None:
        assert integers(0).shrink(0) == []

    def test_validity(self) -> None:
        gen = integers(0, 10)
        assert gen.is_valid(0)
        assert gen.is_valid(10)
        assert not gen.is_valid(11)
        assert not gen.is_valid(-1)
        assert not gen.is_valid(True)
        assert not gen.is_valid(1.0)


class TestFloats:
    def test_bounds(self, rng: SeededRandom) -> None:
        gen = floats(-1.0, 1.0)
        values = [gen.generate(rng, 10) for _ in range(100)]
        assert all(-1.0 <= v < 1.0 for v in values)

    def test_shrink_candidates_are_valid(self) -> None:
        gen = floats(0.0, 100.0)
        candidates = gen.shrink(37.5)
        assert candidates[0] == 0.0
        assert 37.0 in candidates
        assert all(gen.is_valid(c) for c in candidates)

    def test_non_finite_invalid(self) -> None:
        assert not floats().is_valid(math.inf)
        assert not floats().is_valid(math.nan)


class TestBooleansAndConstants:
    def test_true_shrinks_to_false(self) -> None:
        assert booleans().shrink(True) == [False]
        assert booleans().shrink(False) == []

    def test_constant(self, rng: SeededRandom) -> None:
        gen = constant("x")
        assert gen.generate(rng, 100) == "x"
        assert gen.shrink("x") == []
        assert gen.is_valid("x")
        assert not gen.is_valid("y")


class TestText:
    def test_alphabet_and_length(self, rng: SeededRandom) -> None:
        gen = text("ab", max_length=4)
        for _ in range(50):
            value = gen.generate(rng, 100)
            assert len(value) <= 4
            assert set(value) <= {"a", "b"}

    def test_length_scales_with_size(self, rng: SeededRandom) -> None:
        gen = text()
        assert all(len(gen.generate(rng, 3)) <= 3 for _ in range(50))

    def test_shrink_prefers_shorter(self) -> None:
        candidates = text("abc").shrink("cab")
        assert candidates[0] == ""
        assert "ab" in candidates
        assert "aab" in candidates

    def test_min_length_respected_when_shrinking(self) -> None:
        gen = text("ab", min_length=2)
        assert all(len(c) >= 2 for c in gen.shrink("bbb"))

    def test_empty_alphabet_rejected(self) -> None:
        with pytest.raises(ValueError):
            text("")


class TestLists:
    def test_elements_valid(self, rng: SeededRandom) -> None:
        gen = lists(integers(0, 9), max_length=5)
        for _ in range(50):
            value = gen.generate(rng, 100)
            assert gen.is_valid(value)

    def test_shrink_drops_halves_then_elements_then_shrinks_elements(self) -> None:
        candidates = lists(integers(0, 9)).shrink([4, 5])
        assert candidates[:2] == [[4], [5]]
        assert [0, 5] in candidates
        assert [4, 0] in candidates

    def test_empty_list_is_minimal(self) -> None:
        assert lists(integers()).shrink([]) == []

    def test_min_length(self) -> None:
        gen = lists(integers(), min_length=2)
        assert not gen.is_valid([1])
        assert all(len(c) >= 2 for c in gen.shrink([1, 2, 3]))


class TestCombinators:
    def test_sampled_from_shrinks_to_earlier_values(self) -> None:
        gen = sampled_from(["low", "mid", "high"])
        assert gen.shrink("high") == ["low", "mid"]
        assert gen.shrink("low") == []
        assert not gen.is_valid("other")

    def test_sampled_from_requires_values(self) -> None:
        with pytest.raises(ValueError):
            sampled_from([])

    def test_one_of_draws_from_each(self, rng: SeededRandom) -> None:
        gen = one_of(constant("a"), constant("b"))
        assert {gen.generate(rng, 1) for _ in range(50)} == {"a", "b"}

    def test_one_of_shrinks_with_matching_generator(self) -> None:
        gen = one_of(booleans(), integers(0))
        assert gen.shrink(True) == [False]
        assert gen.shrink(4) == [0, 2, 3]

    def test_tuples(self, rng: SeededRandom) -> None:
        gen = tuples(integers(0, 3), booleans())
        value = gen.generate(rng, 10)
        assert gen.is_valid(value)
        assert gen.shrink((2, True)) == [(0, True), (1, True), (2, False)]

    def test_map(self, rng: SeededRandom) -> None:
        gen = integers(0, 5).map(lambda n: n * 2)
        assert all(gen.generate(rng, 10) % 2 == 0 for _ in range(20))
        assert gen.shrink(4) == []

    def test_function_generator_defaults(self, rng: SeededRandom) -> None:
        gen = FunctionGenerator(lambda r, size: r.integer(0, size))
        assert 0 <= gen.generate(rng, 3) <= 3
        assert gen.shrink(3) == []
        assert gen.is_valid("anything")


class TestDeterminism:
    def test_same_seed_same_values(self) -> None:
        gen = lists(tuples(integers(), text()), max_length=6)
        first, second = SeededRandom(9), SeededRandom(9)
        assert [gen.generate(first, 20) for _ in range(5)] == [gen.generate(second, 20) for _ in range(5)]
