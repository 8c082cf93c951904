"""Reusable generators for primitive values and containers."""

from propengine.generators.base import FunctionGenerator, Generator, MappedGenerator
from propengine.generators.primitives import (
    BooleanGenerator,
    ConstantGenerator,
    FloatGenerator,
    IntegerGenerator,
    ListGenerator,
    OneOfGenerator,
    SampledFromGenerator,
    TextGenerator,
    TupleGenerator,
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

__all__ = [
    "BooleanGenerator",
    "ConstantGenerator",
    "FloatGenerator",
    "FunctionGenerator",
    "Generator",
    "IntegerGenerator",
    "ListGenerator",
    "MappedGenerator",
    "OneOfGenerator",
    "SampledFromGenerator",
    "TextGenerator",
    "TupleGenerator",
    "booleans",
    "constant",
    "floats",
    "integers",
    "lists",
    "one_of",
    "sampled_from",
    "text",
    "tuples",
]
