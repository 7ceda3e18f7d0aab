"""
Shared pytest fixtures for permafrost tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import collections.abc as _abc
import random as _random
import typing as _typing

import pytest as _pytest

import permafrost

# Small key alphabet so that random objects overlap on keys
_KEYS = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta"]

# Seeds for randomized property tests
PROPERTY_SEEDS = list(range(25))


def make_complex_object(rng: _random.Random, depth: int = 0) -> dict[str, _typing.Any]:
    """Build a random non-empty nested dict of the kind merge operates on."""
    size = rng.randint(1, 6)
    result: dict[str, _typing.Any] = {}
    for key in rng.sample(_KEYS, size):
        result[key] = _make_value(rng, depth)
    return result


def _make_value(rng: _random.Random, depth: int) -> _typing.Any:
    choices = ["int", "float", "str", "bool", "none", "list"]
    if depth < 2:
        choices.append("dict")
    kind = rng.choice(choices)
    if kind == "int":
        return rng.randint(-1000, 1000)
    if kind == "float":
        return rng.uniform(-1000.0, 1000.0)
    if kind == "str":
        return "".join(rng.choice("abcxyz") for _ in range(rng.randint(0, 6)))
    if kind == "bool":
        return rng.random() > 0.5
    if kind == "none":
        return None
    if kind == "list":
        return [_make_value(rng, depth + 1) for _ in range(rng.randint(0, 3))]
    return make_complex_object(rng, depth + 1)


def assert_deeply_immutable(value: _typing.Any) -> None:
    """Assert every node of value is immutable and rejects mutation."""
    assert permafrost.is_immutable(value), f"{value!r} is not immutable"

    if isinstance(value, _abc.Mapping):
        assert isinstance(value, permafrost.ImmutableMapping)
        with _pytest.raises(permafrost.ImmutableViolation):
            value["__probe__"] = 1  # type: ignore[index]
        for item in value.values():
            assert_deeply_immutable(item)
    elif isinstance(value, permafrost.ImmutableSequence):
        with _pytest.raises(permafrost.ImmutableViolation):
            value.append(1)
        for item in value:
            assert_deeply_immutable(item)


@_pytest.fixture
def complex_object() -> _typing.Callable[[int], dict[str, _typing.Any]]:
    """Factory: seed -> random nested dict."""

    def factory(seed: int) -> dict[str, _typing.Any]:
        return make_complex_object(_random.Random(seed))

    return factory


@_pytest.fixture
def deeply_immutable() -> _typing.Callable[[_typing.Any], None]:
    """The assert_deeply_immutable helper, as a fixture."""
    return assert_deeply_immutable
