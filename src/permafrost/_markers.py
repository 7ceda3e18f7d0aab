"""
Marker types recognised inside merge sources.

Replace wraps a source value so that it replaces the target value
exactly, even when a deep merge would otherwise combine two mappings.

Example:
    >>> import permafrost
    >>> base = permafrost.construct({"params": {"a": 1, "b": 2}})
    >>> base.merge({"params": permafrost.Replace({"only": 3})})["params"]
    ImmutableMapping({'only': 3})
"""

from __future__ import annotations

import typing as _typing

import permafrost.errors as errors


class Replace:
    """
    Wrapper marking a source value for exact replacement (no deep merge).

    Use `.value` to access the wrapped value. The marker itself cannot be
    re-pointed at another value once created.
    """

    __slots__ = ("_value",)

    def __init__(self, value: _typing.Any) -> None:
        if hasattr(self, "_value"):
            raise errors.ImmutableViolation("Replace", "reinitialize")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        raise errors.ImmutableViolation("Replace", f"set attribute {name!r}")

    def __delattr__(self, name: str) -> None:
        raise errors.ImmutableViolation("Replace", f"delete attribute {name!r}")

    @property
    def value(self) -> _typing.Any:
        """The wrapped value to use (without merging)."""
        return self._value

    def __repr__(self) -> str:
        return f"Replace({self._value!r})"

    def __reduce__(self) -> tuple[type[Replace], tuple[_typing.Any]]:
        return (type(self), (self._value,))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Replace):
            return bool(self._value == other._value)
        return NotImplemented


def is_replace(value: _typing.Any) -> bool:
    """Check if a value is a Replace marker."""
    return isinstance(value, Replace)
