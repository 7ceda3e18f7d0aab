"""
Same-value equality used to detect no-op merges.

Plain == is not good enough for this purpose: NaN never equals itself,
which would make merging {"x": nan} into {"x": nan} look like a change,
and True == 1 would hide a real type change.

Rules:
- Identical objects are always equal
- Primitives must have exactly the same type
- Floats: NaN equals NaN, 0.0 and -0.0 differ
- Immutable containers are compared recursively
- Any other object is equal only to itself
"""

from __future__ import annotations

import math as _math
import typing as _typing

import permafrost._frozen as _frozen


def same_value(left: _typing.Any, right: _typing.Any) -> bool:
    """Return True if left and right are interchangeable in a merge result."""
    if left is right:
        return True
    if type(left) is not type(right):
        return False

    if isinstance(left, float):
        return _same_float(left, right)
    if isinstance(left, complex):
        return _same_float(left.real, right.real) and _same_float(left.imag, right.imag)

    if isinstance(left, _frozen.ImmutableMapping):
        if len(left) != len(right):
            return False
        for key, value in left.items():
            if key not in right or not same_value(value, right[key]):
                return False
        return True

    if isinstance(left, _frozen.ImmutableSequence):
        if len(left) != len(right):
            return False
        return all(same_value(a, b) for a, b in zip(left, right))

    if isinstance(left, _frozen.PRIMITIVE_TYPES):
        return bool(left == right)

    return False


def _same_float(left: float, right: float) -> bool:
    if _math.isnan(left):
        return _math.isnan(right)
    return left == right and _math.copysign(1.0, left) == _math.copysign(1.0, right)
