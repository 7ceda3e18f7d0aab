"""
Structural copy-on-write merge for immutable mappings.

merge() folds one or more source mappings into an ImmutableMapping and
returns a new ImmutableMapping. The target is never modified.

Merge policy:
    - mapping + mapping → merged recursively (mode="deep", the default)
    - sequence          → replaced wholesale, never merged element-wise
    - scalar            → replaced by the source value
    - Replace(value)    → replaced wholesale, even if both are mappings
    - keys only in the target are kept; merge never deletes keys

Unchanged subtrees are shared between the target and the result. When
the merge changes nothing at any depth, the target itself is returned,
so callers can detect a no-op with `result is target`.

Example:
    >>> import permafrost
    >>> base = permafrost.construct({"all": "your base", "are": {"belong": "to them"}})
    >>> base.merge({"are": {"belong": "to us"}})
    ImmutableMapping({'all': 'your base', 'are': ImmutableMapping({'belong': 'to us'})})
    >>> base.merge({"all": "your base"}) is base
    True
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import pydantic as _pydantic

import permafrost._equality as _equality
import permafrost._frozen as _frozen
import permafrost._markers as _markers
import permafrost._types as types
import permafrost.config.types as config_types
import permafrost.errors as errors

_logger = _logging.getLogger(__name__)

_DEFAULT_OPTIONS = config_types.MergeOptions()
_EMPTY = _frozen.ImmutableMapping()


class _MissingType:
    """Sentinel for a key absent from the working copy."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


_MISSING = _MissingType()


def merge(
    target: _frozen.ImmutableMapping,
    *sources: _typing.Any,
    mode: types.MergeMode | None = None,
) -> _frozen.ImmutableMapping:
    """
    Merge sources into an immutable mapping.

    Args:
        target: The mapping to merge into.
        *sources: Mappings, or sequences of mappings (flattened in order).
                  Later sources take priority over earlier ones, and all
                  of them over the target.
        mode: "deep" (default) merges nested mappings recursively;
              "shallow" lets nested source mappings replace target ones.

    Returns:
        A new ImmutableMapping, or target itself if nothing changed.

    Raises:
        InvalidArgument: If target is not an ImmutableMapping, a source is
            not mapping-like, a key is not a string, or mode is invalid.
    """
    if not isinstance(target, _frozen.ImmutableMapping):
        raise errors.InvalidArgument(
            f"Merge target must be an ImmutableMapping, got {type(target).__name__}"
        )

    options = _resolve_options(mode)
    normalized = _normalize_sources(sources)

    if not normalized:
        return target

    _logger.debug(
        "Merging %d source(s) into %d-key mapping (mode=%s)",
        len(normalized),
        len(target),
        options.mode,
    )

    result = _fold(target, normalized, options)
    if result is target:
        _logger.debug("Merge produced no changes, returning original instance")
    return result


def set_in(
    target: _frozen.ImmutableMapping,
    path: types.Path,
    value: _typing.Any,
) -> _frozen.ImmutableMapping:
    """
    Return a copy of target with value placed at a nested key path.

    Missing intermediate keys, and intermediate values that are not
    mappings, are replaced by new mappings. The value replaces whatever
    is at the path (no deep merge). If the path already holds the same
    value, target itself is returned.

    Raises:
        InvalidArgument: If target is not an ImmutableMapping or the path
            is empty or contains non-string keys.
    """
    if not isinstance(target, _frozen.ImmutableMapping):
        raise errors.InvalidArgument(
            f"set_in target must be an ImmutableMapping, got {type(target).__name__}"
        )
    keys = _frozen.check_path(path)
    if not keys:
        raise errors.InvalidArgument("set_in path must not be empty")
    return _set_in(target, keys, _frozen.construct(value))


# =============================================================================
# Internals
# =============================================================================


def _resolve_options(mode: types.MergeMode | None) -> config_types.MergeOptions:
    if mode is None:
        return _DEFAULT_OPTIONS
    try:
        return config_types.MergeOptions.from_arguments(mode=mode)
    except _pydantic.ValidationError as e:
        raise errors.InvalidArgument(f"Invalid merge options: {e}") from e


def _normalize_sources(sources: tuple[_typing.Any, ...]) -> list[_abc.Mapping[str, _typing.Any]]:
    """Flatten the accepted call styles into one ordered list of mappings."""
    normalized: list[_abc.Mapping[str, _typing.Any]] = []
    for position, source in enumerate(sources):
        if isinstance(source, _abc.Mapping):
            normalized.append(source)
        elif _frozen.is_sequence_like(source):
            for index, item in enumerate(source):
                if not isinstance(item, _abc.Mapping):
                    raise errors.InvalidArgument(
                        f"Merge source {position}[{index}] must be a mapping, "
                        f"got {type(item).__name__}"
                    )
                normalized.append(item)
        else:
            raise errors.InvalidArgument(
                f"Merge source {position} must be a mapping or a sequence of mappings, "
                f"got {type(source).__name__}"
            )
    return normalized


def _fold(
    target: _frozen.ImmutableMapping,
    sources: _abc.Iterable[_abc.Mapping[str, _typing.Any]],
    options: config_types.MergeOptions,
) -> _frozen.ImmutableMapping:
    """Apply sources left to right onto a working copy of target."""
    working = dict(target._data)

    for source in sources:
        for key, incoming in source.items():
            _frozen.check_key(key)
            working[key] = _merge_value(working.get(key, _MISSING), incoming, options)

    return _finalize(target, working)


def _merge_value(
    current: _typing.Any,
    incoming: _typing.Any,
    options: config_types.MergeOptions,
) -> _typing.Any:
    """Combine the value already at a key with an incoming source value."""
    if _markers.is_replace(incoming):
        return _frozen.construct(incoming)

    if (
        options.deep
        and isinstance(current, _frozen.ImmutableMapping)
        and isinstance(incoming, _abc.Mapping)
    ):
        return _fold(current, (incoming,), options)

    return _frozen.construct(incoming)


def _finalize(
    target: _frozen.ImmutableMapping,
    working: dict[str, _typing.Any],
) -> _frozen.ImmutableMapping:
    """
    Compare the folded entries with target.

    Entries equal to the original are swapped back to the original object
    so unchanged subtrees are shared. Returns target if nothing differs.
    """
    original = target._data
    changed = False

    for key, value in working.items():
        if key not in original:
            changed = True
            continue
        previous = original[key]
        if value is previous:
            continue
        if _equality.same_value(value, previous):
            working[key] = previous
        else:
            changed = True

    if not changed:
        return target
    return type(target)._from_constructed(working)


def _set_in(
    mapping: _frozen.ImmutableMapping,
    keys: types.Path,
    value: _typing.Any,
) -> _frozen.ImmutableMapping:
    key, rest = keys[0], keys[1:]
    current = mapping._data.get(key, _MISSING)

    if rest:
        child = current if isinstance(current, _frozen.ImmutableMapping) else _EMPTY
        replacement = _set_in(child, rest, value)
    else:
        replacement = value

    if current is not _MISSING and (
        replacement is current or _equality.same_value(replacement, current)
    ):
        return mapping

    data = dict(mapping._data)
    data[key] = replacement
    return type(mapping)._from_constructed(data)
