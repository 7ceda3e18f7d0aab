"""
Deeply immutable containers.

construct() copies plain data into ImmutableMapping / ImmutableSequence
nodes, recursing into every nested container. Once built, no node can be
changed in place: item writes, deletes, attribute writes and the usual
mutating list/dict methods all raise ImmutableViolation. Reads, iteration
and comparisons behave like the equivalent dict/list.

Example:
    >>> frozen = construct({"a": {"b": [1, 2, 3]}})
    >>> frozen["a"]["b"][0]
    1
    >>> frozen["a"]["b"].append(4)  # ImmutableViolation
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import permafrost._markers as markers
import permafrost._types as types
import permafrost.errors as errors

# Values that are immutable without any wrapping
PRIMITIVE_TYPES: tuple[type, ...] = (type(None), bool, int, float, complex, str, bytes)


class Immutable:
    """
    Capability marker shared by all immutable containers.

    is_immutable() and construct() check for this base class, which makes
    "already immutable" an O(1) isinstance test. Subclasses store their
    state in __slots__ and assign it once through object.__setattr__.
    """

    __slots__ = ()

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        self._reject(f"set attribute {name!r}")

    def __delattr__(self, name: str) -> None:
        self._reject(f"delete attribute {name!r}")

    def __copy__(self) -> _typing.Self:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> _typing.Self:
        return self

    def _reject(self, operation: str) -> _typing.NoReturn:
        raise errors.ImmutableViolation(type(self).__name__, operation)


class ImmutableMapping(Immutable, _abc.Mapping[str, _typing.Any]):
    """
    Immutable string-keyed mapping.

    Values are converted with construct() when the mapping is built, so
    the mapping never shares mutable state with its input.

    Example:
        >>> m = ImmutableMapping({"a": 1}, b=[2])
        >>> m["b"]
        ImmutableSequence([2])
        >>> m["a"] = 2  # ImmutableViolation
    """

    __slots__ = ("_data",)

    _data: dict[str, _typing.Any]

    def __init__(
        self,
        data: _abc.Mapping[str, _typing.Any] | _abc.Iterable[tuple[str, _typing.Any]] = (),
        /,
        **kwargs: _typing.Any,
    ) -> None:
        if hasattr(self, "_data"):
            self._reject("reinitialize")
        items = dict(data, **kwargs)
        object.__setattr__(
            self,
            "_data",
            {check_key(key): construct(value) for key, value in items.items()},
        )

    @classmethod
    def _from_constructed(cls, data: dict[str, _typing.Any]) -> ImmutableMapping:
        """
        Wrap a dict whose values are already immutable.

        The dict is adopted, not copied; callers must not keep a reference.
        """
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_data", data)
        return instance

    # -------------------------------------------------------------------------
    # Read surface
    # -------------------------------------------------------------------------

    def __getitem__(self, key: str) -> _typing.Any:
        return self._data[key]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"ImmutableMapping({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with same content."""
        if isinstance(other, ImmutableMapping):
            return self._data == other._data
        if isinstance(other, _abc.Mapping):
            return self._data == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        """Hashable when every value is hashable."""
        return hash(frozenset(self._data.items()))

    def __reduce__(self) -> tuple[type[ImmutableMapping], tuple[dict[str, _typing.Any]]]:
        return (type(self), (self._data,))

    def __or__(self, other: object) -> ImmutableMapping:
        """Shallow union, right side wins (like dict | dict)."""
        if not isinstance(other, _abc.Mapping):
            return NotImplemented
        return self.merge(other, mode="shallow")

    def __ror__(self, other: object) -> ImmutableMapping:
        if not isinstance(other, _abc.Mapping):
            return NotImplemented
        return ImmutableMapping(other).merge(self, mode="shallow")

    # -------------------------------------------------------------------------
    # Rejected mutations
    # -------------------------------------------------------------------------

    def __setitem__(self, key: str, value: _typing.Any) -> None:
        self._reject(f"set item {key!r}")

    def __delitem__(self, key: str) -> None:
        self._reject(f"delete item {key!r}")

    def update(self, *args: _typing.Any, **kwargs: _typing.Any) -> None:
        self._reject("update()")

    def pop(self, *args: _typing.Any) -> _typing.Any:
        self._reject("pop()")

    def popitem(self) -> tuple[str, _typing.Any]:
        self._reject("popitem()")

    def clear(self) -> None:
        self._reject("clear()")

    def setdefault(self, *args: _typing.Any) -> _typing.Any:
        self._reject("setdefault()")

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    def merge(
        self,
        *sources: _typing.Any,
        mode: types.MergeMode | None = None,
    ) -> ImmutableMapping:
        """
        Merge sources into this mapping, returning a new mapping.

        Returns self when the merge changes nothing. See
        permafrost._merge.merge for the full semantics.
        """
        import permafrost._merge as merge_engine

        return merge_engine.merge(self, *sources, mode=mode)

    def set_in(self, path: types.Path, value: _typing.Any) -> ImmutableMapping:
        """Return a copy with value placed at the nested key path."""
        import permafrost._merge as merge_engine

        return merge_engine.set_in(self, path, value)

    def get_in(self, path: types.Path, default: _typing.Any = None) -> _typing.Any:
        """
        Look up a nested key path.

        Args:
            path: Keys from this mapping down to the value. An empty path
                  returns the mapping itself.
            default: Returned when any step of the path is missing or is
                     not a mapping.
        """
        current: _typing.Any = self
        for key in check_path(path):
            if not isinstance(current, ImmutableMapping) or key not in current._data:
                return default
            current = current._data[key]
        return current

    def as_mutable(self, deep: bool = True) -> dict[str, _typing.Any]:
        """
        Return a plain dict copy.

        Args:
            deep: If True (default), nested immutable containers are
                  converted to dicts and lists too.
        """
        if not deep:
            return dict(self._data)
        return {key: thaw(value) for key, value in self._data.items()}


class ImmutableSequence(Immutable, _abc.Sequence[_typing.Any]):
    """
    Immutable ordered sequence.

    Items are converted with construct(). Concatenation and repetition
    return new sequences; everything that would reorder or resize the
    sequence in place is rejected.
    """

    __slots__ = ("_items",)

    _items: tuple[_typing.Any, ...]

    def __init__(self, items: _abc.Iterable[_typing.Any] = (), /) -> None:
        if hasattr(self, "_items"):
            self._reject("reinitialize")
        object.__setattr__(self, "_items", tuple(construct(item) for item in items))

    @classmethod
    def _from_constructed(cls, items: tuple[_typing.Any, ...]) -> ImmutableSequence:
        """Wrap a tuple whose items are already immutable."""
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_items", items)
        return instance

    # -------------------------------------------------------------------------
    # Read surface
    # -------------------------------------------------------------------------

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> ImmutableSequence: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        if isinstance(index, slice):
            return ImmutableSequence._from_constructed(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def index(self, value: _typing.Any, start: int = 0, stop: int | None = None) -> int:
        if stop is None:
            return self._items.index(value, start)
        return self._items.index(value, start, stop)

    def count(self, value: _typing.Any) -> int:
        return self._items.count(value)

    def __repr__(self) -> str:
        return f"ImmutableSequence({list(self._items)!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Sequence with same content (except strings)."""
        if isinstance(other, ImmutableSequence):
            return self._items == other._items
        if isinstance(other, (str, bytes, bytearray)):
            return NotImplemented
        if isinstance(other, _abc.Sequence):
            return self._items == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Hashable when every item is hashable; matches tuple hashing."""
        return hash(self._items)

    def __reduce__(self) -> tuple[type[ImmutableSequence], tuple[tuple[_typing.Any, ...]]]:
        return (type(self), (self._items,))

    def __add__(self, other: object) -> ImmutableSequence:
        if not is_sequence_like(other):
            return NotImplemented
        extra = tuple(construct(item) for item in _typing.cast(_abc.Iterable[_typing.Any], other))
        return ImmutableSequence._from_constructed(self._items + extra)

    def __radd__(self, other: object) -> ImmutableSequence:
        if not is_sequence_like(other):
            return NotImplemented
        extra = tuple(construct(item) for item in _typing.cast(_abc.Iterable[_typing.Any], other))
        return ImmutableSequence._from_constructed(extra + self._items)

    def __mul__(self, count: int) -> ImmutableSequence:
        if not isinstance(count, int):
            return NotImplemented
        return ImmutableSequence._from_constructed(self._items * count)

    __rmul__ = __mul__

    # -------------------------------------------------------------------------
    # Rejected mutations
    # -------------------------------------------------------------------------

    def __setitem__(self, index: int | slice, value: _typing.Any) -> None:
        self._reject(f"set item {index!r}")

    def __delitem__(self, index: int | slice) -> None:
        self._reject(f"delete item {index!r}")

    def append(self, value: _typing.Any) -> None:
        self._reject("append()")

    def extend(self, values: _abc.Iterable[_typing.Any]) -> None:
        self._reject("extend()")

    def insert(self, index: int, value: _typing.Any) -> None:
        self._reject("insert()")

    def remove(self, value: _typing.Any) -> None:
        self._reject("remove()")

    def pop(self, index: int = -1) -> _typing.Any:
        self._reject("pop()")

    def clear(self) -> None:
        self._reject("clear()")

    def sort(self, *args: _typing.Any, **kwargs: _typing.Any) -> None:
        self._reject("sort()")

    def reverse(self) -> None:
        self._reject("reverse()")

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    def as_mutable(self, deep: bool = True) -> list[_typing.Any]:
        """
        Return a plain list copy.

        Args:
            deep: If True (default), nested immutable containers are
                  converted to dicts and lists too.
        """
        if not deep:
            return list(self._items)
        return [thaw(item) for item in self._items]


# =============================================================================
# Helpers
# =============================================================================


def is_sequence_like(value: _typing.Any) -> bool:
    """True for ordered containers other than str/bytes."""
    return isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes, bytearray))


def check_key(key: _typing.Any) -> str:
    """Return key unchanged, or raise InvalidArgument if it is not a string."""
    if not isinstance(key, str):
        raise errors.InvalidArgument(f"Mapping keys must be strings, got {type(key).__name__}")
    return key


def check_path(path: _typing.Any) -> types.Path:
    """
    Validate a nested key path.

    Raises:
        InvalidArgument: If path is a bare string or has non-string parts.
    """
    if isinstance(path, (str, bytes)) or not isinstance(path, _abc.Iterable):
        raise errors.InvalidArgument(
            f"Path must be a sequence of strings, got {type(path).__name__}"
        )
    keys = tuple(path)
    for component in keys:
        if not isinstance(component, str):
            raise errors.InvalidArgument(
                f"Path components must be strings, got {type(component).__name__}"
            )
    return keys


def thaw(value: _typing.Any) -> _typing.Any:
    """Convert immutable containers back to plain dicts/lists, recursively."""
    if isinstance(value, (ImmutableMapping, ImmutableSequence)):
        return value.as_mutable(deep=True)
    return value


def is_immutable(value: _typing.Any) -> bool:
    """
    Check whether a value is already immutable.

    True for immutable containers and for primitives (None, bool, numbers,
    str, bytes). False for plain dicts/lists and arbitrary objects.
    """
    return isinstance(value, Immutable) or isinstance(value, PRIMITIVE_TYPES)


def construct(value: _typing.Any) -> _typing.Any:
    """
    Produce a deeply immutable version of a value.

    - Replace markers → construct(marker.value), at any depth
    - Immutable containers → returned as-is
    - Primitives → returned as-is
    - Mapping → ImmutableMapping (keys must be strings)
    - list/tuple/other Sequence (except str/bytes) → ImmutableSequence
    - Anything else (sets, functions, datetimes, custom objects) → as-is

    The input is never modified, and the result shares no mutable state
    with it.

    Raises:
        InvalidArgument: If a mapping at any depth has a non-string key.

    Example:
        >>> construct({"a": [1, 2]})
        ImmutableMapping({'a': ImmutableSequence([1, 2])})
        >>> construct("string")
        'string'
    """
    if markers.is_replace(value):
        return construct(value.value)
    if isinstance(value, Immutable) or isinstance(value, PRIMITIVE_TYPES):
        return value
    if isinstance(value, _abc.Mapping):
        return ImmutableMapping(value)
    if isinstance(value, bytearray):
        return bytes(value)
    if is_sequence_like(value):
        return ImmutableSequence(value)
    return value
