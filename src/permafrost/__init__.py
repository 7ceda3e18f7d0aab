"""
permafrost - Deeply immutable data with structural merging.

construct() turns plain dicts and lists into immutable trees;
merge() combines source mappings into such a tree copy-on-write,
returning the original instance when nothing changes.

Example:
    >>> import permafrost
    >>> config = permafrost.construct({"server": {"host": "localhost", "port": 80}})
    >>> updated = config.merge({"server": {"port": 8080}})
    >>> updated["server"]
    ImmutableMapping({'host': 'localhost', 'port': 8080})
    >>> config.merge({"server": {"port": 80}}) is config
    True
"""

import importlib.metadata as _metadata
import re as _re

try:
    _raw_version = _metadata.version("permafrost")
except _metadata.PackageNotFoundError:
    # Running from a source checkout without an install
    _raw_version = "0.0.0"


def _parse_version_info(raw: str) -> tuple[int, ...]:
    """Numeric release part of a PEP 440 version: "0.2.0rc1" -> (0, 2, 0)."""
    release = _re.match(r"\d+(?:\.\d+)*", raw)
    if release is None:
        return (0, 0, 0)
    return tuple(int(x) for x in release.group(0).split(".")[:3])


__version_info__: tuple[int, ...] = _parse_version_info(_raw_version)
__version__: str = _raw_version

from permafrost._frozen import (  # noqa: E402
    Immutable,
    ImmutableMapping,
    ImmutableSequence,
    construct,
    is_immutable,
)
from permafrost._markers import Replace  # noqa: E402
from permafrost._merge import merge, set_in  # noqa: E402
from permafrost.errors import ImmutableViolation, InvalidArgument, PermafrostError  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "Immutable",
    "ImmutableMapping",
    "ImmutableSequence",
    "ImmutableViolation",
    "InvalidArgument",
    "PermafrostError",
    "Replace",
    "construct",
    "is_immutable",
    "merge",
    "set_in",
]
