"""
Type aliases for permafrost.

- Path: Tuple of strings representing a nested key path
- MergeMode: How nested mappings are combined during a merge
"""

from __future__ import annotations

import typing as _typing

# Path alias for nested key paths
# Example: ("server", "tls", "cert") represents server.tls.cert
Path: _typing.TypeAlias = tuple[str, ...]

# "deep" merges nested mappings key by key, "shallow" replaces them wholesale
MergeMode: _typing.TypeAlias = _typing.Literal["deep", "shallow"]
