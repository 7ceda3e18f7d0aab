"""
YAML loading and dumping for permafrost values.

Provides:
- Loader: SafeLoader that understands the !replace tag
- Dumper: SafeDumper that can represent immutable containers

Custom tags:
- !replace: wrap a value in Replace so a merge replaces it exactly

Example:
    >>> import permafrost._yaml as yaml_bridge
    >>> data = yaml_bridge.load('''
    ... normal: value
    ... exact: !replace
    ...   only: this
    ... ''')
    >>> data["exact"]
    Replace({'only': 'this'})
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml

import permafrost._frozen as _frozen
import permafrost._markers as _markers

# =============================================================================
# Loader
# =============================================================================


def _replace_constructor(
    loader: _yaml.SafeLoader,
    node: _yaml.Node,
) -> _markers.Replace:
    """
    Construct a Replace marker from the !replace tag.

    The tag wraps whatever value follows:
        key: !replace value
        key: !replace
          nested: dict
          not: merged
        key: !replace [list, items]
        key: !replace ~  (null)
    """
    value: _typing.Any
    if isinstance(node, _yaml.MappingNode):
        value = loader.construct_mapping(node, deep=True)
    elif isinstance(node, _yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    elif isinstance(node, _yaml.ScalarNode):
        # Re-resolve the scalar as if it were untagged so "3" stays an int
        tag = loader.resolve(_yaml.ScalarNode, node.value, (node.style is None, False))
        plain = _yaml.ScalarNode(tag, node.value, node.start_mark, node.end_mark, node.style)
        value = loader.construct_object(plain, deep=True)
    else:
        value = None

    return _markers.Replace(value)


class Loader(_yaml.SafeLoader):
    """
    YAML loader for merge source documents.

    Extends SafeLoader with the `!replace` tag:

        # Replace a dict entirely (don't merge with the target's dict)
        api_params: !replace
          only: these
          params: used
    """


Loader.add_constructor("!replace", _replace_constructor)


# =============================================================================
# Dumper
# =============================================================================


def _represent_mapping(dumper: _yaml.SafeDumper, data: _frozen.ImmutableMapping) -> _yaml.Node:
    return dumper.represent_dict(data)


def _represent_sequence(dumper: _yaml.SafeDumper, data: _frozen.ImmutableSequence) -> _yaml.Node:
    return dumper.represent_list(data)


class Dumper(_yaml.SafeDumper):
    """SafeDumper that writes ImmutableMapping/ImmutableSequence as plain YAML."""

    def ignore_aliases(self, data: _typing.Any) -> bool:
        # Shared subtrees are normal after a merge; never emit anchors for them
        return True


Dumper.add_multi_representer(_frozen.ImmutableMapping, _represent_mapping)
Dumper.add_multi_representer(_frozen.ImmutableSequence, _represent_sequence)


# =============================================================================
# Convenience Functions
# =============================================================================


def load(stream: _typing.Any) -> _typing.Any:
    """
    Load YAML with the !replace extension.

    Args:
        stream: YAML content (string, bytes, or file-like object).

    Returns:
        Plain Python data; !replace values are wrapped in Replace.
    """
    return _yaml.load(stream, Loader=Loader)  # noqa: S506 - Loader extends SafeLoader


def dump(value: _typing.Any, stream: _typing.Any = None) -> _typing.Any:
    """
    Dump a value (immutable or plain) as block-style YAML.

    Key order is preserved. Returns the YAML string when stream is None.
    """
    return _yaml.dump(
        value,
        stream,
        Dumper=Dumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
