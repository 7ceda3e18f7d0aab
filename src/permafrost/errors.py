"""
Exception hierarchy for permafrost.

Both concrete errors subclass TypeError so that code written against
Python's own read-only containers (tuple, MappingProxyType) keeps
catching them.
"""


class PermafrostError(Exception):
    """Base class for all permafrost errors."""


class ImmutableViolation(PermafrostError, TypeError):
    """Raised when code attempts to mutate an immutable value in place."""

    def __init__(self, type_name: str, operation: str) -> None:
        self.type_name = type_name
        self.operation = operation
        super().__init__(f"'{type_name}' is immutable: cannot {operation}")


class InvalidArgument(PermafrostError, TypeError):
    """Raised when an operation receives input of the wrong shape."""
