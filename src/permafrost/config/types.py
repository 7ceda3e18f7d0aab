"""Option models for permafrost operations.

MergeOptions is validated with pydantic so that a misspelled mode or
option name fails loudly instead of silently falling back to a default.
"""

import typing as _typing

import pydantic as _pydantic

import permafrost._types as types


class MergeOptions(_pydantic.BaseModel):
    """
    Options for a single merge call.

    Attributes:
        mode: "deep" merges nested mappings key by key (default);
              "shallow" lets nested source mappings replace target
              mappings wholesale.
    """

    model_config = _pydantic.ConfigDict(extra="forbid", frozen=True)

    mode: types.MergeMode = _pydantic.Field(
        default="deep",
        description="How nested mappings are combined",
    )

    @property
    def deep(self) -> bool:
        """True when nested mappings should be merged recursively."""
        return self.mode == "deep"

    @classmethod
    def from_arguments(cls, **kwargs: _typing.Any) -> "MergeOptions":
        """Build options from keyword arguments, dropping those left as None."""
        return cls(**{key: value for key, value in kwargs.items() if value is not None})
