"""Process-wide settings for permafrost.

Settings are read from environment variables with the PERMAFROST_ prefix:

- PERMAFROST_MERGE_MODE: default merge mode for the CLI ("deep" or "shallow")
- PERMAFROST_LOG_LEVEL: logging level name for the CLI (default WARNING)
- PERMAFROST_OUTPUT_FORMAT: CLI output format ("yaml" or "json")
- PERMAFROST_COLOR: force YAML syntax highlighting on (1) or off (0)

The library functions never read Settings; merge() and construct() stay
pure and take their options explicitly.
"""

import logging as _logging
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import permafrost._types as types


class Settings(_pydantic_settings.BaseSettings):
    """
    permafrost configuration settings.

    All settings can be overridden via environment variables with the
    PERMAFROST_ prefix, e.g. PERMAFROST_MERGE_MODE=shallow.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="PERMAFROST_",
        extra="ignore",
    )

    merge_mode: types.MergeMode = _pydantic.Field(
        default="deep",
        description="Default merge mode used by the command line",
    )

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Logging level name (DEBUG, INFO, WARNING, ERROR)",
    )

    output_format: _typing.Literal["yaml", "json"] = _pydantic.Field(
        default="yaml",
        description="Output format used by the command line",
    )

    color: bool | None = _pydantic.Field(
        default=None,
        description="Force YAML highlighting on or off (unset: auto-detect a TTY)",
    )

    @_pydantic.field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(_logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level
