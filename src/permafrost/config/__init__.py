"""
Configuration for permafrost.

- MergeOptions: validated options for a single merge call
- Settings: process-wide defaults for the command line (PERMAFROST_* env vars)
"""

from permafrost.config.settings import Settings
from permafrost.config.types import MergeOptions

__all__ = ["MergeOptions", "Settings"]
