"""
Configuration package.

Every section is a pydantic-settings model bound to its own environment
prefix; `get_settings()` returns the cached aggregate.
"""

from docchat.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
