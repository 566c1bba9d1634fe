"""Centralized configuration management for laylder.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from laylder.config import EnvVar, get_environment
    >>>
    >>> policy = get_environment(EnvVar.LAYLDER_LINK_POLICY)
    >>> for var in list_environment_variables("engine"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: CLI log level
    engine: Link policy and strictness
    grid: Default grid dimensions
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_grid_size,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    "get_default_grid_size",
    # Introspection
    "list_environment_variables",
]
