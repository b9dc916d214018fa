"""
Common utilities and types for gitwrap.

This module provides shared functionality used by both the synchronous and asynchronous APIs.
"""

from gitwrap.common.errors import (
    GitwrapError,
    RepositoryError,
    CommandError,
    PartialDeleteError,
    ConfigError,
    BinaryError,
)

__all__ = [
    "GitwrapError",
    "RepositoryError",
    "CommandError",
    "PartialDeleteError",
    "ConfigError",
    "BinaryError",
]
