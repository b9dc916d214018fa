"""
gitwrap - an object-oriented binding over the git command-line tool.

This package builds and runs git subcommands, captures their output and
keeps a lightweight in-memory mirror of the repository configuration.
"""

import logging

from gitwrap.command import Command
from gitwrap.common.errors import (
    GitwrapError,
    RepositoryError,
    CommandError,
    PartialDeleteError,
    ConfigError,
    BinaryError,
)
from gitwrap.config import (
    GLOBAL_CONFIG,
    LOCAL_CONFIG,
    SYSTEM_CONFIG,
    Remote,
    RepositoryConfig,
    User,
)
from gitwrap.git import BackgroundResult, Git, format_error
from gitwrap.process import ProcessHandle, ProcessRunner, ProcessState
from gitwrap.repository import BranchDeletion, Commit, Repository

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main symbols
__all__ = [
    "Repository",
    "Git",
    "Command",
    "ProcessRunner",
    "ProcessHandle",
    "ProcessState",
    "BackgroundResult",
    "Commit",
    "BranchDeletion",
    "Remote",
    "User",
    "RepositoryConfig",
    "SYSTEM_CONFIG",
    "GLOBAL_CONFIG",
    "LOCAL_CONFIG",
    "format_error",
    "__version__",
    # Error types
    "GitwrapError",
    "RepositoryError",
    "CommandError",
    "PartialDeleteError",
    "ConfigError",
    "BinaryError",
]
