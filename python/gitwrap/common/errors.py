"""
Error types raised by gitwrap.
"""


class GitwrapError(Exception):
    """Base exception for all gitwrap errors."""
    pass


class RepositoryError(GitwrapError, ValueError):
    """The given path does not exist or is not a git repository."""
    pass


class CommandError(GitwrapError):
    """A git process exited non-zero or was killed by a signal.

    Attributes:
        process: The ProcessHandle of the failed invocation
        exit_code: The exit code, or the signal number when the process was killed
        detail: The classified stderr message (may be empty)
    """

    def __init__(self, message="", process=None, exit_code=0, detail=""):
        super().__init__(message)
        self.process = process
        self.exit_code = exit_code
        self.detail = detail


class PartialDeleteError(CommandError):
    """The local branch was deleted but deleting it on the remote failed."""

    local_deleted = True


class ConfigError(GitwrapError):
    """Configuration-related errors."""
    pass


class BinaryError(GitwrapError):
    """The git binary is missing or not executable."""
    pass
