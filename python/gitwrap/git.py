"""
Binding to the git executable.

Git resolves and validates the binary once, builds Commands for a project
directory, runs them through a ProcessRunner and turns failed processes
into CommandError.
"""

import logging
import os
import re
import shutil
from concurrent.futures import Future
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from gitwrap.command import Command
from gitwrap.common.errors import BinaryError, CommandError
from gitwrap.process import ProcessHandle, ProcessRunner

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "/usr/bin/git"

FATAL_PATTERN = r"^fatal:"


def format_error(stderr_lines: Iterable[str], pattern: str = FATAL_PATTERN) -> str:
    """
    Extract the actionable part of git's stderr.

    Lines before the first line matching ``pattern`` are discarded. The
    matching line and every later line are joined with single spaces; the
    match is removed from each line that carries it.

    Args:
        stderr_lines: Captured stderr, one entry per line
        pattern: Regular expression marking the start of the message

    Returns:
        The message, or an empty string if no line matched
    """
    regex = re.compile(pattern)
    parts = []
    discard = True
    for line in stderr_lines:
        if regex.search(line):
            discard = False
            line = regex.sub("", line, count=1)
        if not discard:
            parts.append(line.strip())
    return " ".join(part for part in parts if part).strip()


def is_executable(path: Optional[str]) -> bool:
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


def find_binary() -> Optional[str]:
    """
    Locate a git binary.

    Returns:
        DEFAULT_BINARY when it is executable, else the first git on PATH,
        else None
    """
    if is_executable(DEFAULT_BINARY):
        return DEFAULT_BINARY
    found = shutil.which("git")
    if found:
        return os.path.abspath(found)
    return None


def validate_binary(binary: Optional[str]) -> str:
    """
    Check that ``binary`` is an executable file.

    Raises:
        BinaryError: If the binary is missing or not executable
    """
    if not is_executable(binary):
        raise BinaryError(f"Invalid configuration. Git improperly configured: [{binary}] is not an executable file.")
    return binary


class BackgroundResult(Future):
    """Single-resolution result of a git command running in the background.

    Resolves to the value produced by the completion step (the ProcessHandle
    by default) or to the CommandError of a failed process.
    """

    def __init__(self, process: ProcessHandle = None) -> None:
        super().__init__()
        self.process = process


class Git:
    """A git binary bound to a project directory."""

    def __init__(self, project_dir, binary: Optional[str] = None, runner: Optional[ProcessRunner] = None) -> None:
        """
        Args:
            project_dir: Working directory for every command
            binary: Absolute path to git; resolved with find_binary() if None
            runner: ProcessRunner to use; a default one is created if None

        Raises:
            BinaryError: If no usable git binary is found
        """
        if binary is None:
            binary = find_binary() or DEFAULT_BINARY
        self.binary = validate_binary(str(binary))
        self.project_dir = os.fspath(project_dir)
        self.runner = runner or ProcessRunner()

    def command(
        self,
        command: str,
        args: Sequence[Any] = (),
        options: Optional[Mapping[str, Any]] = None,
        paths: Iterable[Any] = (),
    ) -> Command:
        return Command.build(self.binary, command, args, options, paths)

    def exec(
        self,
        command: str,
        args: Sequence[Any] = (),
        options: Optional[Mapping[str, Any]] = None,
        paths: Iterable[Any] = (),
    ) -> ProcessHandle:
        """
        Execute a git subcommand and wait for it.

        Args:
            command: Subcommand token, e.g. "branch" or "remote-add"
            args: Positional arguments
            options: Option map (see gitwrap.command.render_options)
            paths: Paths passed after "--"

        Returns:
            The finished ProcessHandle

        Raises:
            CommandError: If git exits non-zero or is killed
        """
        cmd = self.command(command, args, options, paths)
        handle = self.runner.run(cmd, self.project_dir)
        if handle.failed:
            raise self.error_for(command, handle)
        return handle

    def exec_background(
        self,
        command: str,
        args: Sequence[Any] = (),
        options: Optional[Mapping[str, Any]] = None,
        paths: Iterable[Any] = (),
        on_success: Optional[Callable[[ProcessHandle], Any]] = None,
        on_error: Optional[Callable[[CommandError], Any]] = None,
    ) -> BackgroundResult:
        """
        Start a git subcommand without waiting for it.

        ``on_success`` is called with the handle after a successful exit and
        its return value (the handle if it returns None) resolves the result.
        An exception raised by ``on_success`` fails the result. ``on_error``
        is called with the CommandError of a failed process before the result
        fails with it.

        Returns:
            BackgroundResult for the running command
        """
        cmd = self.command(command, args, options, paths)
        result = BackgroundResult()

        def complete(handle: ProcessHandle) -> None:
            result.process = handle
            if handle.failed:
                error = self.error_for(command, handle)
                if on_error is not None:
                    try:
                        on_error(error)
                    except Exception:
                        logger.exception("on_error callback for git %s raised", cmd.name)
                result.set_exception(error)
                return
            try:
                value = on_success(handle) if on_success is not None else None
            except Exception as exc:
                result.set_exception(exc)
                return
            result.set_result(handle if value is None else value)

        result.process = self.runner.start(cmd, self.project_dir, complete)
        return result

    def error_for(self, command: str, handle: ProcessHandle) -> CommandError:
        """Build the CommandError describing a failed process."""
        detail = format_error(handle.stderr_lines)
        code = handle.exit_code or handle.signal or 0
        logger.debug("git %s failed with %s: %s", handle.command.name, code, detail)
        return CommandError(f"[{command}] failed. {detail}".rstrip(), process=handle, exit_code=code, detail=detail)

    def __repr__(self) -> str:
        return f"Git({self.project_dir!r}, binary={self.binary!r})"
