"""
Execution of git commands as child processes.

The runner never goes through a shell: the argument vector of a Command is
handed to subprocess as a list.
"""

import enum
import logging
import os
import subprocess
import threading
from concurrent.futures import Future
from typing import Callable, List, Optional

from gitwrap.command import Command

logger = logging.getLogger(__name__)


def _lines(output: str) -> List[str]:
    """Split process output on newlines only, as git terminates its records."""
    if not output:
        return []
    if output.endswith("\n"):
        output = output[:-1]
    return [line[:-1] if line.endswith("\r") else line for line in output.split("\n")]


class ProcessState(enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProcessHandle:
    """One spawned execution of a Command.

    The handle is owned by the caller that spawned it. Output is available
    line by line once the process has finished.
    """

    def __init__(self, command: Command, cwd: str) -> None:
        self.command = command
        self.cwd = cwd
        self.stdout_lines: List[str] = []
        self.stderr_lines: List[str] = []
        self.exit_code: Optional[int] = None
        self.signal: Optional[int] = None
        self.state = ProcessState.PENDING
        self.future: "Future[ProcessHandle]" = Future()

    @property
    def succeeded(self) -> bool:
        return self.state is ProcessState.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.state is ProcessState.FAILED

    @property
    def stdout(self) -> str:
        return "\n".join(self.stdout_lines)

    @property
    def stderr(self) -> str:
        return "\n".join(self.stderr_lines)

    def wait(self, timeout: Optional[float] = None) -> "ProcessHandle":
        """
        Block until the process has finished.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            This handle

        Raises:
            concurrent.futures.TimeoutError: If the process is still running
        """
        return self.future.result(timeout)

    def _finish(self, returncode: int, stdout: str, stderr: str) -> None:
        self.stdout_lines = _lines(stdout)
        self.stderr_lines = _lines(stderr)
        if returncode < 0:
            self.signal = -returncode
        else:
            self.exit_code = returncode
        self.state = ProcessState.SUCCEEDED if returncode == 0 else ProcessState.FAILED
        logger.debug(
            "git %s -> %s",
            self.command.name,
            returncode,
            extra={
                "argv": self.command.argv,
                "cwd": self.cwd,
                "stdout": self.stdout,
                "stderr": self.stderr,
            },
        )

    def _abort(self, exc: Exception) -> None:
        self.stderr_lines = [f"fatal: {exc}"]
        self.exit_code = getattr(exc, "errno", None) or 1
        self.state = ProcessState.FAILED
        logger.debug("git %s did not complete: %s", self.command.name, exc)

    def __repr__(self) -> str:
        return f"<ProcessHandle {self.command.name!r} state={self.state.value} exit_code={self.exit_code} signal={self.signal}>"


class ProcessRunner:
    """Runs Commands in a working directory, blocking or in the background."""

    def __init__(self, env: Optional[dict] = None) -> None:
        self.env = env

    def _environ(self) -> Optional[dict]:
        if self.env is None:
            return None
        environ = dict(os.environ)
        environ.update(self.env)
        return environ

    def run(self, command: Command, cwd: str) -> ProcessHandle:
        """
        Execute a command and wait for it to exit.

        Args:
            command: The command to execute
            cwd: Working directory of the child process

        Returns:
            A finished ProcessHandle (succeeded or failed)
        """
        handle = ProcessHandle(command, cwd)
        try:
            completed = subprocess.run(  # noqa: S603 - argv list, no shell
                command.argv,
                cwd=cwd,
                env=self._environ(),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except OSError as exc:
            handle._abort(exc)
        else:
            handle._finish(completed.returncode, completed.stdout, completed.stderr)
        handle.future.set_result(handle)
        return handle

    def start(
        self,
        command: Command,
        cwd: str,
        on_complete: Optional[Callable[[ProcessHandle], None]] = None,
    ) -> ProcessHandle:
        """
        Spawn a command and return without waiting for it.

        Args:
            command: The command to execute
            cwd: Working directory of the child process
            on_complete: Called with the handle from the watcher thread once
                the process has exited, before handle.future resolves

        Returns:
            A pending ProcessHandle
        """
        handle = ProcessHandle(command, cwd)
        try:
            proc = subprocess.Popen(  # noqa: S603 - argv list, no shell
                command.argv,
                cwd=cwd,
                env=self._environ(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
            )
        except OSError as exc:
            handle._abort(exc)
            self._notify(handle, on_complete)
            return handle

        thread = threading.Thread(
            target=self._watch,
            args=(handle, proc, on_complete),
            name=f"gitwrap-{command.name}",
            daemon=True,
        )
        thread.start()
        return handle

    def _watch(self, handle, proc, on_complete):
        try:
            stdout, stderr = proc.communicate()
            handle._finish(proc.returncode, stdout, stderr)
        except Exception as exc:
            logger.exception("Collecting output of git %s failed", handle.command.name)
            proc.kill()
            proc.wait()
            handle._abort(exc)
        finally:
            self._notify(handle, on_complete)

    @staticmethod
    def _notify(handle, on_complete):
        try:
            if on_complete is not None:
                on_complete(handle)
        finally:
            handle.future.set_result(handle)
