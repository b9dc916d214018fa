"""
The Repository class: a git working directory driven through the git binary.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from gitwrap.common.errors import CommandError, ConfigError, PartialDeleteError, RepositoryError
from gitwrap.config import (
    GLOBAL_CONFIG,
    LOCAL_CONFIG,
    SYSTEM_CONFIG,
    Remote,
    RepositoryConfig,
    load_config,
)
from gitwrap.git import BackgroundResult, Git
from gitwrap.process import ProcessHandle

logger = logging.getLogger(__name__)

_SCOPE_OPTIONS = {
    SYSTEM_CONFIG: "--system",
    GLOBAL_CONFIG: "--global",
    LOCAL_CONFIG: "--local",
}


@dataclass(frozen=True)
class Commit:
    """A commit as listed by ``git log --pretty=oneline``."""
    sha: str
    description: str


@dataclass(frozen=True)
class BranchDeletion:
    """Which halves of a branch deletion were carried out."""
    branch: str
    local: bool
    remote: bool


class Repository:
    """A Git repository.

    Instances are created with init(), clone() or open(). Each one is bound
    to a single working directory and keeps an in-memory mirror of the
    remotes, branches and user identity found in the git config files.

    The mirror is reloaded from disk on construction, when a clone finishes
    and after configure(). add_remote(), remove_remote(), rename_remote()
    and delete_branch() patch it in place instead. reload_config() forces a
    reload. Instances are not safe for concurrent use.
    """

    def __init__(self, git: Git) -> None:
        self._git = git
        self._config = RepositoryConfig()
        self.initialized = False
        self.reload_config()

    @classmethod
    def init(cls, path: Union[str, os.PathLike], remote_url: Optional[str] = None, binary: Optional[str] = None) -> "Repository":
        """
        Initialize a repository at the given path.

        Args:
            path: Directory for the repository, created if missing
            remote_url: If given, added as "origin" and pushed with upstream tracking
            binary: Path to the git binary

        Returns:
            Repository object

        Raises:
            BinaryError: If the git binary is unusable
            CommandError: If git init, remote add or push fails
        """
        path = os.path.abspath(os.fspath(path))
        os.makedirs(path, exist_ok=True)

        git = Git(path, binary)
        git.exec("init")

        repo = cls(git)
        logger.info("initialized git repository in %s", path)

        if remote_url is not None:
            repo.add_remote("origin", remote_url)
            repo.set_upstream()

        return repo

    @classmethod
    def clone(
        cls,
        path: Union[str, os.PathLike],
        remote_url: str,
        background: bool = False,
        binary: Optional[str] = None,
        on_success: Optional[Callable[["Repository"], None]] = None,
        on_error: Optional[Callable[[CommandError], None]] = None,
    ) -> Union["Repository", BackgroundResult]:
        """
        Clone a remote repository into the given path.

        Args:
            path: Target directory, created if missing
            remote_url: URL of the repository to clone
            background: If True, return immediately with a BackgroundResult
            binary: Path to the git binary
            on_success: Background only, called with the Repository once it is ready
            on_error: Background only, called with the CommandError of a failed clone

        Returns:
            The Repository, or a BackgroundResult resolving to it. In
            background mode the repository is only usable once the result
            has resolved.

        Raises:
            BinaryError: If the git binary is unusable
            CommandError: If the clone or the upstream push fails (sync mode)
        """
        path = os.path.abspath(os.fspath(path))
        os.makedirs(path, exist_ok=True)

        git = Git(path, binary)
        repo = cls(git)
        args = [remote_url, path]

        if not background:
            git.exec("clone", args, {"--verbose": True})
            repo._finish_clone()
            return repo

        def finish(handle: ProcessHandle) -> "Repository":
            repo._finish_clone()
            if on_success is not None:
                on_success(repo)
            return repo

        logger.info("cloning %s into %s in the background", remote_url, path)
        return git.exec_background("clone", args, {"--verbose": True}, on_success=finish, on_error=on_error)

    @classmethod
    def open(cls, path: Union[str, os.PathLike], binary: Optional[str] = None) -> "Repository":
        """
        Open an existing repository at the given path.

        Args:
            path: Working directory of the repository
            binary: Path to the git binary

        Returns:
            Repository object

        Raises:
            RepositoryError: If the path is not a directory or has no .git/config
            BinaryError: If the git binary is unusable
        """
        path = os.fspath(path)
        if not os.path.isdir(path):
            raise RepositoryError(f"[{path}] not found.")

        if not os.path.isfile(os.path.join(path, ".git", "config")):
            raise RepositoryError(f"[{path}] is not a git repo.")

        return cls(Git(os.path.abspath(path), binary))

    def _finish_clone(self) -> None:
        self.reload_config()
        self.set_upstream()
        logger.info("cloned repository into %s", self.project_dir)

    @property
    def git(self) -> Git:
        return self._git

    @property
    def project_dir(self) -> str:
        return self._git.project_dir

    @property
    def config(self) -> RepositoryConfig:
        return self._config

    def reload_config(self) -> RepositoryConfig:
        """
        Rebuild the config mirror from the system, global and local files.

        Raises:
            ConfigError: If an existing config file cannot be parsed
        """
        self._config = load_config(self.project_dir)
        if os.path.isfile(os.path.join(self.project_dir, ".git", "config")):
            self.initialized = True
        return self._config

    def list_branches(self) -> List[str]:
        """
        List local branches.

        Returns:
            Branch names without the current-branch and worktree markers.
            A detached HEAD is not listed.
        """
        handle = self._git.exec("branch")
        branches = []
        for line in handle.stdout_lines:
            name = line[2:].strip() if line[:1] in ("*", "+") else line.strip()
            if name and not name.startswith("("):
                branches.append(name)
        return branches

    def current_branch(self) -> str:
        """
        Get the name of the checked out branch ("HEAD" when detached).

        Raises:
            CommandError: If HEAD cannot be resolved, e.g. before the first commit
        """
        handle = self._git.exec("rev-parse", options={"--abbrev-ref": "HEAD"})
        lines = [line.strip() for line in handle.stdout_lines if line.strip()]
        return lines[-1] if lines else ""

    def checkout(self, refspec: str, create_branch: bool = False, branch_name: Optional[str] = None) -> ProcessHandle:
        """
        Check out a refspec, optionally creating a branch.

        Args:
            refspec: Branch, tag or commit to check out
            create_branch: Create a new branch with ``-b``
            branch_name: Name of the new branch, defaults to refspec
        """
        args = [refspec]
        options = {}
        if create_branch:
            name = branch_name or refspec
            options["-b"] = name
            if name == refspec:
                args = []
        return self._git.exec("checkout", args, options)

    def delete_branch(self, branch: str, force: bool = True, remote: bool = False) -> BranchDeletion:
        """
        Delete a branch locally and optionally on origin.

        The remote delete only runs after the local delete succeeded. Nothing
        is rolled back if it fails.

        Args:
            branch: Branch to delete
            force: Use -D instead of -d (which refuses unmerged branches)
            remote: Also push ``:branch`` to origin

        Returns:
            BranchDeletion describing what was deleted

        Raises:
            CommandError: If the local delete fails
            PartialDeleteError: If the local delete succeeded but the remote one failed
        """
        key = "-D" if force else "-d"
        self._git.exec("branch", options={key: branch})
        if branch in self._config.branches:
            self._config.branches.remove(branch)

        if not remote:
            return BranchDeletion(branch, local=True, remote=False)

        try:
            self._git.exec("push", ["origin", f":{branch}"])
        except CommandError as exc:
            raise PartialDeleteError(
                f"[push] failed. Branch {branch} was deleted locally but not on origin. {exc.detail}".rstrip(),
                process=exc.process,
                exit_code=exc.exit_code,
                detail=exc.detail,
            ) from exc
        return BranchDeletion(branch, local=True, remote=True)

    def list_commits(self, offset: int = 0, limit: int = -1) -> List[Commit]:
        """
        List commits reachable from HEAD, newest first.

        Args:
            offset: Number of commits to skip
            limit: Maximum number of commits, negative for all

        Returns:
            List of Commit objects
        """
        options = {"--pretty=oneline": True}
        if offset > 0:
            options["--skip"] = offset
        if limit >= 0:
            options["-n"] = limit

        handle = self._git.exec("log", options=options)
        commits = []
        for line in handle.stdout_lines:
            if not line.strip():
                continue
            sha, _, description = line.partition(" ")
            commits.append(Commit(sha, description))
        return commits

    def is_commit(self, sha: str) -> bool:
        """
        Check whether ``sha`` names a commit in this repository.

        Returns:
            True if it resolves to a commit, False otherwise (including on
            any git failure)
        """
        try:
            self._git.exec("rev-parse", options={"--quiet": True, "--verify": f"{sha}^{{commit}}"})
        except CommandError:
            return False
        return True

    def configure(self, key: str, value: str, scope: str = LOCAL_CONFIG) -> ProcessHandle:
        """
        Set a configuration option and reload the config mirror.

        Args:
            key: Option name, e.g. "user.name"
            value: Option value
            scope: One of SYSTEM_CONFIG, GLOBAL_CONFIG or LOCAL_CONFIG
        """
        if scope not in _SCOPE_OPTIONS:
            raise ValueError(f"Unknown config scope [{scope}].")
        handle = self._git.exec("config", [key, value], {_SCOPE_OPTIONS[scope]: True})
        self.reload_config()
        return handle

    def fetch(self, include_tags: bool = False) -> ProcessHandle:
        """Fetch upstream changes without applying them."""
        return self._git.exec("fetch", options={"--tags": include_tags})

    def pull(self) -> ProcessHandle:
        """Pull (and apply) upstream changes."""
        return self._git.exec("pull")

    def push(self, remote: str = "origin", branch: Optional[str] = None) -> ProcessHandle:
        args = [remote]
        if branch is not None:
            args.append(branch)
        return self._git.exec("push", args)

    def set_upstream(self, remote: str = "origin", branch: Optional[str] = None) -> ProcessHandle:
        """
        Push and set the branch tracking information.

        Args:
            remote: Remote to track
            branch: Branch to push, defaults to the current one
        """
        return self._git.exec("push", [remote, branch or "HEAD"], {"-u": True})

    def stash(self) -> ProcessHandle:
        """
        Stash local changes.

        Raises:
            ConfigError: If no user name and email are configured
            CommandError: If git stash fails
        """
        if not self._config.is_user_configured:
            raise ConfigError("No user defined.")
        return self._git.exec("stash")

    def pop(self) -> ProcessHandle:
        """Pop stashed changes."""
        return self._git.exec("stash-pop")

    def list_remotes(self, name: Optional[str] = None) -> Union[List[Remote], Optional[Remote]]:
        """
        List known remotes from the config mirror. No process is spawned.

        Args:
            name: If given, return only this remote

        Returns:
            All remotes, or the named remote (None if unknown)
        """
        if name is not None:
            return self._config.remotes.get(name)
        return list(self._config.remotes.values())

    def add_remote(self, name: str, url: str) -> Remote:
        """Add a remote and record it in the config mirror."""
        self._git.exec("remote-add", [name, url])
        return self._config.add_remote(name, url)

    def remove_remote(self, name: str) -> None:
        """
        Remove a remote. Removing a remote that does not exist is not an error.
        """
        try:
            self._git.exec("remote-remove", [name])
        except CommandError as exc:
            missing = "no such remote" in exc.process.stderr.lower()
            if name in self._config.remotes and not missing:
                raise
            logger.warning("remote %s does not exist in %s, nothing to remove", name, self.project_dir)
        self._config.remove_remote(name)

    def rename_remote(self, old: str, new: str) -> Optional[Remote]:
        """
        Rename a remote.

        Raises:
            CommandError: If git refuses, e.g. because ``new`` already exists
        """
        self._git.exec("remote-rename", [old, new])
        remote = self._config.rename_remote(old, new)
        if remote is None:
            self.reload_config()
            remote = self._config.remotes.get(new)
        return remote

    def __repr__(self) -> str:
        return f"<Repository {self.project_dir!r} initialized={self.initialized}>"
