"""
Asynchronous API for gitwrap.

This module provides a non-blocking API for Git operations. Every call runs
the synchronous Repository in a worker thread; clone() awaits the
background clone directly.
"""

import asyncio
import functools
import os
from typing import List, Optional, Union

from gitwrap.config import LOCAL_CONFIG, Remote, RepositoryConfig
from gitwrap.repository import BranchDeletion, Commit, Repository as SyncRepository

__all__ = ["Repository"]


async def _call(func, *args, **kwargs):
    return await asyncio.to_thread(functools.partial(func, *args, **kwargs))


class Repository:
    """An asynchronous Git repository interface."""

    def __init__(self, repository: SyncRepository) -> None:
        self._repository = repository

    @classmethod
    async def open(cls, path: Union[str, os.PathLike], binary: Optional[str] = None) -> "Repository":
        """
        Asynchronously open an existing repository at the given path.

        Raises:
            RepositoryError: If the path is not a git repository
        """
        return cls(await _call(SyncRepository.open, path, binary=binary))

    @classmethod
    async def init(cls, path: Union[str, os.PathLike], remote_url: Optional[str] = None, binary: Optional[str] = None) -> "Repository":
        """
        Asynchronously initialize a repository at the given path.

        Raises:
            CommandError: If git fails
        """
        return cls(await _call(SyncRepository.init, path, remote_url, binary=binary))

    @classmethod
    async def clone(cls, path: Union[str, os.PathLike], remote_url: str, binary: Optional[str] = None) -> "Repository":
        """
        Asynchronously clone a remote repository into the given path.

        Returns:
            Repository object, ready to use

        Raises:
            CommandError: If the clone or the upstream push fails
        """
        result = await _call(SyncRepository.clone, path, remote_url, background=True, binary=binary)
        return cls(await asyncio.wrap_future(result))

    @property
    def sync(self) -> SyncRepository:
        """The underlying synchronous Repository."""
        return self._repository

    @property
    def project_dir(self) -> str:
        return self._repository.project_dir

    @property
    def config(self) -> RepositoryConfig:
        return self._repository.config

    def list_remotes(self, name: Optional[str] = None) -> Union[List[Remote], Optional[Remote]]:
        return self._repository.list_remotes(name)

    async def list_branches(self) -> List[str]:
        return await _call(self._repository.list_branches)

    async def current_branch(self) -> str:
        return await _call(self._repository.current_branch)

    async def checkout(self, refspec: str, create_branch: bool = False, branch_name: Optional[str] = None):
        return await _call(self._repository.checkout, refspec, create_branch, branch_name)

    async def delete_branch(self, branch: str, force: bool = True, remote: bool = False) -> BranchDeletion:
        return await _call(self._repository.delete_branch, branch, force, remote)

    async def list_commits(self, offset: int = 0, limit: int = -1) -> List[Commit]:
        return await _call(self._repository.list_commits, offset, limit)

    async def is_commit(self, sha: str) -> bool:
        return await _call(self._repository.is_commit, sha)

    async def configure(self, key: str, value: str, scope: str = LOCAL_CONFIG):
        return await _call(self._repository.configure, key, value, scope)

    async def fetch(self, include_tags: bool = False):
        return await _call(self._repository.fetch, include_tags)

    async def pull(self):
        return await _call(self._repository.pull)

    async def push(self, remote: str = "origin", branch: Optional[str] = None):
        return await _call(self._repository.push, remote, branch)

    async def set_upstream(self, remote: str = "origin", branch: Optional[str] = None):
        return await _call(self._repository.set_upstream, remote, branch)

    async def stash(self):
        return await _call(self._repository.stash)

    async def pop(self):
        return await _call(self._repository.pop)

    async def add_remote(self, name: str, url: str) -> Remote:
        return await _call(self._repository.add_remote, name, url)

    async def remove_remote(self, name: str) -> None:
        await _call(self._repository.remove_remote, name)

    async def rename_remote(self, old: str, new: str) -> Optional[Remote]:
        return await _call(self._repository.rename_remote, old, new)

    def __repr__(self) -> str:
        return f"<asyncio.Repository {self.project_dir!r}>"
