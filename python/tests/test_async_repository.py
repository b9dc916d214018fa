import os

import pytest

import gitwrap
from gitwrap.asyncio import Repository

from conftest import commit_file, requires_git

pytestmark = [requires_git, pytest.mark.asyncio]


# Fixture for creating a simple git repository
@pytest.fixture
def simple_repo_path(tmp_path):
    path = str(tmp_path / "simple")
    gitwrap.Repository.init(path)
    commit_file(path, "README.md", "# Simple\n", "Initial commit")
    return path


# Test basic repository operations
async def test_open_and_init(tmp_path):
    repo = await Repository.init(str(tmp_path / "fresh"))
    assert os.path.isdir(os.path.join(repo.project_dir, ".git"))

    reopened = await Repository.open(repo.project_dir)
    assert reopened.project_dir == repo.project_dir
    assert reopened.sync.initialized


async def test_open_invalid(tmp_path):
    with pytest.raises(gitwrap.RepositoryError):
        await Repository.open(str(tmp_path))


async def test_branches(simple_repo_path):
    repo = await Repository.open(simple_repo_path)

    await repo.checkout("feature", create_branch=True)
    assert await repo.current_branch() == "feature"
    assert sorted(await repo.list_branches()) == ["feature", "main"]


async def test_commits(simple_repo_path):
    repo = await Repository.open(simple_repo_path)

    commits = await repo.list_commits()
    assert [c.description for c in commits] == ["Initial commit"]
    assert await repo.is_commit(commits[0].sha)
    assert not await repo.is_commit("nonsense")


async def test_remotes(simple_repo_path):
    repo = await Repository.open(simple_repo_path)

    await repo.add_remote("x", "https://example.com/x.git")
    assert repo.list_remotes("x") == gitwrap.Remote("x", "https://example.com/x.git")

    await repo.rename_remote("x", "y")
    await repo.remove_remote("y")
    await repo.remove_remote("y")
    assert repo.list_remotes() == []


async def test_clone(tmp_path, remote_url):
    repo = await Repository.clone(str(tmp_path / "clone"), remote_url)

    assert repo.sync.initialized
    assert repo.list_remotes("origin").url == remote_url
    assert await repo.current_branch() == "main"


async def test_clone_failure(tmp_path):
    with pytest.raises(gitwrap.CommandError):
        await Repository.clone(str(tmp_path / "clone"), str(tmp_path / "missing.git"))
