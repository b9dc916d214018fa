"""
Tests for the git config mirror.
"""

import os

import pytest

import gitwrap
import gitwrap.config
from gitwrap.config import RepositoryConfig, Remote, User, config_paths, load_config

from conftest import requires_git, run_git

LOCAL_CONFIG = """\
[core]
\trepositoryformatversion = 0
\tfilemode = true
\tbare = false
[remote "origin"]
\turl = git@example.com:team/project.git
\tfetch = +refs/heads/*:refs/remotes/origin/*
\tfetch = +refs/tags/*:refs/tags/*
[branch "main"]
\tremote = origin
\tmerge = refs/heads/main
[user]
\temail = local@example.com
"""


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)
    return path


class TestConfig:
    """Tests for reading and merging config files."""

    def test_merge_git_config_file(self, tmp_path):
        """Remote, branch and user sections are read from a git config file."""
        path = write(str(tmp_path / "config"), LOCAL_CONFIG)
        config = RepositoryConfig()

        assert config.merge_file(path) is True
        assert config.remotes == {"origin": Remote("origin", "git@example.com:team/project.git")}
        assert config.branches == ["main"]
        assert config.user == User(name=None, email="local@example.com")
        assert not config.is_user_configured

    def test_missing_file_is_skipped(self, tmp_path):
        """A missing config file is not an error."""
        config = RepositoryConfig()
        assert config.merge_file(str(tmp_path / "nope")) is False
        assert config.remotes == {}

    def test_later_files_win(self, tmp_path, git_home):
        """System, global and local files are merged in that order."""
        project = tmp_path / "project"
        write(gitwrap.config.SYSTEM_CONFIG_PATH, '[remote "origin"]\n\turl = /srv/system.git\n[remote "mirror"]\n\turl = /srv/mirror.git\n')
        write(str(git_home / ".gitconfig"), "[user]\n\tname = Global User\n\temail = global@example.com\n")
        write(str(project / ".git" / "config"), LOCAL_CONFIG)

        config = load_config(str(project))

        assert config.remotes["origin"].url == "git@example.com:team/project.git"
        assert config.remotes["mirror"].url == "/srv/mirror.git"
        assert config.user.name == "Global User"
        assert config.user.email == "local@example.com"
        assert config.is_user_configured

    def test_global_path_follows_home(self, tmp_path, git_home):
        """The global config is looked up under the current HOME."""
        paths = config_paths(str(tmp_path / "project"))
        assert paths[0] == gitwrap.config.SYSTEM_CONFIG_PATH
        assert paths[1] == str(git_home / ".gitconfig")
        assert paths[2] == str(tmp_path / "project" / ".git" / "config")

    def test_quoted_values(self, tmp_path):
        """Double-quoted values are unquoted."""
        path = write(str(tmp_path / "config"), '[user]\n\tname = "Quoted Name"\n\temail = q@example.com\n')
        config = RepositoryConfig()
        config.merge_file(path)
        assert config.user.name == "Quoted Name"

    def test_remote_without_url_is_ignored(self, tmp_path):
        """A remote section without a url does not create a remote."""
        path = write(str(tmp_path / "config"), '[remote "broken"]\n\tfetch = +refs/heads/*:refs/remotes/broken/*\n')
        config = RepositoryConfig()
        config.merge_file(path)
        assert config.remotes == {}

    def test_unparsable_file(self, tmp_path):
        """A file that is not a git config raises ConfigError."""
        path = write(str(tmp_path / "config"), "this is not a config file\n")
        with pytest.raises(gitwrap.ConfigError):
            RepositoryConfig().merge_file(path)

    def test_patching(self):
        """The mirror can be patched without touching disk."""
        config = RepositoryConfig()
        config.add_remote("origin", "/srv/a.git")
        assert config.rename_remote("origin", "upstream") == Remote("upstream", "/srv/a.git")
        assert config.rename_remote("missing", "x") is None
        assert config.remove_remote("upstream") == Remote("upstream", "/srv/a.git")
        assert config.remove_remote("upstream") is None


@requires_git
class TestConfigFromGit:
    """Tests reading config files written by git itself."""

    def test_config_written_by_git(self, repo_path):
        """Config files produced by git commands are understood."""
        run_git(repo_path, "remote", "add", "origin", "https://example.com/repo.git")
        run_git(repo_path, "config", "--add", "remote.origin.fetch", "+refs/tags/*:refs/tags/*")
        run_git(repo_path, "config", "branch.main.remote", "origin")

        config = load_config(repo_path)

        assert config.remotes["origin"].url == "https://example.com/repo.git"
        assert "main" in config.branches
        assert config.user == User("Test User", "test@example.com")
