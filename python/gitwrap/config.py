"""
In-memory mirror of a repository's git configuration.

The mirror holds remotes, branch names and the user identity, merged from
the system, global and local config files in that order.
"""

import configparser
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gitwrap.common.errors import ConfigError

logger = logging.getLogger(__name__)

SYSTEM_CONFIG = "system"
GLOBAL_CONFIG = "global"
LOCAL_CONFIG = "local"

SYSTEM_CONFIG_PATH = "/etc/gitconfig"
GLOBAL_CONFIG_PATH = "~/.gitconfig"


@dataclass(frozen=True)
class Remote:
    """A named remote and its URL."""
    name: str
    url: str


@dataclass
class User:
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class RepositoryConfig:
    """Remotes, branches and identity known for one repository."""

    remotes: Dict[str, Remote] = field(default_factory=dict)
    branches: List[str] = field(default_factory=list)
    user: Optional[User] = None

    @property
    def is_user_configured(self) -> bool:
        return self.user is not None and bool(self.user.name) and bool(self.user.email)

    def add_remote(self, name: str, url: str) -> Remote:
        remote = Remote(name, url)
        self.remotes[name] = remote
        return remote

    def remove_remote(self, name: str) -> Optional[Remote]:
        return self.remotes.pop(name, None)

    def rename_remote(self, old: str, new: str) -> Optional[Remote]:
        remote = self.remotes.pop(old, None)
        if remote is None:
            return None
        return self.add_remote(new, remote.url)

    def add_branch(self, name: str) -> None:
        if name not in self.branches:
            self.branches.append(name)

    def merge_file(self, path: str) -> bool:
        """
        Merge the remote, branch and user sections of one config file.

        Args:
            path: Path to a git config file

        Returns:
            True if the file existed and was merged, False if it is missing

        Raises:
            ConfigError: If the file cannot be parsed
        """
        if not os.path.isfile(path):
            return False

        parser = configparser.ConfigParser(
            delimiters=("=",),
            strict=False,
            interpolation=None,
            allow_no_value=True,
            comment_prefixes=("#", ";"),
            inline_comment_prefixes=("#", ";"),
        )
        try:
            with open(path, encoding="utf-8") as fp:
                parser.read_file(fp, source=path)
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise ConfigError(f"Unable to parse git config [{path}]: {exc}") from exc

        for section in parser.sections():
            kind, _, name = section.partition(" ")
            name = name.strip().strip('"')
            if kind == "remote" and name:
                url = _value(parser, section, "url")
                if url:
                    self.add_remote(name, url)
            elif kind == "branch" and name:
                self.add_branch(name)
            elif section == "user":
                user = self.user or User()
                user.name = _value(parser, section, "name") or user.name
                user.email = _value(parser, section, "email") or user.email
                self.user = user
        logger.debug("merged git config %s", path)
        return True


def _value(parser, section, key):
    value = parser.get(section, key, fallback=None)
    if value is None:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return value


def config_paths(project_dir) -> List[str]:
    """
    The config files for a repository, lowest precedence first.

    Args:
        project_dir: Working directory of the repository

    Returns:
        [system, global, local] file paths
    """
    return [
        SYSTEM_CONFIG_PATH,
        os.path.expanduser(GLOBAL_CONFIG_PATH),
        os.path.join(os.fspath(project_dir), ".git", "config"),
    ]


def load_config(project_dir) -> RepositoryConfig:
    """
    Build the config mirror for a repository from disk.

    Missing files at any tier are skipped.

    Raises:
        ConfigError: If one of the existing files cannot be parsed
    """
    config = RepositoryConfig()
    for path in config_paths(project_dir):
        config.merge_file(path)
    return config
