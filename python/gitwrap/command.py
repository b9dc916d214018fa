"""
Construction of git command lines.

A Command is an immutable argument vector: the executable, the (possibly
two-word) subcommand, rendered options, positional arguments and an
optional path list separated by ``--``.
"""

import shlex
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

# git subcommands that are themselves two words
COMPOUND_SUBCOMMANDS = frozenset([
    "remote-add",
    "remote-remove",
    "remote-rename",
    "remote-set-url",
    "remote-get-url",
    "stash-pop",
    "stash-push",
    "stash-list",
    "stash-drop",
])

PATH_SEPARATOR = "--"


def split_subcommand(token: str) -> Tuple[str, ...]:
    """
    Translate a subcommand token into the words git expects.

    Args:
        token: A subcommand such as "branch", "rev-parse" or "remote-add"

    Returns:
        ("remote", "add") for compound tokens, (token,) otherwise
    """
    if token in COMPOUND_SUBCOMMANDS:
        return tuple(token.split("-", 1))
    return (token,)


def _flag(key: str) -> str:
    if key.startswith("-"):
        return key
    if len(key) == 1:
        return f"-{key}"
    return f"--{key}"


def render_options(options: Optional[Mapping[str, Any]]) -> Tuple[List[str], List[str]]:
    """
    Render an option map into argv tokens.

    Args:
        options: Mapping of flag to value. True or None renders the bare flag,
            False drops it, a list repeats the flag once per item and any
            other value is rendered as a single following token. The "--"
            key holds a path list.

    Returns:
        Tuple of (option tokens, path tokens)
    """
    tokens: List[str] = []
    paths: List[str] = []
    for key, value in (options or {}).items():
        if key == PATH_SEPARATOR:
            paths.extend(str(p) for p in _as_list(value))
            continue
        flag = _flag(key)
        if value is None or value is True:
            tokens.append(flag)
        elif value is False:
            continue
        elif isinstance(value, (list, tuple)):
            for item in value:
                tokens.extend([flag, str(item)])
        else:
            tokens.extend([flag, str(value)])
    return tokens, paths


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass(frozen=True)
class Command:
    """A single git invocation, built once and never mutated."""

    executable: str
    subcommand: Tuple[str, ...]
    args: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()
    paths: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        executable: str,
        subcommand: str,
        args: Sequence[Any] = (),
        options: Optional[Mapping[str, Any]] = None,
        paths: Iterable[Any] = (),
    ) -> "Command":
        """
        Build a command from a subcommand token, arguments and options.

        Args:
            executable: Absolute path of the git binary
            subcommand: Subcommand token, e.g. "clone" or "remote-add"
            args: Positional arguments, order preserved
            options: Option map, see render_options()
            paths: Paths appended after a "--" terminator

        Returns:
            Command object
        """
        option_tokens, option_paths = render_options(options)
        all_paths = tuple(option_paths) + tuple(str(p) for p in paths)
        return cls(
            executable=str(executable),
            subcommand=split_subcommand(subcommand),
            args=tuple(str(a) for a in args),
            options=tuple(option_tokens),
            paths=all_paths,
        )

    @property
    def name(self) -> str:
        """The subcommand as typed on a shell, e.g. "remote add"."""
        return " ".join(self.subcommand)

    @property
    def argv(self) -> List[str]:
        argv = [self.executable, *self.subcommand, *self.options, *self.args]
        if self.paths:
            argv.append(PATH_SEPARATOR)
            argv.extend(self.paths)
        return argv

    def __str__(self) -> str:
        return " ".join(shlex.quote(token) for token in self.argv)

