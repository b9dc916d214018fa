"""
Configuration for pytest.
"""
import os
import shutil
import subprocess
import time

import pytest

import gitwrap.config

GLOBAL_GITCONFIG = """\
[user]
\tname = Test User
\temail = test@example.com
[init]
\tdefaultBranch = main
[push]
\tdefault = simple
"""

GLOBAL_GITCONFIG_NO_USER = """\
[init]
\tdefaultBranch = main
"""

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    """Print test name and docstring at the start of each test."""
    class_name = item.cls.__name__ if item.cls else "None"
    test_doc = item.obj.__doc__ or "No docstring provided"

    print(f"\n{'='*80}")
    print(f"RUNNING TEST: {item.module.__name__}.{class_name}.{item.name}")
    print(f"DESCRIPTION: {test_doc.strip()}")
    print(f"START TIME: {time.strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"{'='*80}")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()

    if report.when == "call":
        class_name = item.cls.__name__ if item.cls else "None"
        status = "PASSED" if report.passed else "FAILED" if report.failed else "SKIPPED"
        print(f"\nRESULT: {status} - {item.module.__name__}.{class_name}.{item.name}")
        if report.failed:
            print(f"ERROR: {report.longreprtext}")


def run_git(cwd, *args):
    """Run git outside of gitwrap and return its stripped stdout."""
    completed = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout.strip()


def commit_file(cwd, name, content, message):
    """Write a file, commit it and return the new commit id."""
    with open(os.path.join(cwd, name), "w") as f:
        f.write(content)
    run_git(cwd, "add", name)
    run_git(cwd, "commit", "-m", message)
    return run_git(cwd, "rev-parse", "HEAD")


@pytest.fixture(autouse=True)
def git_home(tmp_path, monkeypatch):
    """Point HOME at a temporary directory with a known global git config."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text(GLOBAL_GITCONFIG)

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setattr(gitwrap.config, "SYSTEM_CONFIG_PATH", str(tmp_path / "etc" / "gitconfig"))
    return home


@pytest.fixture
def no_user_home(git_home):
    """Global git config without a user identity."""
    (git_home / ".gitconfig").write_text(GLOBAL_GITCONFIG_NO_USER)
    return git_home


@pytest.fixture
def repo_path(tmp_path):
    """A working directory with one commit on main."""
    path = tmp_path / "work"
    path.mkdir()
    run_git(path, "init")
    commit_file(path, "README.md", "# Test Repository\n", "Initial commit")
    return str(path)


@pytest.fixture
def remote_url(tmp_path):
    """A bare repository with one commit on main, usable as a remote URL."""
    seed = tmp_path / "seed"
    seed.mkdir()
    run_git(seed, "init")
    commit_file(seed, "README.md", "# Remote Repository\n", "Initial commit")

    bare = tmp_path / "remote.git"
    run_git(tmp_path, "init", "--bare", str(bare))
    run_git(seed, "push", str(bare), "main")
    return str(bare)
