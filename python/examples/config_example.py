"""
Example demonstrating the config mirror and remote management with gitwrap.
"""

import sys
import tempfile

import gitwrap


def display_section(title):
    """Display a section title with formatting."""
    print(f"\n{'-' * 80}")
    print(f" {title}")
    print(f"{'-' * 80}")


def main():
    with tempfile.TemporaryDirectory() as temp_dir:
        repo = gitwrap.Repository.init(temp_dir)

        display_section("User Information")
        user = repo.config.user
        if repo.config.is_user_configured:
            print(f"  user.name = {user.name}")
            print(f"  user.email = {user.email}")
        else:
            print("  No user configured, stash() would raise ConfigError")

        display_section("Remotes")
        repo.add_remote("origin", "https://example.com/project.git")
        repo.add_remote("mirror", "https://mirror.example.com/project.git")
        for remote in repo.list_remotes():
            print(f"  {remote.name} -> {remote.url}")

        repo.rename_remote("mirror", "backup")
        repo.remove_remote("origin")
        repo.remove_remote("origin")
        print(f"  After rename and removal: {[r.name for r in repo.list_remotes()]}")

        display_section("Branches with tracking configuration")
        for branch in repo.config.branches or ["<none>"]:
            print(f"  {branch}")


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
