#!/usr/bin/env python3
"""
Basic usage examples for gitwrap.
"""

import os
import subprocess
import sys
import tempfile

import gitwrap


def main():
    print(f"gitwrap version: {gitwrap.__version__}")

    # Example 1: Open an existing repository
    path = sys.argv[1] if len(sys.argv) > 1 else os.getcwd()
    try:
        repo = gitwrap.Repository.open(path)
        print(f"\nSuccessfully opened existing repository:")
        print(f"  Working directory: {repo.project_dir}")
        print(f"  Git binary: {repo.git.binary}")
        print(f"  Current branch: {repo.current_branch()}")
        print(f"  Branches: {', '.join(repo.list_branches())}")
        for commit in repo.list_commits(limit=5):
            print(f"  {commit.sha[:10]} {commit.description}")
    except gitwrap.GitwrapError as e:
        print(f"\nCould not open {path} as a repository: {e}")

    # Example 2: Create a new repository and work with branches
    with tempfile.TemporaryDirectory() as temp_dir:
        print(f"\nCreating a new repository in {temp_dir}")
        new_repo = gitwrap.Repository.init(temp_dir)

        with open(os.path.join(temp_dir, "README.md"), "w") as f:
            f.write("# Example\n")
        subprocess.run(["git", "add", "README.md"], cwd=temp_dir, check=True)
        subprocess.run(["git", "commit", "-m", "Initial commit"], cwd=temp_dir, check=True)

        new_repo.checkout("feature", create_branch=True)
        print(f"  Current branch: {new_repo.current_branch()}")
        print(f"  Branches: {new_repo.list_branches()}")

        head = new_repo.list_commits(limit=1)[0]
        print(f"  HEAD is a commit: {new_repo.is_commit(head.sha)}")

        try:
            new_repo.checkout("does-not-exist")
        except gitwrap.CommandError as e:
            print(f"  Checkout failed as expected (exit {e.exit_code}): {e.detail}")


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
