#!/usr/bin/env python3
"""
Example of using the asynchronous API of gitwrap.

Usage: async_repository.py <remote-url>
"""

import asyncio
import shutil
import sys
import tempfile

import gitwrap
from gitwrap.asyncio import Repository


async def main(remote_url):
    """Clone a repository in the background and inspect it."""
    temp_dir = tempfile.mkdtemp()

    try:
        print(f"Cloning {remote_url} into {temp_dir}")
        repo = await Repository.clone(temp_dir, remote_url)

        print(f"Remotes: {repo.list_remotes()}")

        # Run multiple async operations concurrently
        branch, branches, commits = await asyncio.gather(
            repo.current_branch(),
            repo.list_branches(),
            repo.list_commits(limit=5),
        )
        print(f"Current branch: {branch}")
        print(f"Branches: {branches}")
        for commit in commits:
            print(f"  {commit.sha[:10]} {commit.description}")

    except gitwrap.CommandError as e:
        print(f"git failed: {e}")

    finally:
        shutil.rmtree(temp_dir)
        print(f"Cleaned up {temp_dir}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    asyncio.run(main(sys.argv[1]))
