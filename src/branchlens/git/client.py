"""Async git command runner.

The analysis core only talks to git through the ``GitRunner`` protocol, so
tests inject scripted fakes and production code uses ``GitClient``, which
spawns ``git`` with asyncio subprocesses rooted at the repository path.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from ..exceptions import GitCommandError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Keep non-ASCII paths literal in diff output instead of octal-escaped
_BASE_OPTIONS = ("-c", "core.quotepath=off")

_DEFAULT_REMOTE_PREFIX = "origin/"


class GitRunner(Protocol):
    async def raw(self, args: Sequence[str]) -> str: ...

    async def check_is_repo(self) -> bool: ...


class GitClient:
    """Run git subcommands in one repository and return their stdout."""

    def __init__(self, repo_path: str, binary: str = "git"):
        self.repo_path = str(Path(repo_path).expanduser())
        self.binary = binary

    async def raw(self, args: Sequence[str]) -> str:
        """Execute ``git <args>``; raise GitCommandError on failure."""
        argv = list(args)
        logger.debug("git %s (cwd=%s)", " ".join(argv), self.repo_path)
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *_BASE_OPTIONS,
                *argv,
                cwd=self.repo_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            # Missing binary or missing/invalid working directory
            raise GitCommandError(argv, None, str(e)) from e

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise GitCommandError(
                argv, proc.returncode, stderr.decode("utf-8", errors="replace")
            )
        return stdout.decode("utf-8", errors="replace")

    async def check_is_repo(self) -> bool:
        try:
            output = await self.raw(["rev-parse", "--is-inside-work-tree"])
        except GitCommandError:
            return False
        return output.strip() == "true"

    async def current_branch(self) -> Optional[str]:
        """Checked-out branch name, or None on a detached HEAD."""
        name = (await self.raw(["rev-parse", "--abbrev-ref", "HEAD"])).strip()
        return name if name and name != "HEAD" else None

    async def list_branches(self) -> List[str]:
        """Sorted short names of local and remote-tracking branches."""
        output = await self.raw(["branch", "--all", "--format=%(refname)"])
        try:
            current = await self.current_branch()
        except GitCommandError:
            # Unborn branch in a fresh repository
            current = None
        return normalize_branch_names(output.splitlines(), current)


def normalize_branch_names(refnames: Iterable[str], current: Optional[str] = None) -> List[str]:
    """Reduce full refnames to unique short branch names.

    ``refs/heads/x`` and ``refs/remotes/origin/x`` become ``x``. Other remotes
    keep their prefix (``upstream/x``) so every name stays resolvable by git.
    HEAD aliases and detached-HEAD placeholders are dropped.
    """
    names = set()

    for refname in refnames:
        refname = refname.strip()
        if refname.startswith("refs/heads/"):
            name = refname[len("refs/heads/"):]
        elif refname.startswith("refs/remotes/"):
            name = refname[len("refs/remotes/"):]
            if name.startswith(_DEFAULT_REMOTE_PREFIX):
                name = name[len(_DEFAULT_REMOTE_PREFIX):]
        else:
            continue

        if not name or name == "HEAD" or name.endswith("/HEAD"):
            continue
        names.add(name)

    if current and current != "HEAD":
        names.add(current)

    return sorted(names)


def create_git_client(repo_path: str, binary: str = "git") -> GitClient:
    """Default git factory used by the analysis service."""
    return GitClient(repo_path, binary=binary)
