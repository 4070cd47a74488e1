"""Shared test fixtures for Branch Lens tests."""

import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

HAS_GIT = shutil.which("git") is not None

requires_git = pytest.mark.skipif(not HAS_GIT, reason="git not found")


class FakeGit:
    """Scripted stand-in for GitClient that records every argv it receives."""

    def __init__(
        self,
        merge_base: str = "abc123",
        numstat_output: str = "10\t2\tsrc/app.js",
        name_status_output: str = "M\tsrc/app.js",
        current_branch: str = "feature",
        is_repo: bool = True,
    ):
        self.merge_base = merge_base
        self.numstat_output = numstat_output
        self.name_status_output = name_status_output
        self.current_branch = current_branch
        self.is_repo = is_repo
        self.calls: List[List[str]] = []

    async def raw(self, args: Sequence[str]) -> str:
        args = list(args)
        self.calls.append(args)

        if args[0] == "merge-base":
            return f"{self.merge_base}\n"
        if args[0] == "rev-parse":
            return f"{self.current_branch}\n"
        if args[0] == "diff" and args[1] == "--numstat":
            return self.numstat_output
        if args[0] == "diff" and args[1] == "--name-status":
            return self.name_status_output

        raise AssertionError(f"Unexpected git invocation: {' '.join(args)}")

    async def check_is_repo(self) -> bool:
        return self.is_repo

    def commands(self) -> List[str]:
        return [args[0] for args in self.calls]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


def build_request(**overrides) -> Dict:
    """camelCase request mapping with test defaults."""
    request = {
        "repoPath": "/tmp/repo",
        "baseBranch": "main",
        "compareBranch": "feature",
        "mode": "merge-base",
        "compareSource": "branch-tip",
        "ignorePatterns": [],
    }
    request.update(overrides)
    return request


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def commit_file(repo: Path, relative: str, content: str, message: Optional[str] = None) -> None:
    target = repo / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    git(repo, "add", "--all")
    git(repo, "commit", "-q", "-m", message or f"update {relative}")


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Repository with ``main`` and a ``feature`` branch one commit ahead.

    ``main`` holds ``src/app.py`` and ``src/config.py``. ``feature`` modifies
    ``src/app.py``, adds ``src/util.py`` and ``README.md`` and is left checked out.
    """
    if not HAS_GIT:
        pytest.skip("git not found")

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "user.email", "test@test.com")
    git(repo, "config", "user.name", "Test")
    git(repo, "config", "commit.gpgsign", "false")

    (repo / "src").mkdir()
    (repo / "src" / "config.py").write_text(
        "\n".join(f"OPTION_{i} = {i}" for i in range(10)) + "\n", encoding="utf-8"
    )
    commit_file(repo, "src/app.py", "one\ntwo\nthree\n", "init")

    git(repo, "checkout", "-q", "-b", "feature")
    (repo / "src" / "app.py").write_text("one\n2\nthree\nfour\n", encoding="utf-8")
    (repo / "src" / "util.py").write_text("x = 1\ny = 2\n", encoding="utf-8")
    (repo / "README.md").write_text("# readme\n", encoding="utf-8")
    git(repo, "add", "--all")
    git(repo, "commit", "-q", "-m", "feature work")

    return repo
