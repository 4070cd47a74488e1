"""Analysis-related exceptions: repository state and git subprocess failures.

Messages are user-facing and surfaced verbatim, so none of these carry
``details`` (which would be appended to ``str()``).
"""

from typing import Optional, Sequence

from .base import BranchLensError


class AnalysisError(BranchLensError):
    """Base class for analysis-related errors."""

    pass


class RepositoryStateError(AnalysisError):
    """The repository is in a state that cannot satisfy the request."""

    pass


class MergeBaseNotFoundError(RepositoryStateError):
    """Raised when ``git merge-base`` yields nothing for the two branches."""

    def __init__(self, base_branch: str, compare_branch: str):
        super().__init__("Unable to resolve merge base for the selected branches.")
        self.base_branch = base_branch
        self.compare_branch = compare_branch


class NoActiveBranchError(RepositoryStateError):
    """Raised for working-tree comparisons on a detached HEAD."""

    def __init__(self):
        super().__init__("Working tree comparison requires an active branch checkout.")


class CheckoutMismatchError(RepositoryStateError):
    """Raised when the checked-out branch is not the compare branch."""

    def __init__(self, expected_branch: str, current_branch: str):
        super().__init__(
            f'Working tree comparison requires "{expected_branch}" to be checked out. '
            f'Current branch is "{current_branch}". '
            f'Switch to "{expected_branch}" or use Branch Tip source.'
        )
        self.expected_branch = expected_branch
        self.current_branch = current_branch


class NotARepositoryError(AnalysisError):
    """Raised when a path is not inside a git work tree."""

    def __init__(self, path: str):
        super().__init__(f"Selected directory is not a Git repository: {path}")
        self.path = path


class GitCommandError(AnalysisError):
    """Raised when a git invocation fails (non-zero exit or missing binary)."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int],
        stderr: str = "",
    ):
        command = " ".join(["git", *args])
        stderr = (stderr or "").strip()
        if stderr:
            message = stderr
        elif returncode is None:
            message = f"Unable to run `{command}`"
        else:
            message = f"`{command}` exited with status {returncode}"
        super().__init__(message)
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
