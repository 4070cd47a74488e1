"""Tests for the Branch Lens exception hierarchy."""

import pytest

from branchlens.exceptions import (
    AnalysisError,
    BranchLensError,
    CheckoutMismatchError,
    ConfigurationError,
    GitCommandError,
    InvalidConfigError,
    MergeBaseNotFoundError,
    NoActiveBranchError,
    NotARepositoryError,
    RepositoryStateError,
    RequestValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error,parent",
        [
            (MergeBaseNotFoundError("main", "feature"), RepositoryStateError),
            (NoActiveBranchError(), RepositoryStateError),
            (CheckoutMismatchError("feature", "main"), RepositoryStateError),
            (NotARepositoryError("/tmp/x"), AnalysisError),
            (GitCommandError(["status"], 1), AnalysisError),
            (InvalidConfigError("k", 1, "bad"), ConfigurationError),
            (RequestValidationError(["x"]), BranchLensError),
        ],
    )
    def test_parents(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, BranchLensError)


class TestMessages:
    def test_details_are_appended(self):
        error = BranchLensError("Something failed", details={"path": "a.py"})
        assert str(error) == "Something failed (path=a.py)"

    def test_plain_message(self):
        assert str(BranchLensError("Plain")) == "Plain"

    def test_checkout_mismatch_message(self):
        assert str(CheckoutMismatchError("feature", "main")) == (
            'Working tree comparison requires "feature" to be checked out. '
            'Current branch is "main". Switch to "feature" or use Branch Tip source.'
        )

    def test_not_a_repository_message(self):
        error = NotARepositoryError("/tmp/x")
        assert str(error) == "Selected directory is not a Git repository: /tmp/x"
        assert error.path == "/tmp/x"

    def test_invalid_config_carries_reason(self):
        error = InvalidConfigError("snapshot_cache_limit", 0, "must be at least 1")
        assert error.reason == "must be at least 1"
        assert "reason=must be at least 1" in str(error)

    def test_request_validation_joins_errors(self):
        error = RequestValidationError(["a is bad", "b is bad"])
        assert str(error) == "Invalid analysis request: a is bad; b is bad"
        assert error.errors == ["a is bad", "b is bad"]
