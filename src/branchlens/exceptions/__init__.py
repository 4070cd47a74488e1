"""Exception hierarchy for Branch Lens."""

from .analysis import (
    AnalysisError,
    CheckoutMismatchError,
    GitCommandError,
    MergeBaseNotFoundError,
    NoActiveBranchError,
    NotARepositoryError,
    RepositoryStateError,
)
from .base import BranchLensError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    RequestValidationError,
)

__all__ = [
    "BranchLensError",
    "AnalysisError",
    "RepositoryStateError",
    "MergeBaseNotFoundError",
    "NoActiveBranchError",
    "CheckoutMismatchError",
    "NotARepositoryError",
    "GitCommandError",
    "ConfigurationError",
    "InvalidConfigError",
    "RequestValidationError",
]
