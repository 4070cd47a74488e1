"""Configuration and request validation exceptions."""

from typing import Any, List

from .base import BranchLensError


class ConfigurationError(BranchLensError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class RequestValidationError(BranchLensError):
    """Raised when an analysis request is malformed. Checked before any git call."""

    def __init__(self, errors: List[str]):
        super().__init__("Invalid analysis request: " + "; ".join(errors))
        self.errors = list(errors)
