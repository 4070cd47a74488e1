"""Analysis request validation.

Validation runs once, at the service boundary, before any git call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

from ..exceptions import RequestValidationError
from ..models import ANALYSIS_MODES, COMPARE_SOURCES, AnalysisRequest

_REQUIRED_STRINGS = (
    ("repo_path", "repoPath"),
    ("base_branch", "baseBranch"),
    ("compare_branch", "compareBranch"),
)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: List[str] = field(default_factory=list)


def validate_request(request: AnalysisRequest) -> ValidationResult:
    """Check required fields, enum values and ignore-pattern shape."""
    errors: List[str] = []

    for attr, label in _REQUIRED_STRINGS:
        value = getattr(request, attr)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"{label} must be a non-empty string")

    if request.mode not in ANALYSIS_MODES:
        errors.append(f"mode must be one of {', '.join(ANALYSIS_MODES)} (got {request.mode!r})")

    if request.compare_source not in COMPARE_SOURCES:
        errors.append(
            f"compareSource must be one of {', '.join(COMPARE_SOURCES)} "
            f"(got {request.compare_source!r})"
        )

    patterns = request.ignore_patterns
    if not isinstance(patterns, (list, tuple)):
        errors.append("ignorePatterns must be a list of strings")
    else:
        for index, pattern in enumerate(patterns):
            if not isinstance(pattern, str) or not pattern:
                errors.append(f"ignorePatterns[{index}] must be a non-empty string")

    return ValidationResult(ok=not errors, errors=errors)


def coerce_request(request: Union[AnalysisRequest, Mapping[str, Any]]) -> AnalysisRequest:
    """Accept a request object or mapping and return a validated request.

    Raises:
        RequestValidationError: If the request is malformed
    """
    if isinstance(request, AnalysisRequest):
        candidate = request
    elif isinstance(request, Mapping):
        candidate = AnalysisRequest.from_dict(request)
    else:
        raise RequestValidationError([f"request must be a mapping, got {type(request).__name__}"])

    result = validate_request(candidate)
    if not result.ok:
        raise RequestValidationError(result.errors)

    if isinstance(candidate.ignore_patterns, list):
        # Keep cache keys hashable
        candidate = AnalysisRequest(
            repo_path=candidate.repo_path,
            base_branch=candidate.base_branch,
            compare_branch=candidate.compare_branch,
            mode=candidate.mode,
            compare_source=candidate.compare_source,
            ignore_patterns=tuple(candidate.ignore_patterns),
        )
    return candidate
