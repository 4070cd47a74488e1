"""Analysis engine - aggregation, caching and polling over git diffs."""

from .aggregators import build_datasets, build_summary, status_code_to_file_status
from .lru import LruCache
from .poller import AnalysisPoller, PollerState
from .service import (
    DEFAULT_RESULT_CACHE_LIMIT,
    DEFAULT_SNAPSHOT_CACHE_LIMIT,
    AnalysisService,
    build_file_records,
    build_snapshot_signature,
    resolve_numstat_for_path,
)
from .validation import ValidationResult, coerce_request, validate_request

__all__ = [
    "AnalysisService",
    "AnalysisPoller",
    "PollerState",
    "LruCache",
    "ValidationResult",
    "DEFAULT_RESULT_CACHE_LIMIT",
    "DEFAULT_SNAPSHOT_CACHE_LIMIT",
    "build_datasets",
    "build_summary",
    "build_file_records",
    "build_snapshot_signature",
    "coerce_request",
    "resolve_numstat_for_path",
    "status_code_to_file_status",
    "validate_request",
]
