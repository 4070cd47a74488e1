"""Data models for branch diff analysis.

Every record is a frozen dataclass: cache entries hand out the same objects
to every caller, so nothing here is ever mutated in place. ``to_dict``
methods produce the camelCase JSON contract consumed by charting clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

AnalysisMode = Literal["merge-base", "tip-to-tip"]
CompareSource = Literal["working-tree", "branch-tip"]
FileStatus = Literal["added", "removed", "changed"]

ANALYSIS_MODES: Tuple[str, ...] = ("merge-base", "tip-to-tip")
DEFAULT_ANALYSIS_MODE = ANALYSIS_MODES[0]

COMPARE_SOURCES: Tuple[str, ...] = ("working-tree", "branch-tip")
DEFAULT_COMPARE_SOURCE = COMPARE_SOURCES[0]

FILE_STATUSES: Tuple[str, ...] = ("added", "removed", "changed")

# Chart-ready dataset names, in display order
DATASET_NAMES: Tuple[str, ...] = (
    "fileStatusDonut",
    "lineImpactBars",
    "statusNetDeltaBars",
    "fileTouchSegments",
    "topFilesChurn",
    "directoryTreemap",
    "extensionBreakdown",
    "churnHistogram",
)

# camelCase and snake_case spellings accepted by AnalysisRequest.from_dict
_REQUEST_KEYS = {
    "repo_path": ("repoPath", "repo_path"),
    "base_branch": ("baseBranch", "base_branch"),
    "compare_branch": ("compareBranch", "compare_branch"),
    "mode": ("mode",),
    "compare_source": ("compareSource", "compare_source"),
    "ignore_patterns": ("ignorePatterns", "ignore_patterns"),
}


@dataclass(frozen=True)
class AnalysisRequest:
    """One analysis query. Validated by ``validate_request`` before use."""

    repo_path: str
    base_branch: str
    compare_branch: str
    mode: AnalysisMode = DEFAULT_ANALYSIS_MODE
    compare_source: CompareSource = DEFAULT_COMPARE_SOURCE
    ignore_patterns: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalysisRequest:
        """Build a request from a camelCase or snake_case mapping.

        Values are taken as-is; shape errors are reported by validation,
        not here. ``compareSource`` defaults to ``working-tree``.
        """
        values: Dict[str, Any] = {}
        for attr, keys in _REQUEST_KEYS.items():
            for key in keys:
                if key in data:
                    values[attr] = data[key]
                    break

        patterns = values.get("ignore_patterns", ())

        return cls(
            repo_path=values.get("repo_path", ""),
            base_branch=values.get("base_branch", ""),
            compare_branch=values.get("compare_branch", ""),
            mode=values.get("mode", DEFAULT_ANALYSIS_MODE),
            compare_source=values.get("compare_source", DEFAULT_COMPARE_SOURCE),
            ignore_patterns=patterns if not isinstance(patterns, list) else tuple(patterns),
        )

    @property
    def core_key(self) -> Tuple[str, str, str, str, str]:
        """Identity of the comparison, independent of ignore patterns."""
        return (
            self.repo_path,
            self.base_branch,
            self.compare_branch,
            self.mode,
            self.compare_source,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "repoPath": self.repo_path,
            "baseBranch": self.base_branch,
            "compareBranch": self.compare_branch,
            "mode": self.mode,
            "compareSource": self.compare_source,
            "ignorePatterns": list(self.ignore_patterns),
        }


@dataclass(frozen=True)
class ResolvedRefs:
    """Concrete diff endpoints. ``right_ref`` is the display form."""

    left_ref: str
    right_ref: str
    compare_source: CompareSource
    merge_base: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "leftRef": self.left_ref,
            "rightRef": self.right_ref,
            "compareSource": self.compare_source,
        }
        if self.merge_base is not None:
            data["mergeBase"] = self.merge_base
        return data


@dataclass(frozen=True)
class NumstatRow:
    """One ``--numstat`` line. Binary files report zero counts."""

    path: str
    added: int
    removed: int
    binary: bool = False
    previous_path: Optional[str] = None


@dataclass(frozen=True)
class NameStatusRow:
    """One ``--name-status`` line. Renames and copies carry ``previous_path``."""

    path: str
    status_code: str
    previous_path: Optional[str] = None


@dataclass(frozen=True)
class DiffOutputs:
    numstat_output: str
    name_status_output: str


@dataclass(frozen=True)
class FileRecord:
    """A touched file after joining numstat and name-status rows."""

    path: str
    status: FileStatus
    added: int
    removed: int
    churn: int
    directory: str
    extension: str
    previous_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "status": self.status,
            "added": self.added,
            "removed": self.removed,
            "churn": self.churn,
            "directory": self.directory,
            "extension": self.extension,
        }
        if self.previous_path is not None:
            data["previousPath"] = self.previous_path
        return data


@dataclass(frozen=True)
class Summary:
    lines_added: int = 0
    lines_removed: int = 0
    lines_net: int = 0
    files_added: int = 0
    files_removed: int = 0
    files_changed: int = 0
    total_touched: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "linesAdded": self.lines_added,
            "linesRemoved": self.lines_removed,
            "linesNet": self.lines_net,
            "filesAdded": self.files_added,
            "filesRemoved": self.files_removed,
            "filesChanged": self.files_changed,
            "totalTouched": self.total_touched,
        }


@dataclass(frozen=True)
class Datasets:
    """Chart-ready rows, each a pure derivation of the file list and summary."""

    file_status_donut: Tuple[dict, ...] = ()
    line_impact_bars: Tuple[dict, ...] = ()
    status_net_delta_bars: Tuple[dict, ...] = ()
    file_touch_segments: Tuple[dict, ...] = ()
    top_files_churn: Tuple[dict, ...] = ()
    directory_treemap: Tuple[dict, ...] = ()
    extension_breakdown: Tuple[dict, ...] = ()
    churn_histogram: Tuple[dict, ...] = ()

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            "fileStatusDonut": [dict(row) for row in self.file_status_donut],
            "lineImpactBars": [dict(row) for row in self.line_impact_bars],
            "statusNetDeltaBars": [dict(row) for row in self.status_net_delta_bars],
            "fileTouchSegments": [dict(row) for row in self.file_touch_segments],
            "topFilesChurn": [dict(row) for row in self.top_files_churn],
            "directoryTreemap": [dict(row) for row in self.directory_treemap],
            "extensionBreakdown": [dict(row) for row in self.extension_breakdown],
            "churnHistogram": [dict(row) for row in self.churn_histogram],
        }


@dataclass(frozen=True)
class Snapshot:
    """Parsed, unfiltered diff universe for one concrete git state."""

    key: tuple
    signature: str
    resolved_refs: ResolvedRefs
    numstat_by_path: Mapping[str, NumstatRow] = field(default_factory=dict)
    status_by_path: Mapping[str, NameStatusRow] = field(default_factory=dict)
    all_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalysisResult:
    """Filtered, aggregated payload returned to callers."""

    resolved_refs: ResolvedRefs
    summary: Summary
    datasets: Datasets
    files: Tuple[FileRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "resolvedRefs": self.resolved_refs.to_dict(),
            "summary": self.summary.to_dict(),
            "datasets": self.datasets.to_dict(),
            "files": [f.to_dict() for f in self.files],
        }


@dataclass(frozen=True)
class PollResponse:
    """Outcome of one poll. A result is attached exactly when ``changed``."""

    signature: str
    changed: bool
    result: Optional[AnalysisResult] = None

    def __post_init__(self) -> None:
        if self.changed and self.result is None:
            raise ValueError("Polling response must include result when changed is true.")
        if not self.changed and self.result is not None:
            raise ValueError("Polling response cannot include result when changed is false.")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"signature": self.signature, "changed": self.changed}
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data
