"""Summary counters and chart-ready datasets over a list of FileRecords.

All functions are pure; datasets are recomputed whenever the file list
changes and never cached independently of it.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from ..git.paths import get_directory, get_extension
from ..models import Datasets, FileRecord, Summary

TOP_FILES_LIMIT = 15

# (label, min, max) - max None means unbounded
HISTOGRAM_BUCKETS: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("0-9", 0, 9),
    ("10-24", 10, 24),
    ("25-49", 25, 49),
    ("50-99", 50, 99),
    ("100-249", 100, 249),
    ("250+", 250, None),
)

__all__ = [
    "HISTOGRAM_BUCKETS",
    "TOP_FILES_LIMIT",
    "build_datasets",
    "build_summary",
    "get_directory",
    "get_extension",
    "status_code_to_file_status",
]


def status_code_to_file_status(status_code: str) -> str:
    """Map a name-status letter to added/removed/changed."""
    if status_code == "A":
        return "added"
    if status_code == "D":
        return "removed"
    return "changed"


def build_summary(files: Sequence[FileRecord]) -> Summary:
    lines_added = 0
    lines_removed = 0
    files_added = 0
    files_removed = 0
    files_changed = 0

    for f in files:
        lines_added += f.added
        lines_removed += f.removed
        if f.status == "added":
            files_added += 1
        elif f.status == "removed":
            files_removed += 1
        else:
            files_changed += 1

    return Summary(
        lines_added=lines_added,
        lines_removed=lines_removed,
        lines_net=lines_added - lines_removed,
        files_added=files_added,
        files_removed=files_removed,
        files_changed=files_changed,
        total_touched=len(files),
    )


def _by_churn(files: Sequence[FileRecord]) -> List[FileRecord]:
    return sorted(files, key=lambda f: (-f.churn, f.path))


def _bucket_label(churn: int) -> Optional[str]:
    for label, low, high in HISTOGRAM_BUCKETS:
        if churn >= low and (high is None or churn <= high):
            return label
    return None


def _status_net_deltas(files: Sequence[FileRecord]) -> Dict[str, int]:
    deltas = {"added": 0, "removed": 0, "changed": 0}
    for f in files:
        deltas[f.status] = deltas.get(f.status, 0) + (f.added - f.removed)
    return deltas


def _ranked(totals: Dict[str, int], value_key: str) -> Tuple[dict, ...]:
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return tuple({"name": name, value_key: value} for name, value in ordered)


def build_datasets(files: Sequence[FileRecord], summary: Summary) -> Datasets:
    file_status_donut = (
        {"name": "added", "value": summary.files_added},
        {"name": "removed", "value": summary.files_removed},
        {"name": "changed", "value": summary.files_changed},
    )

    line_impact_bars = (
        {"name": "Added", "value": summary.lines_added, "metric": "added"},
        {"name": "Removed", "value": summary.lines_removed, "metric": "removed"},
        {"name": "Net", "value": summary.lines_net, "metric": "net"},
    )

    net = _status_net_deltas(files)
    status_net_delta_bars = (
        {"name": "Added", "value": net["added"], "metric": "added"},
        {"name": "Removed", "value": net["removed"], "metric": "removed"},
        {"name": "Changed", "value": net["changed"], "metric": "changed"},
    )

    ranked = _by_churn(files)
    file_touch_segments = tuple(
        {
            "path": f.path,
            "added": f.added,
            "removed": f.removed,
            "churn": f.churn,
            "status": f.status,
        }
        for f in ranked
    )
    top_files_churn = tuple(
        {"path": f.path, "churn": f.churn} for f in ranked[:TOP_FILES_LIMIT]
    )

    directory_totals: Dict[str, int] = defaultdict(int)
    extension_totals: Dict[str, int] = defaultdict(int)
    histogram_counts = {label: 0 for label, _, _ in HISTOGRAM_BUCKETS}
    for f in files:
        directory_totals[f.directory] += f.churn
        extension_totals[f.extension] += f.churn
        label = _bucket_label(f.churn)
        if label is not None:
            histogram_counts[label] += 1

    churn_histogram = tuple(
        {"bucket": label, "count": histogram_counts[label]} for label, _, _ in HISTOGRAM_BUCKETS
    )

    return Datasets(
        file_status_donut=file_status_donut,
        line_impact_bars=line_impact_bars,
        status_net_delta_bars=status_net_delta_bars,
        file_touch_segments=file_touch_segments,
        top_files_churn=top_files_churn,
        directory_treemap=_ranked(directory_totals, "size"),
        extension_breakdown=_ranked(extension_totals, "value"),
        churn_histogram=churn_histogram,
    )
