"""Tests for analysis/aggregators.py - summary and chart datasets."""

import pytest

from branchlens.analysis.aggregators import (
    HISTOGRAM_BUCKETS,
    TOP_FILES_LIMIT,
    build_datasets,
    build_summary,
    status_code_to_file_status,
)
from branchlens.models import FileRecord, Summary


def _file(path, status, added, removed, directory, extension):
    return FileRecord(
        path=path,
        status=status,
        added=added,
        removed=removed,
        churn=added + removed,
        directory=directory,
        extension=extension,
    )


@pytest.fixture
def files():
    return [
        _file("src/main.ts", "changed", 30, 10, "src", "ts"),
        _file("src/App.tsx", "added", 80, 0, "src", "tsx"),
        _file("docs/guide.md", "removed", 0, 20, "docs", "md"),
    ]


class TestStatusMapping:
    @pytest.mark.parametrize(
        "code,expected",
        [("A", "added"), ("D", "removed"), ("M", "changed"), ("R", "changed"), ("T", "changed")],
    )
    def test_mapping(self, code, expected):
        assert status_code_to_file_status(code) == expected


class TestBuildSummary:
    def test_counts(self, files):
        assert build_summary(files) == Summary(
            lines_added=110,
            lines_removed=30,
            lines_net=80,
            files_added=1,
            files_removed=1,
            files_changed=1,
            total_touched=3,
        )

    def test_empty(self):
        assert build_summary([]) == Summary()

    def test_camel_case_dict(self, files):
        assert build_summary(files).to_dict() == {
            "linesAdded": 110,
            "linesRemoved": 30,
            "linesNet": 80,
            "filesAdded": 1,
            "filesRemoved": 1,
            "filesChanged": 1,
            "totalTouched": 3,
        }


class TestBuildDatasets:
    def test_top_files_extension_and_histogram(self, files):
        datasets = build_datasets(files, build_summary(files))

        assert [row["path"] for row in datasets.top_files_churn] == [
            "src/App.tsx",
            "src/main.ts",
            "docs/guide.md",
        ]
        extension_totals = {row["name"]: row["value"] for row in datasets.extension_breakdown}
        assert extension_totals == {"tsx": 80, "ts": 40, "md": 20}

        histogram = {row["bucket"]: row["count"] for row in datasets.churn_histogram}
        assert histogram["10-24"] == 1
        assert histogram["25-49"] == 1
        assert histogram["50-99"] == 1

    def test_line_impact_bars(self, files):
        datasets = build_datasets(files, build_summary(files))
        assert list(datasets.line_impact_bars) == [
            {"name": "Added", "value": 110, "metric": "added"},
            {"name": "Removed", "value": 30, "metric": "removed"},
            {"name": "Net", "value": 80, "metric": "net"},
        ]

    def test_file_touch_segments(self, files):
        datasets = build_datasets(files, build_summary(files))
        assert list(datasets.file_touch_segments) == [
            {"path": "src/App.tsx", "added": 80, "removed": 0, "churn": 80, "status": "added"},
            {"path": "src/main.ts", "added": 30, "removed": 10, "churn": 40, "status": "changed"},
            {"path": "docs/guide.md", "added": 0, "removed": 20, "churn": 20, "status": "removed"},
        ]

    def test_status_donut_and_net_delta(self, files):
        datasets = build_datasets(files, build_summary(files))
        assert list(datasets.file_status_donut) == [
            {"name": "added", "value": 1},
            {"name": "removed", "value": 1},
            {"name": "changed", "value": 1},
        ]
        assert [row["value"] for row in datasets.status_net_delta_bars] == [80, -20, 20]

    def test_directory_treemap_sorted_by_size(self, files):
        datasets = build_datasets(files, build_summary(files))
        assert list(datasets.directory_treemap) == [
            {"name": "src", "size": 120},
            {"name": "docs", "size": 20},
        ]

    def test_histogram_keeps_every_bucket_in_order(self):
        datasets = build_datasets([], Summary())
        assert [row["bucket"] for row in datasets.churn_histogram] == [
            label for label, _, _ in HISTOGRAM_BUCKETS
        ]
        assert all(row["count"] == 0 for row in datasets.churn_histogram)

    def test_histogram_bucket_edges(self):
        files = [
            _file("a", "changed", 9, 0, "(root)", "(none)"),
            _file("b", "changed", 10, 0, "(root)", "(none)"),
            _file("c", "changed", 249, 0, "(root)", "(none)"),
            _file("d", "changed", 250, 0, "(root)", "(none)"),
        ]
        histogram = {
            row["bucket"]: row["count"]
            for row in build_datasets(files, build_summary(files)).churn_histogram
        }
        assert histogram == {
            "0-9": 1,
            "10-24": 1,
            "25-49": 0,
            "50-99": 0,
            "100-249": 1,
            "250+": 1,
        }

    def test_top_files_is_capped_and_ties_break_by_path(self):
        files = [_file(f"f{i:02d}.py", "changed", 1, 0, "(root)", "py") for i in range(20)]
        datasets = build_datasets(files, build_summary(files))

        assert len(datasets.top_files_churn) == TOP_FILES_LIMIT
        assert datasets.top_files_churn[0]["path"] == "f00.py"
        assert len(datasets.file_touch_segments) == 20

    def test_dataset_names(self, files):
        data = build_datasets(files, build_summary(files)).to_dict()
        assert set(data) == {
            "fileStatusDonut",
            "lineImpactBars",
            "statusNetDeltaBars",
            "fileTouchSegments",
            "topFilesChurn",
            "directoryTreemap",
            "extensionBreakdown",
            "churnHistogram",
        }
