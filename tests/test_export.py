"""Tests for export.py - JSON export document."""

import asyncio
import json
from datetime import datetime, timezone

from conftest import build_request

from branchlens import __version__
from branchlens.analysis.service import AnalysisService
from branchlens.export import (
    build_export_payload,
    sanitize_branch_for_filename,
    suggested_export_filename,
    write_export,
)
from branchlens.models import AnalysisRequest


class TestExportPayload:
    def test_payload_shape(self, fake_git):
        request = AnalysisRequest.from_dict(build_request())
        service = AnalysisService(git_factory=lambda repo_path: fake_git)
        result = asyncio.run(service.run_analysis(request))
        generated_at = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        payload = build_export_payload(request, result, generated_at=generated_at)

        assert payload["metadata"] == {
            "generatedAt": "2026-01-02T03:04:05+00:00",
            "appVersion": __version__,
        }
        assert payload["inputConfig"] == build_request()
        assert payload["resolvedRefs"]["mergeBase"] == "abc123"
        assert payload["summary"]["totalTouched"] == 1
        assert payload["files"][0]["path"] == "src/app.js"
        assert "churnHistogram" in payload["datasets"]
        json.dumps(payload)


class TestExportFilename:
    def test_sanitizes_branch_names(self):
        assert sanitize_branch_for_filename("feature/auth flow") == "feature-auth-flow"
        assert sanitize_branch_for_filename("///") == "branch"

    def test_suggested_filename(self):
        request = AnalysisRequest.from_dict(build_request(compareBranch="feature/auth"))
        name = suggested_export_filename(request, now=datetime(2026, 3, 4, 5, 6, 7))
        assert name == "git-branch-analysis-feature-auth-vs-main-20260304-050607.json"


class TestWriteExport:
    def test_writes_indented_json(self, tmp_path):
        target = tmp_path / "out" / "export.json"
        write_export(target, {"a": 1})
        assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
        assert target.read_text(encoding="utf-8").startswith("{\n  ")
