"""JSON export of an analysis result together with the request that produced it."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from . import __version__
from .logging_config import get_logger
from .models import AnalysisRequest, AnalysisResult

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')


def build_export_payload(
    request: AnalysisRequest,
    result: AnalysisResult,
    generated_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Pure serialization; no analysis is recomputed."""
    generated_at = generated_at or datetime.now(timezone.utc)
    result_data = result.to_dict()
    return {
        "metadata": {
            "generatedAt": generated_at.isoformat(),
            "appVersion": __version__,
        },
        "inputConfig": request.to_dict(),
        "resolvedRefs": result_data["resolvedRefs"],
        "summary": result_data["summary"],
        "datasets": result_data["datasets"],
        "files": result_data["files"],
    }


def sanitize_branch_for_filename(value: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("-", value)
    cleaned = re.sub(r"-+", "-", cleaned).strip("-")
    return cleaned or "branch"


def suggested_export_filename(request: AnalysisRequest, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return (
        f"git-branch-analysis-{sanitize_branch_for_filename(request.compare_branch)}"
        f"-vs-{sanitize_branch_for_filename(request.base_branch)}"
        f"-{now.strftime('%Y%m%d-%H%M%S')}.json"
    )


def write_export(path: Path, payload: dict[str, Any]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Analysis exported to %s", path)
    return path
