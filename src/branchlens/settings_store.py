"""Persistent per-repository and application settings.

Backed by diskcache (SQLite) so multiple processes can share one store.
Stored data is always sanitized on the way in and out: unknown or invalid
values fall back to defaults instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from diskcache import Cache

from .config import DEFAULT_IGNORE_PATTERNS
from .logging_config import get_logger
from .models import (
    ANALYSIS_MODES,
    COMPARE_SOURCES,
    DATASET_NAMES,
    DEFAULT_ANALYSIS_MODE,
    DEFAULT_COMPARE_SOURCE,
)

logger = get_logger(__name__)

MAX_ACTIVE_PANELS = 2
DEFAULT_ACTIVE_PANELS: tuple[str, ...] = ("fileTouchSegments", "lineImpactBars")

CANVAS_ORIENTATIONS: tuple[str, ...] = ("left-right", "top-bottom")
DEFAULT_CANVAS_ORIENTATION = "left-right"

DEFAULT_AUTO_OPEN_LAST_REPO_ON_STARTUP = True

_REPO_KEY_PREFIX = "repo::"
_APP_SETTINGS_KEY = "app::settings"
_LAST_REPO_KEY = "app::last-repo"


@dataclass
class RepoSettings:
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    mode: str = DEFAULT_ANALYSIS_MODE
    compare_source: str = DEFAULT_COMPARE_SOURCE
    base_branch: str = ""
    compare_branch: str = ""
    panel_order: List[str] = field(default_factory=lambda: list(DEFAULT_ACTIVE_PANELS))
    canvas_orientation: str = DEFAULT_CANVAS_ORIENTATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "ignorePatterns": list(self.ignore_patterns),
            "mode": self.mode,
            "compareSource": self.compare_source,
            "baseBranch": self.base_branch,
            "compareBranch": self.compare_branch,
            "panelOrder": list(self.panel_order),
            "canvasOrientation": self.canvas_orientation,
        }


@dataclass
class AppSettings:
    auto_open_last_repo_on_startup: bool = DEFAULT_AUTO_OPEN_LAST_REPO_ON_STARTUP

    def to_dict(self) -> dict[str, Any]:
        return {"autoOpenLastRepoOnStartup": self.auto_open_last_repo_on_startup}


def _pick(data: dict, camel: str, snake: str) -> Any:
    return data[camel] if camel in data else data.get(snake)


def sanitize_panel_order(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return list(DEFAULT_ACTIVE_PANELS)

    deduped: List[str] = []
    for panel_id in value:
        if panel_id in DATASET_NAMES and panel_id not in deduped:
            deduped.append(panel_id)
        if len(deduped) >= MAX_ACTIVE_PANELS:
            break
    return deduped


def sanitize_ignore_patterns(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return list(DEFAULT_IGNORE_PATTERNS)
    return [p.strip() for p in value if isinstance(p, str) and p.strip()]


def ensure_repo_settings(value: Any) -> RepoSettings:
    """Coerce arbitrary stored data into valid RepoSettings."""
    if isinstance(value, RepoSettings):
        value = value.to_dict()
    if not isinstance(value, dict):
        return RepoSettings()

    mode = value.get("mode")
    compare_source = _pick(value, "compareSource", "compare_source")
    base_branch = _pick(value, "baseBranch", "base_branch")
    compare_branch = _pick(value, "compareBranch", "compare_branch")
    orientation = _pick(value, "canvasOrientation", "canvas_orientation")

    return RepoSettings(
        ignore_patterns=sanitize_ignore_patterns(_pick(value, "ignorePatterns", "ignore_patterns")),
        mode=mode if mode in ANALYSIS_MODES else DEFAULT_ANALYSIS_MODE,
        compare_source=(
            compare_source if compare_source in COMPARE_SOURCES else DEFAULT_COMPARE_SOURCE
        ),
        base_branch=base_branch if isinstance(base_branch, str) else "",
        compare_branch=compare_branch if isinstance(compare_branch, str) else "",
        panel_order=sanitize_panel_order(_pick(value, "panelOrder", "panel_order")),
        canvas_orientation=(
            orientation if orientation in CANVAS_ORIENTATIONS else DEFAULT_CANVAS_ORIENTATION
        ),
    )


def ensure_app_settings(value: Any) -> AppSettings:
    if isinstance(value, AppSettings):
        return AppSettings(value.auto_open_last_repo_on_startup)
    if not isinstance(value, dict):
        return AppSettings()
    flag = _pick(value, "autoOpenLastRepoOnStartup", "auto_open_last_repo_on_startup")
    return AppSettings(
        auto_open_last_repo_on_startup=(
            flag if isinstance(flag, bool) else DEFAULT_AUTO_OPEN_LAST_REPO_ON_STARTUP
        )
    )


class SettingsStore:
    """Key-value settings persistence.

    Usage:
        with SettingsStore("~/.branchlens/settings") as store:
            settings = store.load_for_repo("/path/to/repo")
            settings.compare_branch = "feature"
            store.save_for_repo("/path/to/repo", settings)
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()
        self._cache = Cache(str(self.directory))
        logger.debug("Settings store opened at %s", self.directory)

    def __enter__(self) -> SettingsStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._cache.close()

    def load_for_repo(self, repo_path: str) -> RepoSettings:
        """Load sanitized settings, persisting the sanitized form back."""
        stored = self._cache.get(_REPO_KEY_PREFIX + repo_path)
        return self.save_for_repo(repo_path, ensure_repo_settings(stored))

    def save_for_repo(self, repo_path: str, settings: Any) -> RepoSettings:
        merged = ensure_repo_settings(settings)
        self._cache.set(_REPO_KEY_PREFIX + repo_path, merged.to_dict())
        return merged

    def known_repos(self) -> Sequence[str]:
        return sorted(
            key[len(_REPO_KEY_PREFIX):]
            for key in self._cache.iterkeys()
            if isinstance(key, str) and key.startswith(_REPO_KEY_PREFIX)
        )

    def load_app_settings(self) -> AppSettings:
        return ensure_app_settings(self._cache.get(_APP_SETTINGS_KEY))

    def save_app_settings(self, settings: Any) -> AppSettings:
        merged = ensure_app_settings(settings)
        self._cache.set(_APP_SETTINGS_KEY, merged.to_dict())
        return merged

    def remember_last_repo(self, repo_path: str) -> None:
        self._cache.set(_LAST_REPO_KEY, repo_path)

    def last_repo(self) -> Optional[str]:
        """Repo to reopen on startup, or None when auto-open is disabled."""
        if not self.load_app_settings().auto_open_last_repo_on_startup:
            return None
        value = self._cache.get(_LAST_REPO_KEY)
        return value if isinstance(value, str) and value else None
