"""Tests for settings_store.py - persisted repo and app settings."""

import pytest

from branchlens.config import DEFAULT_IGNORE_PATTERNS
from branchlens.settings_store import (
    DEFAULT_ACTIVE_PANELS,
    AppSettings,
    RepoSettings,
    SettingsStore,
    ensure_app_settings,
    ensure_repo_settings,
    sanitize_panel_order,
)


@pytest.fixture
def store(tmp_path):
    with SettingsStore(tmp_path / "settings") as s:
        yield s


class TestSanitizers:
    def test_defaults_for_garbage(self):
        assert ensure_repo_settings("nope") == RepoSettings()
        assert ensure_app_settings(None) == AppSettings()

    def test_invalid_fields_fall_back(self):
        settings = ensure_repo_settings(
            {
                "mode": "octopus",
                "compareSource": "stash",
                "baseBranch": 5,
                "ignorePatterns": ["  docs/** ", "", 7],
                "canvasOrientation": "diagonal",
            }
        )
        assert settings.mode == "merge-base"
        assert settings.compare_source == "working-tree"
        assert settings.base_branch == ""
        assert settings.ignore_patterns == ["docs/**"]
        assert settings.canvas_orientation == "left-right"

    def test_missing_ignore_patterns_use_defaults(self):
        assert ensure_repo_settings({}).ignore_patterns == list(DEFAULT_IGNORE_PATTERNS)

    def test_panel_order_dedupes_and_caps(self):
        assert sanitize_panel_order(
            ["topFilesChurn", "bogus", "topFilesChurn", "churnHistogram", "lineImpactBars"]
        ) == ["topFilesChurn", "churnHistogram"]
        assert sanitize_panel_order(None) == list(DEFAULT_ACTIVE_PANELS)

    def test_app_settings_flag_must_be_bool(self):
        assert ensure_app_settings({"autoOpenLastRepoOnStartup": "no"}).auto_open_last_repo_on_startup
        assert not ensure_app_settings(
            {"autoOpenLastRepoOnStartup": False}
        ).auto_open_last_repo_on_startup


class TestSettingsStore:
    def test_unknown_repo_gets_defaults(self, store):
        assert store.load_for_repo("/r") == RepoSettings()
        assert store.known_repos() == ["/r"]

    def test_save_and_load(self, store):
        store.save_for_repo(
            "/r", RepoSettings(base_branch="main", compare_branch="feature", mode="tip-to-tip")
        )
        loaded = store.load_for_repo("/r")
        assert loaded.base_branch == "main"
        assert loaded.compare_branch == "feature"
        assert loaded.mode == "tip-to-tip"

    def test_save_accepts_camel_case_mapping(self, store):
        saved = store.save_for_repo("/r", {"compareSource": "branch-tip"})
        assert saved.compare_source == "branch-tip"

    def test_persists_across_instances(self, tmp_path):
        with SettingsStore(tmp_path / "s") as first:
            first.save_for_repo("/r", RepoSettings(base_branch="develop"))
        with SettingsStore(tmp_path / "s") as second:
            assert second.load_for_repo("/r").base_branch == "develop"

    def test_last_repo_respects_auto_open(self, store):
        assert store.last_repo() is None
        store.remember_last_repo("/r")
        assert store.last_repo() == "/r"

        store.save_app_settings(AppSettings(auto_open_last_repo_on_startup=False))
        assert store.last_repo() is None
