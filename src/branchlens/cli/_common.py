"""Shared CLI helpers."""

from __future__ import annotations

import asyncio
from functools import partial
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..analysis import AnalysisService
from ..config import BranchLensConfig, load_config
from ..exceptions import NotARepositoryError
from ..git.client import GitClient, create_git_client
from ..logging_config import apply_verbosity
from ..models import AnalysisRequest, AnalysisResult
from ..settings_store import RepoSettings, SettingsStore

console = Console()

TOP_FILES_SHOWN = 10


def resolve_config(config: Optional[Path] = None, verbose: bool = False) -> BranchLensConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if verbose:
        overrides["verbose"] = True
    cfg = load_config(config_file=config, **overrides)
    apply_verbosity(cfg.verbosity)
    return cfg


def open_store(config: BranchLensConfig) -> SettingsStore:
    return SettingsStore(config.settings_dir)


def build_service(config: BranchLensConfig) -> AnalysisService:
    return AnalysisService(
        snapshot_cache_limit=config.snapshot_cache_limit,
        result_cache_limit=config.result_cache_limit,
        git_factory=partial(create_git_client, binary=config.git_binary),
    )


def resolve_repo_path(repo: Optional[Path], store: SettingsStore) -> str:
    """Explicit repo, else the last opened repo (when auto-open is on), else cwd."""
    if repo is not None:
        return str(repo.expanduser().resolve())
    last = store.last_repo()
    return last if last else str(Path.cwd().resolve())


def ensure_repository(repo_path: str, config: BranchLensConfig) -> None:
    client = GitClient(repo_path, binary=config.git_binary)
    if not asyncio.run(client.check_is_repo()):
        raise NotARepositoryError(repo_path)


def stored_or_default_settings(
    store: SettingsStore, repo_path: str, config: BranchLensConfig
) -> RepoSettings:
    """Stored settings for known repos; configuration defaults otherwise."""
    if repo_path in store.known_repos():
        return store.load_for_repo(repo_path)
    return RepoSettings(
        ignore_patterns=list(config.default_ignore_patterns),
        mode=config.default_mode,
        compare_source=config.default_compare_source,
    )


def build_request(
    repo_path: str,
    settings: RepoSettings,
    base: Optional[str] = None,
    compare: Optional[str] = None,
    mode: Optional[str] = None,
    source: Optional[str] = None,
    ignore: Optional[List[str]] = None,
) -> AnalysisRequest:
    """CLI options override stored settings field by field."""
    return AnalysisRequest(
        repo_path=repo_path,
        base_branch=base if base is not None else settings.base_branch,
        compare_branch=compare if compare is not None else settings.compare_branch,
        mode=mode if mode is not None else settings.mode,
        compare_source=source if source is not None else settings.compare_source,
        ignore_patterns=tuple(ignore) if ignore else tuple(settings.ignore_patterns),
    )


def render_result(result: AnalysisResult, top: int = TOP_FILES_SHOWN) -> None:
    refs = result.resolved_refs
    summary = result.summary

    header = (
        f"[bold cyan]{escape(refs.left_ref)}[/bold cyan] → "
        f"[bold cyan]{escape(refs.right_ref)}[/bold cyan]"
    )
    if refs.merge_base:
        header += f"  [dim](merge base {refs.merge_base[:12]})[/dim]"
    console.print(header)

    table = Table(title="Summary", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Lines added", f"[green]+{summary.lines_added}[/green]")
    table.add_row("Lines removed", f"[red]-{summary.lines_removed}[/red]")
    table.add_row("Net", f"{summary.lines_net:+d}")
    table.add_row("Files added", str(summary.files_added))
    table.add_row("Files removed", str(summary.files_removed))
    table.add_row("Files changed", str(summary.files_changed))
    table.add_row("Files touched", str(summary.total_touched))
    console.print(table)

    if not result.files:
        console.print("[yellow]No changes between the selected references.[/yellow]")
        return

    top_table = Table(title="Top files by churn", show_header=True, header_style="bold")
    top_table.add_column("File")
    top_table.add_column("Status")
    top_table.add_column("+", justify="right", style="green")
    top_table.add_column("-", justify="right", style="red")
    top_table.add_column("Churn", justify="right")
    for row in result.datasets.file_touch_segments[:top]:
        top_table.add_row(
            escape(row["path"]),
            row["status"],
            str(row["added"]),
            str(row["removed"]),
            str(row["churn"]),
        )
    console.print(top_table)
