"""Inspect and edit stored per-repository and application settings."""

import json
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import BranchLensError
from ..logging_config import setup_logging
from ..models import ANALYSIS_MODES, COMPARE_SOURCES, DATASET_NAMES
from ..settings_store import CANVAS_ORIENTATIONS
from ._common import (
    console,
    open_store,
    resolve_config,
    resolve_repo_path,
    stored_or_default_settings,
)
from .analyze import (
    BASE_OPTION,
    COMPARE_OPTION,
    CONFIG_OPTION,
    IGNORE_OPTION,
    REPO_ARGUMENT,
)

settings_app = typer.Typer(help="Stored per-repository and application settings")


@settings_app.command("show")
def show(
    repo: Optional[Path] = REPO_ARGUMENT,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Show stored settings for a repository."""
    setup_logging()
    try:
        cfg = resolve_config(config=config)
        with open_store(cfg) as store:
            repo_path = resolve_repo_path(repo, store)
            repo_settings = stored_or_default_settings(store, repo_path, cfg).to_dict()
            app_settings = store.load_app_settings().to_dict()
    except BranchLensError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps({"repo": repo_path, "settings": repo_settings, "app": app_settings}))
        return

    table = Table(title=escape(repo_path), show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in {**repo_settings, **app_settings}.items():
        shown = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(key, escape(shown) if shown else "[dim](empty)[/dim]")
    console.print(table)


@settings_app.command("save")
def save(
    repo: Optional[Path] = REPO_ARGUMENT,
    base: Optional[str] = BASE_OPTION,
    compare: Optional[str] = COMPARE_OPTION,
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", click_type=click.Choice(ANALYSIS_MODES)
    ),
    source: Optional[str] = typer.Option(
        None, "--source", "-s", click_type=click.Choice(COMPARE_SOURCES)
    ),
    ignore: Optional[List[str]] = IGNORE_OPTION,
    clear_ignore: bool = typer.Option(
        False, "--clear-ignore", help="Store an empty ignore list"
    ),
    panel: Optional[List[str]] = typer.Option(
        None,
        "--panel",
        help=f"Active panel (repeatable, at most 2): {', '.join(DATASET_NAMES)}",
    ),
    orientation: Optional[str] = typer.Option(
        None, "--orientation", click_type=click.Choice(CANVAS_ORIENTATIONS)
    ),
    auto_open: Optional[bool] = typer.Option(
        None,
        "--auto-open/--no-auto-open",
        help="Reopen the last repository when no repository is given",
    ),
    config: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Update stored settings; omitted options keep their stored value."""
    setup_logging()
    try:
        cfg = resolve_config(config=config)
        with open_store(cfg) as store:
            repo_path = resolve_repo_path(repo, store)
            current = stored_or_default_settings(store, repo_path, cfg)

            if base is not None:
                current.base_branch = base
            if compare is not None:
                current.compare_branch = compare
            if mode is not None:
                current.mode = mode
            if source is not None:
                current.compare_source = source
            if clear_ignore:
                current.ignore_patterns = []
            elif ignore:
                current.ignore_patterns = list(ignore)
            if panel:
                current.panel_order = list(panel)
            if orientation is not None:
                current.canvas_orientation = orientation

            saved = store.save_for_repo(repo_path, current)
            if auto_open is not None:
                app_settings = store.load_app_settings()
                app_settings.auto_open_last_repo_on_startup = auto_open
                store.save_app_settings(app_settings)
    except BranchLensError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]Saved[/green] settings for {escape(repo_path)}")
    if panel and saved.panel_order != list(panel):
        console.print(
            f"[yellow]Panels adjusted to:[/yellow] {', '.join(saved.panel_order) or '(none)'}"
        )
