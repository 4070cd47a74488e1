"""Watch mode: re-render whenever the diff between two branches changes."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..analysis import AnalysisPoller
from ..exceptions import BranchLensError
from ..logging_config import setup_logging
from ..models import AnalysisResult
from . import app
from ._common import (
    build_request,
    build_service,
    console,
    ensure_repository,
    open_store,
    render_result,
    resolve_config,
    resolve_repo_path,
    stored_or_default_settings,
)
from .analyze import (
    BASE_OPTION,
    COMPARE_OPTION,
    CONFIG_OPTION,
    IGNORE_OPTION,
    MODE_OPTION,
    REPO_ARGUMENT,
    SOURCE_OPTION,
)


@app.command()
def watch(
    repo: Optional[Path] = REPO_ARGUMENT,
    base: Optional[str] = BASE_OPTION,
    compare: Optional[str] = COMPARE_OPTION,
    mode: Optional[str] = MODE_OPTION,
    source: Optional[str] = SOURCE_OPTION,
    ignore: Optional[List[str]] = IGNORE_OPTION,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between polls (default: poll_interval_seconds from config)",
        min=0.05,
    ),
    max_polls: Optional[int] = typer.Option(
        None,
        "--max-polls",
        help="Stop after this many polls",
        min=1,
    ),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """
    Poll the repository and re-render the analysis when the diff changes.

    Unchanged polls reuse the cached result; press Ctrl+C to stop.
    """
    logger = setup_logging(verbose=verbose)

    try:
        cfg = resolve_config(config=config, verbose=verbose)
        with open_store(cfg) as store:
            repo_path = resolve_repo_path(repo, store)
            ensure_repository(repo_path, cfg)
            settings = stored_or_default_settings(store, repo_path, cfg)
            request = build_request(repo_path, settings, base, compare, mode, source, ignore)
            store.remember_last_repo(repo_path)

        def on_change(result: AnalysisResult, signature: str) -> None:
            console.rule(f"[dim]snapshot {signature[:12]}[/dim]")
            render_result(result)

        def on_error(exc: Exception) -> None:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")

        poller = AnalysisPoller(
            build_service(cfg),
            request,
            interval_seconds=interval or cfg.poll_interval_seconds,
            on_change=on_change,
            on_error=on_error,
        )
        console.print(
            f"[bold]Watching[/bold] {escape(repo_path)} "
            f"([cyan]{escape(request.base_branch)}[/cyan] "
            f"vs [cyan]{escape(request.compare_branch)}[/cyan])"
        )
        state = asyncio.run(poller.run(max_polls=max_polls))
        logger.debug("Watch finished after %d polls (%d changes)", state.polls, state.changes)

    except typer.Exit:
        raise

    except BranchLensError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error while watching")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
