"""One-shot analysis command."""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.markup import escape

from ..exceptions import BranchLensError
from ..export import build_export_payload, suggested_export_filename, write_export
from ..logging_config import setup_logging
from ..models import ANALYSIS_MODES, COMPARE_SOURCES
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

REPO_ARGUMENT = typer.Argument(
    None,
    help="Repository to analyze (default: last opened repository, then current directory)",
    file_okay=False,
    dir_okay=True,
)
BASE_OPTION = typer.Option(None, "--base", "-b", help="Base branch")
COMPARE_OPTION = typer.Option(None, "--compare", "-c", help="Compare branch")
MODE_OPTION = typer.Option(
    None,
    "--mode",
    "-m",
    help="merge-base | tip-to-tip",
    click_type=click.Choice(ANALYSIS_MODES),
)
SOURCE_OPTION = typer.Option(
    None,
    "--source",
    "-s",
    help="working-tree | branch-tip",
    click_type=click.Choice(COMPARE_SOURCES),
)
IGNORE_OPTION = typer.Option(
    None,
    "--ignore",
    "-i",
    help="Ignore glob (repeatable); replaces the stored patterns",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    hidden=True,
)


@app.command()
def analyze(
    repo: Optional[Path] = REPO_ARGUMENT,
    base: Optional[str] = BASE_OPTION,
    compare: Optional[str] = COMPARE_OPTION,
    mode: Optional[str] = MODE_OPTION,
    source: Optional[str] = SOURCE_OPTION,
    ignore: Optional[List[str]] = IGNORE_OPTION,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the export document as JSON",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the export document to a file (or into a directory)",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Remember the effective options for this repository",
    ),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """
    Analyze the diff between two branches.

    [bold cyan]Examples:[/bold cyan]

      branchlens analyze . --base main --compare feature/auth

      branchlens analyze . -b main -c feature --mode tip-to-tip --source branch-tip

      branchlens analyze --json --ignore "docs/**" --ignore "*.lock"
    """
    logger = setup_logging(verbose=verbose)

    try:
        cfg = resolve_config(config=config, verbose=verbose)
        with open_store(cfg) as store:
            repo_path = resolve_repo_path(repo, store)
            ensure_repository(repo_path, cfg)

            settings = stored_or_default_settings(store, repo_path, cfg)
            request = build_request(repo_path, settings, base, compare, mode, source, ignore)

            service = build_service(cfg)
            result = asyncio.run(service.run_analysis(request))

            if save:
                settings.base_branch = request.base_branch
                settings.compare_branch = request.compare_branch
                settings.mode = request.mode
                settings.compare_source = request.compare_source
                settings.ignore_patterns = list(request.ignore_patterns)
                store.save_for_repo(repo_path, settings)
                store.remember_last_repo(repo_path)

        payload = build_export_payload(request, result)

        if output is not None:
            target = output / suggested_export_filename(request) if output.is_dir() else output
            write_export(target, payload)
            if not json_output:
                console.print(f"[green]Exported[/green] {escape(str(target))}")

        if json_output:
            typer.echo(json.dumps(payload, indent=2))
        else:
            render_result(result)

    except typer.Exit:
        raise

    except BranchLensError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
