"""List branches available for comparison."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import BranchLensError
from ..git import create_git_client
from ..logging_config import setup_logging
from . import app
from ._common import console, ensure_repository, open_store, resolve_config, resolve_repo_path
from .analyze import CONFIG_OPTION, REPO_ARGUMENT


@app.command()
def branches(
    repo: Optional[Path] = REPO_ARGUMENT,
    json_output: bool = typer.Option(False, "--json", help="Output as a JSON array"),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List local and remote branch names (remote prefix stripped)."""
    logger = setup_logging(verbose=verbose)

    try:
        cfg = resolve_config(config=config, verbose=verbose)
        with open_store(cfg) as store:
            repo_path = resolve_repo_path(repo, store)
        ensure_repository(repo_path, cfg)

        client = create_git_client(repo_path, binary=cfg.git_binary)
        names = asyncio.run(client.list_branches())
        current = asyncio.run(client.current_branch())

        if json_output:
            typer.echo(json.dumps(names))
            return

        if not names:
            console.print("[yellow]No branches found.[/yellow]")
            return
        for name in names:
            marker = "[green]*[/green] " if name == current else "  "
            console.print(f"{marker}{escape(name)}", highlight=False)

    except BranchLensError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
