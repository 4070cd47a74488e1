"""CLI entry point; registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="branchlens",
    help="Branch Lens - chart-ready diff analysis between git branches",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True, no_args_is_help=True)
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
) -> None:
    """Compare a branch against a base and summarise the diff."""
    if version:
        console.print(f"[bold cyan]Branch Lens[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
from .branches import branches as _branches  # noqa: F401, E402
from .settings import settings_app  # noqa: E402

app.add_typer(settings_app, name="settings")
