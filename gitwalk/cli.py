"""CLI entry point for gitwalk."""

import logging
import traceback
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from gitwalk import __version__
from gitwalk.config import CONFIG_FILE, create_default_config, get_settings, load_settings
from gitwalk.errors import ConfigurationError, InputAbortedError
from gitwalk.flow import FlowLoop
from gitwalk.git import GitRepository
from gitwalk.ui import Terminal, get_theme
from gitwalk.utils import setup_logging

app = typer.Typer(
    name="gitwalk",
    help="Interactive stage, commit and sync assistant for git",
    add_completion=True,
    no_args_is_help=False,
)

console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]gitwalk[/bold] version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    auto_upstream: bool = typer.Option(
        False,
        "--auto-upstream",
        "-a",
        help="Use the tracking branch (or a same-named remote branch) without asking",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """gitwalk - walk through stage, commit and sync.

    Inspects the repository in the current directory and offers the next
    sensible git actions until you quit.
    """
    try:
        settings = load_settings(config_path=config, force_reload=True)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    # If a subcommand is being invoked, don't enter interactive mode
    if ctx.invoked_subcommand is not None:
        return

    setup_logging(log_file=settings.resolved_log_file, verbose=verbose)

    exit_code = start_interactive(auto_upstream=auto_upstream or None, verbose=verbose)
    raise typer.Exit(exit_code)


def start_interactive(auto_upstream: Optional[bool] = None, verbose: bool = False) -> int:
    """Run the interactive flow in the current directory."""
    settings = get_settings()
    terminal = Terminal(theme=get_theme(settings.ui.theme))

    cwd = Path.cwd()
    repo_options = {
        "executable": settings.git.executable,
        "timeout": settings.git.timeout,
        "on_command": terminal.command,
    }
    repo = GitRepository.find(cwd, **repo_options) or GitRepository(cwd, **repo_options)
    logger.debug(f"Working in {repo.path}")

    try:
        return FlowLoop(repo, terminal, settings=settings, auto_upstream=auto_upstream).run()
    except (KeyboardInterrupt, EOFError, InputAbortedError):
        console.print("\n[yellow]Aborted.[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print(traceback.format_exc())
        return 1


@app.command()
def config(
    init: bool = typer.Option(
        False,
        "--init",
        help=f"Write the default configuration to {CONFIG_FILE} if missing",
    ),
) -> None:
    """Show current configuration."""
    if init:
        create_default_config()
        console.print(f"[green]Configuration file: {CONFIG_FILE}[/green]")

    settings = get_settings()

    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    console.print("\n[bold]Git:[/bold]")
    console.print(f"  Executable: {settings.git.executable}")
    console.print(f"  Timeout: {settings.git.timeout if settings.git.timeout else 'none'}")

    console.print("\n[bold]Commit message generator:[/bold]")
    command_line = " ".join([settings.generator.command] + settings.generator.args)
    console.print(f"  Command: {command_line}")
    console.print(f"  Stream delay: {settings.generator.stream_delay}s")

    console.print("\n[bold]Flow:[/bold]")
    console.print(f"  Auto upstream: {settings.flow.auto_upstream}")
    console.print(f"  Offer init: {settings.flow.offer_init}")
    console.print(f"  Page size: {settings.flow.page_size}")
    console.print(f"  Set upstream after push: {settings.flow.set_upstream_after_push}")

    console.print("\n[bold]UI:[/bold]")
    console.print(f"  Theme: {settings.ui.theme}")
    console.print(f"  Log file: {settings.resolved_log_file or 'none'}")


if __name__ == "__main__":
    app()
