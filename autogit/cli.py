"""
Command line interface using Typer with Rich integration.
"""

import json
import sys
from pathlib import Path
from typing import Callable, Optional
import typer
from pydantic import ValidationError
from rich.console import Console
from loguru import logger

from .core import AutoGit, AutoGitError, SessionContext
from .config.settings import Settings
from .git_ops.repository import GitRepository, GitRepositoryError, output_indicates_failure
from .utils.classifier import DiffClassifier
from .utils.hooks import prefill_message_file, should_prefill


# Create Typer app
app = typer.Typer(
    name="autogit",
    help="Heuristic commit message suggestions for staged git changes",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False  # Bare invocation starts the interactive session
)

# Global console for error handling
console = Console()


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup logging configuration."""
    logger.remove()  # Remove default handler

    # Console logging with colors
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True
    )

    # File logging
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def _load_settings(config_file: Optional[Path], use_defaults_on_error: bool = False) -> Settings:
    try:
        if config_file:
            return Settings.from_file(config_file)
        return Settings()
    except (ValidationError, json.JSONDecodeError, OSError) as e:
        if use_defaults_on_error:
            logger.warning(f"Ignoring invalid configuration: {e}")
            return Settings.model_construct()
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to configuration file"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information"
    )
):
    """
    Suggest commit messages for staged changes and optionally commit.

    [bold blue]Examples:[/bold blue]

    [green]autogit[/green]                         # Interactive session
    [green]autogit suggest[/green]                 # Suggest messages for staged changes
    [green]autogit auto --yes[/green]              # Commit with the best suggestion
    [green]autogit analyze[/green]                 # Show what was detected
    [green]autogit config --show[/green]           # Show configuration
    [green]autogit install-hook[/green]            # Prefill messages on git commit
    """
    if version:
        from . import __version__
        console.print(f"[bold blue]AutoGit[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()

    # The commit hook must not fail on a broken configuration
    settings = _load_settings(
        config_file,
        use_defaults_on_error=ctx.invoked_subcommand == "prepare-message"
    )

    # Setup logging - debug overrides verbose
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = settings.ui.log_level
    setup_logging(log_level, settings.log_file)

    ctx.obj = SessionContext(
        repo_path=(repo_path or Path.cwd()).resolve(),
        settings=settings,
        config_path=config_file
    )

    # If no subcommand was called, run the interactive session
    if ctx.invoked_subcommand is None:
        _run_action(ctx.obj, _interactive_session)


def _interactive_session(session: AutoGit) -> bool:
    session.run()
    return True


def _run_action(context: SessionContext, action: Callable[[AutoGit], bool]) -> None:
    """Build a session and run one action, mapping failures to exit codes."""
    try:
        if not context.repo_path.is_dir():
            raise AutoGitError(f"Repository path does not exist: {context.repo_path}")

        session = AutoGit(context)
        succeeded = action(session)

    except (AutoGitError, GitRepositoryError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    if not succeeded:
        raise typer.Exit(1)


@app.command()
def suggest(ctx: typer.Context):
    """Analyze staged changes and suggest commit messages."""
    _run_action(ctx.obj, lambda session: session.suggest_commits())


@app.command()
def auto(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False, "--yes", "-y",
        help="Commit without asking for confirmation"
    )
):
    """Commit staged changes with the best generated message."""
    _run_action(ctx.obj, lambda session: session.auto_commit(assume_yes=yes))


@app.command()
def analyze(ctx: typer.Context):
    """Show per-file statistics and detected change types."""
    _run_action(ctx.obj, lambda session: session.analyze_changes())


@app.command()
def log(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(
        None, "--count", "-n",
        min=1,
        help="Number of commits to show"
    )
):
    """Show recent commits."""
    _run_action(ctx.obj, lambda session: session.show_log(count))


@app.command("install-hook")
def install_hook(ctx: typer.Context):
    """Install a prepare-commit-msg hook that prefills the best suggestion."""
    _run_action(ctx.obj, lambda session: session.install_hook())


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False, "--show", "-s",
        help="Show current configuration"
    ),
    git_path: Optional[str] = typer.Option(
        None, "--git-path",
        help="Set path to the git executable"
    ),
    max_suggestions: Optional[int] = typer.Option(
        None, "--max-suggestions",
        help="Set how many suggestions to show (1-5)"
    ),
    style: Optional[str] = typer.Option(
        None, "--style",
        help="Set commit style (conventional, simple)"
    ),
    confirm: Optional[bool] = typer.Option(
        None, "--confirm/--no-confirm",
        help="Ask before committing with a generated message"
    ),
    save: bool = typer.Option(
        False, "--save",
        help="Save configuration to file"
    )
):
    """
    Manage AutoGit configuration.

    [bold blue]Examples:[/bold blue]

    [green]autogit config --show[/green]                        # Show current config
    [green]autogit config --style simple --save[/green]         # Drop the type prefix
    [green]autogit config --max-suggestions 3 --save[/green]    # Show fewer suggestions
    """
    context: SessionContext = ctx.obj
    settings = context.settings

    if show:
        _run_action(context, lambda session: session.show_configuration())
        return

    # Update settings
    config_changed = False

    if git_path:
        settings.git.binary = git_path
        config_changed = True
        console.print(f"[green]Set git binary to:[/green] {git_path}")

    if max_suggestions is not None:
        if not 1 <= max_suggestions <= 5:
            console.print(f"[red]Invalid suggestion count:[/red] {max_suggestions}")
            console.print("Valid range: 1-5")
            raise typer.Exit(1)
        settings.suggestions.max_suggestions = max_suggestions
        config_changed = True
        console.print(f"[green]Set max suggestions to:[/green] {max_suggestions}")

    if style:
        if style not in ["conventional", "simple"]:
            console.print(f"[red]Invalid commit style:[/red] {style}")
            console.print("Valid options: conventional, simple")
            raise typer.Exit(1)
        settings.suggestions.commit_style = style
        config_changed = True
        console.print(f"[green]Set commit style to:[/green] {style}")

    if confirm is not None:
        settings.ui.confirm_commits = confirm
        config_changed = True
        console.print(f"[green]Set commit confirmation to:[/green] {confirm}")

    # Save if requested
    if save and config_changed:
        try:
            config_path = settings.save_to_file(context.config_path)
        except OSError as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]Configuration saved to:[/green] {config_path}")
    elif config_changed:
        console.print("[yellow]Use --save to persist these changes[/yellow]")

    if not config_changed:
        console.print("[yellow]No configuration changes made[/yellow]")
        console.print("Use [green]--show[/green] to see current configuration")


@app.command("prepare-message", hidden=True)
def prepare_message(
    ctx: typer.Context,
    message_file: Path = typer.Argument(..., help="Commit message file passed by git"),
    source: Optional[str] = typer.Argument(None, help="Message source passed by git"),
    sha: Optional[str] = typer.Argument(None, help="Commit object passed by git")
):
    """Prefill git's commit message file; used by the installed hook."""
    context: SessionContext = ctx.obj

    if not should_prefill(source):
        logger.debug(f"Message source '{source}' already provides a message")
        return

    # Never block the commit: every failure here is logged and ignored
    try:
        git_repo = GitRepository(context.repo_path, context.settings.git.binary)
        diff = git_repo.staged_diff()
        if not diff or output_indicates_failure(diff):
            logger.debug("No usable staged diff for the commit message")
            return

        classifier = DiffClassifier(
            limit=context.settings.suggestions.max_suggestions,
            style=context.settings.suggestions.commit_style
        )
        prefill_message_file(message_file, classifier.best_message(diff))
    except Exception as e:
        logger.warning(f"Could not prepare commit message: {e}")


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
