"""
Console interface with Rich components.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.theme import Theme
from rich import box

from .. import __version__
from ..config.settings import Settings
from ..utils.classifier import DiffAnalysis


class AutoGitConsole:
    """Console interface for AutoGit."""

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        self.console = console or Console(
            color_system="auto" if settings.ui.use_colors else None,
            theme=self.theme
        )
        if console is not None:
            self.console.push_theme(self.theme)

    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "title": "bold blue",
            "success": "bold green",
            "warning": "bold yellow",
            "error": "bold red",
            "info": "blue",
            "muted": "dim",
            "file_added": "green",
            "file_modified": "yellow",
            "file_deleted": "red",
            "file_renamed": "cyan",
            "commit_hash": "dim cyan",
            "commit_type": "bold magenta",
        }

        self.theme = Theme(self.styles)

    def print(self, *args, **kwargs) -> None:
        self.console.print(*args, **kwargs)

    def print_banner(self) -> None:
        """Print application banner."""
        banner = Panel.fit(
            f"[bold blue]AutoGit v{__version__}[/bold blue]\n"
            "[dim]Automatic commit message suggestions from staged changes[/dim]",
            box=box.ROUNDED,
            style="blue"
        )
        self.console.print(banner)

    def show_help(self, commands: Sequence[Tuple[str, Tuple[str, ...], str]]) -> None:
        """Print the command reference."""
        table = Table(title="Commands", box=box.SIMPLE_HEAD, title_style="title")
        table.add_column("Command", style="bold cyan")
        table.add_column("Aliases", style="muted")
        table.add_column("Description")

        for name, aliases, description in commands:
            table.add_row(name, ", ".join(aliases), description)

        self.console.print(table)

    def read_command(self) -> Optional[str]:
        """Read one line of input; None means the input stream ended."""
        try:
            return self.console.input("[bold blue]>[/bold blue] ").strip()
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return None

    def show_staged_stat(self, stat: str) -> None:
        """Show the ``git diff --stat`` summary."""
        self.console.print(Panel(escape(stat), title="Changes", box=box.ROUNDED, style="blue"))

    def _format_message(self, message: str) -> str:
        if ': ' in message:
            prefix, description = message.split(': ', 1)
            if ' ' not in prefix:
                return f"[commit_type]{escape(prefix)}[/commit_type]: {escape(description)}"
        return escape(message)

    def show_suggestions(self, suggestions: List[str]) -> None:
        """Show numbered commit message suggestions."""
        self.console.print("\n[title]Suggested commits:[/title]")
        for index, suggestion in enumerate(suggestions, 1):
            self.console.print(f"  [bold cyan]{index}.[/bold cyan] {self._format_message(suggestion)}")
        self.console.print()

    def show_commit_message_preview(self, message: str) -> None:
        """Show the message that is about to be committed."""
        message_panel = Panel(
            self._format_message(message),
            title="Generated Commit Message",
            box=box.ROUNDED,
            style="green"
        )
        self.console.print(message_panel)

    def show_analysis(self, analysis: DiffAnalysis, rule_names: List[str]) -> None:
        """Show per-file statistics and the categories detected in the diff."""
        table = Table(title="Staged Files", box=box.SIMPLE_HEAD, title_style="title")
        table.add_column("Status", style="bold", width=9)
        table.add_column("File", style="bold")
        table.add_column("Changes", justify="right", style="muted")

        status_styles = {
            'A': ("file_added", "Added"),
            'M': ("file_modified", "Modified"),
            'D': ("file_deleted", "Deleted"),
            'R': ("file_renamed", "Renamed"),
        }

        for stat in analysis.file_stats:
            style, label = status_styles.get(stat.status, ("", stat.status))
            status_text = f"[{style}]{label}[/{style}]" if style else label
            table.add_row(status_text, escape(stat.path), f"+{stat.additions} -{stat.deletions}")

        self.console.print(table)
        self.console.print(
            f"[info]Files:[/info] {len(analysis.file_stats)}  "
            f"[file_added]+{analysis.additions}[/file_added]  "
            f"[file_deleted]-{analysis.deletions}[/file_deleted]  "
            f"[info]Hunks:[/info] {analysis.hunks}"
        )

        if rule_names:
            self.console.print(f"[info]Detected:[/info] {', '.join(rule_names)}")
        else:
            self.console.print("[info]Detected:[/info] [muted]no specific category[/muted]")

    def show_configuration(self, settings: Settings, config_path: Optional[Path] = None) -> None:
        """Show the effective configuration."""
        table = Table(title="AutoGit Configuration", box=box.SIMPLE_HEAD, title_style="title")
        table.add_column("Setting", style="bold")
        table.add_column("Value", style="cyan")

        table.add_row("Git binary", settings.git.binary)
        table.add_row("Log count", str(settings.git.log_count))
        table.add_row("Max suggestions", str(settings.suggestions.max_suggestions))
        table.add_row("Commit style", settings.suggestions.commit_style)
        table.add_row("Confirm commits", str(settings.ui.confirm_commits))
        table.add_row("Log level", settings.ui.log_level)
        if config_path is not None:
            status = "" if config_path.exists() else " [muted](not created)[/muted]"
            table.add_row("Config file", f"{config_path}{status}")

        self.console.print(table)

    def show_recent_commits(self, commits: List[str]) -> None:
        """Show recent one-line commit summaries."""
        self.console.print("[title]Recent commits:[/title]")

        for line in commits:
            commit_hash, _, message = line.partition(" ")
            self.console.print(f"  [commit_hash]{escape(commit_hash)}[/commit_hash] {self._format_message(message)}")

    def confirm_action(self, message: str, default: bool = False) -> bool:
        """Get user confirmation for an action."""
        try:
            return Confirm.ask(message, default=default, console=self.console)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return False

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(f"[success]✓ {escape(message)}[/success]")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(f"[warning]⚠ {escape(message)}[/warning]")

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.console.print(f"[error]✗ {escape(message)}[/error]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(f"[info]ℹ {escape(message)}[/info]")
