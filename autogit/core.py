"""
Core AutoGit session: the interactive command loop and the actions behind it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
from loguru import logger

from .config.settings import Settings
from .git_ops.repository import GitRepository, GitRepositoryError, output_indicates_failure
from .ui.console import AutoGitConsole
from .utils.classifier import DiffClassifier, parse_diff
from .utils.hooks import HookInstallError, install_hook


# (name, aliases, description); order is the order shown by help
COMMANDS: List[Tuple[str, Tuple[str, ...], str]] = [
    ("suggest", ("s",), "Analyze staged changes and suggest commits"),
    ("auto", ("a",), "Auto-commit with generated message"),
    ("analyze", ("an",), "Show per-file statistics and detected change types"),
    ("log", ("l",), "Show recent commits"),
    ("config", ("c",), "Show current configuration"),
    ("install-hook", (), "Install git prepare-commit-msg hook"),
    ("help", ("h", "?"), "Show this help"),
    ("quit", ("q", "exit"), "Exit"),
]

QUIT_KEYWORDS = {"quit", "q", "exit"}


@dataclass
class SessionContext:
    """Explicit per-session state handed to every action."""

    repo_path: Path = field(default_factory=Path.cwd)
    settings: Settings = field(default_factory=Settings)
    config_path: Optional[Path] = None


class AutoGit:
    """Interactive commit suggestion session."""

    def __init__(
        self,
        context: Optional[SessionContext] = None,
        git_repo: Optional[GitRepository] = None,
        console: Optional[AutoGitConsole] = None,
        classifier: Optional[DiffClassifier] = None
    ):
        """Wire up git, console and classifier for a session."""
        self.context = context or SessionContext()
        settings = self.context.settings
        self.git_repo = git_repo or GitRepository(self.context.repo_path, settings.git.binary)
        self.console = console or AutoGitConsole(settings)
        self.classifier = classifier or DiffClassifier(
            limit=settings.suggestions.max_suggestions,
            style=settings.suggestions.commit_style
        )
        self._handlers = self._build_dispatch_table()

        logger.debug(f"AutoGit session initialized for {self.context.repo_path}")

    @property
    def settings(self) -> Settings:
        return self.context.settings

    def _build_dispatch_table(self) -> Dict[str, Callable[[], bool]]:
        actions: Dict[str, Callable[[], bool]] = {
            "suggest": self.suggest_commits,
            "auto": self.auto_commit,
            "analyze": self.analyze_changes,
            "log": self.show_log,
            "config": self.show_configuration,
            "install-hook": self.install_hook,
            "help": self.show_help,
        }
        table = {}
        for name, aliases, _ in COMMANDS:
            if name in actions:
                for keyword in (name, *aliases):
                    table[keyword] = actions[name]
        return table

    def run(self) -> None:
        """Read commands until quit or end of input."""
        self.console.print_banner()
        self.show_help()

        while True:
            command = self.console.read_command()
            if command is None:
                break
            if not self.execute(command):
                break

        self.console.print("Goodbye!")

    def execute(self, command: str) -> bool:
        """Run one command line; returns False when the session should end."""
        command = command.strip()
        if not command:
            return True

        if command in QUIT_KEYWORDS:
            return False

        handler = self._handlers.get(command)
        if handler is None:
            self.console.print("Unknown command. Type 'help' for options.")
            return True

        try:
            handler()
        except GitRepositoryError as e:
            logger.error(f"Command '{command}' failed: {e}")
            self.console.print_error(str(e))
        return True

    def _ensure_repository(self) -> bool:
        if self.git_repo.is_repository():
            return True
        self.console.print_error(f"Not a git repository: {self.context.repo_path}")
        return False

    def _staged_diff(self, empty_message: str) -> Optional[str]:
        """Fetch the staged diff, reporting an empty or failed result."""
        diff = self.git_repo.staged_diff()
        if not diff:
            self.console.print_warning(empty_message)
            return None
        if output_indicates_failure(diff):
            self.console.print_error(f"git diff failed: {diff}")
            return None
        return diff

    def suggest_commits(self) -> bool:
        """Analyze staged changes and print suggestions."""
        if not self._ensure_repository():
            return False

        self.console.print_info("Analyzing changes...")
        stat = self.git_repo.staged_stat()

        if not stat:
            self.console.print_warning("No staged changes. Run 'git add' first.")
            return False

        if output_indicates_failure(stat):
            self.console.print_error(f"git diff failed: {stat}")
            return False

        full_diff = self._staged_diff("No staged changes. Run 'git add' first.")
        if full_diff is None:
            return False
        self.console.show_staged_stat(stat)

        suggestions = self.classifier.suggest(full_diff)
        logger.debug(f"Generated {len(suggestions)} suggestions")
        self.console.show_suggestions(suggestions)
        self.console.print("Use 'auto' to commit with the best suggestion")
        return True

    def auto_commit(self, assume_yes: bool = False) -> bool:
        """Commit the staged changes with the best suggestion."""
        if not self._ensure_repository():
            return False

        diff = self._staged_diff("No staged changes to commit")
        if diff is None:
            return False

        message = self.classifier.best_message(diff)
        self.console.show_commit_message_preview(message)

        if self.settings.ui.confirm_commits and not assume_yes:
            if not self.console.confirm_action("Commit?", default=False):
                self.console.print_info("Cancelled")
                return False

        status, result = self.git_repo.commit(message)

        if status != 0 or output_indicates_failure(result):
            logger.error(f"Commit failed: {result}")
            self.console.print_error(f"Commit failed: {result}")
            return False

        logger.info(f"Committed with generated message: {message}")
        self.console.print_success(f"Committed: {message}")
        return True

    def analyze_changes(self) -> bool:
        """Show what the classifier sees in the staged diff."""
        if not self._ensure_repository():
            return False

        diff = self._staged_diff("No staged changes. Run 'git add' first.")
        if diff is None:
            return False

        analysis = parse_diff(diff)
        self.console.show_analysis(analysis, self.classifier.matched_rules(analysis))
        return True

    def show_log(self, count: Optional[int] = None) -> bool:
        """Show recent commits."""
        if not self._ensure_repository():
            return False

        commits = self.git_repo.recent_log(count or self.settings.git.log_count)
        if not commits:
            self.console.print_info("No commits yet")
            return True

        self.console.show_recent_commits(commits)
        return True

    def show_configuration(self) -> bool:
        """Show the effective configuration."""
        config_path = self.context.config_path or self.settings.default_config_path()
        self.console.show_configuration(self.settings, config_path)
        self.console.print("Use 'autogit config --help' to change settings")
        return True

    def install_hook(self) -> bool:
        """Install the prepare-commit-msg hook in this repository."""
        if not self._ensure_repository():
            return False

        try:
            hook_path = install_hook(self.git_repo.hooks_dir())
        except HookInstallError as e:
            self.console.print_warning(str(e))
            return False

        self.console.print_success(f"Hook installed at {hook_path}")
        return True

    def show_help(self) -> bool:
        self.console.show_help(COMMANDS)
        return True


class AutoGitError(Exception):
    """Custom exception for AutoGit operations."""
    pass
