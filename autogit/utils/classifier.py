"""
Heuristic commit message suggestions from staged diff text.

The classifier runs a fixed table of rules over the diff. Each rule that
matches contributes its message templates in table order, and the result is
cut down to the first few suggestions.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple


MAX_SUGGESTIONS = 5
DEFAULT_MESSAGE = "chore: Update files"

_DIFF_HEADER = re.compile(r"^diff --git a/(.+) b/(.+)$")
_NULL_PATH = "/dev/null"


@dataclass
class FileStat:
    """Per-file summary of a staged change."""

    path: str
    status: str = "M"  # 'A', 'M', 'D', 'R'
    additions: int = 0
    deletions: int = 0


@dataclass
class DiffAnalysis:
    """Parsed view of a unified diff."""

    text: str
    file_stats: List[FileStat] = field(default_factory=list)
    hunks: int = 0

    @property
    def files(self) -> List[str]:
        return [stat.path for stat in self.file_stats]

    @property
    def new_files(self) -> List[str]:
        return [stat.path for stat in self.file_stats if stat.status == 'A']

    @property
    def deleted_files(self) -> List[str]:
        return [stat.path for stat in self.file_stats if stat.status == 'D']

    @property
    def renamed_files(self) -> List[str]:
        return [stat.path for stat in self.file_stats if stat.status == 'R']

    @property
    def additions(self) -> int:
        return sum(stat.additions for stat in self.file_stats)

    @property
    def deletions(self) -> int:
        return sum(stat.deletions for stat in self.file_stats)


def _strip_prefix(path: str) -> str:
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def parse_diff(text: str) -> DiffAnalysis:
    """Split diff text into per-file statistics.

    File paths come from ``diff --git`` headers and are refined by the
    ``---``/``+++`` lines, so plain unified diffs without git headers work too.
    """
    analysis = DiffAnalysis(text=text)
    by_path: Dict[str, FileStat] = {}
    current: Optional[FileStat] = None
    in_header = True
    old_path: Optional[str] = None

    def track(path: str, status: str = "M") -> FileStat:
        stat = by_path.get(path)
        if stat is None:
            stat = FileStat(path=path, status=status)
            by_path[path] = stat
            analysis.file_stats.append(stat)
        return stat

    lines = text.splitlines()
    for index, line in enumerate(lines):
        header = _DIFF_HEADER.match(line)
        if header:
            current = track(header.group(2))
            in_header = True
            old_path = None
            continue

        # Plain unified diffs start the next file with a bare ---/+++ pair
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if not in_header and line.startswith("--- ") and next_line.startswith("+++ "):
            current = None
            in_header = True

        if line.startswith("@@"):
            analysis.hunks += 1
            in_header = False
            continue

        if in_header:
            if line.startswith("new file mode") and current:
                current.status = 'A'
            elif line.startswith("deleted file mode") and current:
                current.status = 'D'
            elif line.startswith("rename to ") and current:
                current.status = 'R'
            elif line.startswith("--- "):
                old_path = line[4:].strip()
            elif line.startswith("+++ "):
                new_path = line[4:].strip()
                if new_path == _NULL_PATH and old_path:
                    current = _retarget(analysis, by_path, current, _strip_prefix(old_path))
                    current.status = 'D'
                else:
                    current = _retarget(analysis, by_path, current, _strip_prefix(new_path))
                    if old_path == _NULL_PATH:
                        current.status = 'A'
            continue

        if current is None:
            continue
        if line.startswith("+"):
            current.additions += 1
        elif line.startswith("-"):
            current.deletions += 1

    return analysis


def _retarget(
    analysis: DiffAnalysis,
    by_path: Dict[str, FileStat],
    current: Optional[FileStat],
    path: str
) -> FileStat:
    """Point the current entry at ``path``, reusing an entry for it if tracked."""
    if current is not None and current.path == path:
        return current
    if current is None:
        stat = by_path.get(path)
        if stat is None:
            stat = FileStat(path=path)
            by_path[path] = stat
            analysis.file_stats.append(stat)
        return stat
    # Header path disagreed with the ---/+++ path; the latter wins
    del by_path[current.path]
    current.path = path
    by_path[path] = current
    return current


def _contains_any(*needles: str) -> Callable[[DiffAnalysis], bool]:
    return lambda analysis: any(needle in analysis.text for needle in needles)


def _only_new_files(analysis: DiffAnalysis) -> bool:
    return bool(analysis.new_files) and not analysis.deleted_files and \
        len(analysis.new_files) == len(analysis.file_stats)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


@dataclass(frozen=True)
class Rule:
    """A named predicate with the messages it contributes when it matches."""

    name: str
    predicate: Callable[[DiffAnalysis], bool]
    messages: Callable[[DiffAnalysis], Tuple[str, ...]]

    def matches(self, analysis: DiffAnalysis) -> bool:
        return self.predicate(analysis)


def _fixed(*messages: str) -> Callable[[DiffAnalysis], Tuple[str, ...]]:
    return lambda analysis: messages


# Evaluated in order; earlier rules rank higher
RULES: Tuple[Rule, ...] = (
    Rule("fix", _contains_any("fix:", "bug", "error"),
         _fixed("fix: Resolve issue in modified components", "fix: Correct logic error")),
    Rule("feature", _contains_any("feat:", "add:", "new:"),
         _fixed("feat: Add new functionality", "feat: Implement requested feature")),
    Rule("refactor", _contains_any("refactor", "rename"),
         _fixed("refactor: Improve code structure", "refactor: Simplify implementation")),
    Rule("docs", _contains_any(".md", "README", "docs"),
         _fixed("docs: Update documentation", "docs: Add README updates")),
    Rule("test", _contains_any("test", "spec"),
         _fixed("test: Add unit tests", "test: Improve test coverage")),
    Rule("new-files", _only_new_files,
         lambda analysis: (f"feat: Add {_plural(len(analysis.new_files), 'new file')}",)),
    Rule("removed-files", lambda analysis: bool(analysis.deleted_files),
         _fixed("chore: Remove unused files")),
    Rule("major-changes", lambda analysis: analysis.hunks > 5,
         _fixed("refactor: Major changes across multiple files")),
)


def _fallback(analysis: DiffAnalysis) -> List[str]:
    count = len(analysis.file_stats)
    subject = _plural(count, "file") if count else "project files"
    return [
        f"chore: Update {subject}",
        "feat: Implement changes",
        "refactor: Code improvements",
    ]


def strip_category(message: str) -> str:
    """Drop the '<category>: ' prefix from a suggestion."""
    category, sep, description = message.partition(": ")
    if sep and category and " " not in category:
        return description
    return message


class DiffClassifier:
    """Turns staged diff text into ranked commit message suggestions."""

    def __init__(
        self,
        limit: int = MAX_SUGGESTIONS,
        style: str = "conventional",
        rules: Tuple[Rule, ...] = RULES
    ):
        self.limit = max(1, min(limit, MAX_SUGGESTIONS))
        self.style = style
        self.rules = rules

    def matched_rules(self, analysis: DiffAnalysis) -> List[str]:
        """Names of every rule that fires for the analysis."""
        return [rule.name for rule in self.rules if rule.matches(analysis)]

    def suggest(self, diff: str) -> List[str]:
        """Generate suggestions for raw diff text."""
        return self.suggest_for(parse_diff(diff))

    def suggest_for(self, analysis: DiffAnalysis) -> List[str]:
        messages: List[str] = []
        for rule in self.rules:
            if rule.matches(analysis):
                messages.extend(rule.messages(analysis))

        if not messages:
            messages = _fallback(analysis)

        messages = messages[:self.limit]
        if self.style == "simple":
            messages = [strip_category(message) for message in messages]
        return messages

    def best_message(self, diff: str) -> str:
        """The top suggestion, or a generic message when there is none."""
        suggestions = self.suggest(diff)
        if suggestions:
            return suggestions[0]
        return strip_category(DEFAULT_MESSAGE) if self.style == "simple" else DEFAULT_MESSAGE
