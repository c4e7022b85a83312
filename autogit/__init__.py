"""
AutoGit - heuristic commit message suggestions for staged git changes.

Inspects the staged diff, matches it against a fixed set of change patterns,
and proposes conventional commit messages; it can also make the commit.
"""

__version__ = "1.0.0"

from autogit.core import AutoGit, SessionContext
from autogit.config.settings import Settings

__all__ = ["AutoGit", "SessionContext", "Settings"]
