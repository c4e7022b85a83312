"""
Shared fixtures: isolated config directories, a scripted git adapter, and a
session wired to an in-memory console.
"""

import io
import os

import pytest
from loguru import logger
from rich.console import Console

from autogit.config.settings import Settings
from autogit.core import AutoGit, SessionContext
from autogit.git_ops.repository import GitRepository
from autogit.ui.console import AutoGitConsole
from autogit.utils.classifier import DiffClassifier


MODIFIED_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@
 import os
-VALUE = 1
+VALUE = 2
 print(VALUE)
"""

TEST_DIFF = """\
diff --git a/tests/test_app.py b/tests/test_app.py
index 1111111..2222222 100644
--- a/tests/test_app.py
+++ b/tests/test_app.py
@@ -1,2 +1,3 @@
 def test_value():
     assert VALUE == 2
+    assert VALUE > 1
"""

BUG_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,2 @@
-# bug: off by one
+VALUE = 2
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep config, cache and AUTOGIT_* variables out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / "cache"))
    monkeypatch.setenv("APPDATA", str(home / "config"))
    monkeypatch.setenv("LOCALAPPDATA", str(home / "cache"))
    for name in list(os.environ):
        if name.upper().startswith("AUTOGIT_"):
            monkeypatch.delenv(name)
    yield
    logger.remove()


class ScriptedGitRepository(GitRepository):
    """GitRepository whose git invocations return canned results."""

    def __init__(self, repo_path, responses=None, is_repo=True):
        super().__init__(repo_path, binary="git")
        self.responses = dict(responses or {})
        self.is_repo = is_repo
        self.calls = []

    def _execute(self, args):
        args = tuple(args)
        self.calls.append(args)

        if args == ("rev-parse", "--is-inside-work-tree"):
            if self.is_repo:
                return 0, "true"
            return 128, "fatal: not a git repository (or any of the parent directories): .git"

        if args[:2] == ("commit", "-m"):
            default = (0, f"[main abc1234] {args[2]}\n 1 file changed, 1 insertion(+)")
            return self.responses.get("commit", default)

        return self.responses.get(args, (0, ""))

    def staged(self, diff, stat=" src/app.py | 2 +-\n 1 file changed, 1 insertion(+), 1 deletion(-)"):
        """Script a staged diff and its stat summary."""
        self.responses[("diff", "--cached")] = (0, diff.strip())
        self.responses[("diff", "--cached", "--stat")] = (0, stat)
        return self

    @property
    def diff_calls(self):
        return [call for call in self.calls if call[0] == "diff"]


class SpyClassifier(DiffClassifier):
    """Classifier that counts how often suggestions are generated."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.suggest_calls = 0

    def suggest(self, diff):
        self.suggest_calls += 1
        return super().suggest(diff)


@pytest.fixture
def settings():
    return Settings(git={"binary": "git"})


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def git_repo(tmp_path):
    return ScriptedGitRepository(tmp_path)


@pytest.fixture
def scripted_input(monkeypatch):
    """Return a function that feeds lines to input(); EOF once they run out."""
    def _feed(*lines):
        remaining = iter(lines)

        def fake_input(prompt=""):
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError
        monkeypatch.setattr("builtins.input", fake_input)
    return _feed


@pytest.fixture
def make_session(tmp_path, settings, output, git_repo):
    """Return a factory for sessions bound to the scripted repository."""
    def _make(repo=None, classifier=None):
        rich_console = Console(file=output, width=200, color_system=None, force_terminal=False)
        return AutoGit(
            SessionContext(repo_path=tmp_path, settings=settings),
            git_repo=repo or git_repo,
            console=AutoGitConsole(settings, console=rich_console),
            classifier=classifier,
        )
    return _make
