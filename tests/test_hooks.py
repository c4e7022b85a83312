"""
Tests for prepare-commit-msg hook installation and message prefilling.
"""

import os
import sys

import pytest

from autogit.utils.hooks import (
    HOOK_MARKER,
    HOOK_NAME,
    HookInstallError,
    hook_script,
    install_hook,
    prefill_message_file,
    should_prefill,
)


class TestInstallHook:

    def test_writes_script(self, tmp_path):
        hooks = tmp_path / "hooks"
        hook_path = install_hook(hooks, python_exe="/opt/py/bin/python")

        assert hook_path == hooks / HOOK_NAME
        content = hook_path.read_text()
        assert content.startswith("#!/usr/bin/env sh\n")
        assert HOOK_MARKER in content
        assert '"/opt/py/bin/python" -m autogit.cli prepare-message "$@"' in content

    @pytest.mark.skipif(sys.platform == "win32", reason="no exec bit on Windows")
    def test_script_is_executable(self, tmp_path):
        hook_path = install_hook(tmp_path)
        assert os.access(hook_path, os.X_OK)

    def test_reinstall_is_idempotent(self, tmp_path):
        install_hook(tmp_path, python_exe="/old/python")
        hook_path = install_hook(tmp_path, python_exe="/new/python")

        assert hook_path.read_text() == hook_script("/new/python")

    def test_refuses_foreign_hook(self, tmp_path):
        foreign = tmp_path / HOOK_NAME
        foreign.write_text("#!/bin/sh\nexit 0\n")

        with pytest.raises(HookInstallError, match="already exists"):
            install_hook(tmp_path)
        assert foreign.read_text() == "#!/bin/sh\nexit 0\n"

    def test_default_interpreter(self):
        assert sys.executable in hook_script()


class TestPrefill:

    @pytest.mark.parametrize("source, expected", [
        (None, True),
        ("", True),
        ("message", False),
        ("template", False),
        ("merge", False),
        ("squash", False),
        ("commit", False),
    ])
    def test_should_prefill(self, source, expected):
        assert should_prefill(source) is expected

    def test_prepends_to_existing_template(self, tmp_path):
        message_file = tmp_path / "COMMIT_EDITMSG"
        message_file.write_text("# Please enter the commit message\n")

        prefill_message_file(message_file, "feat: Add new functionality")

        assert message_file.read_text() == (
            "feat: Add new functionality\n# Please enter the commit message\n"
        )

    def test_creates_missing_file(self, tmp_path):
        message_file = tmp_path / "COMMIT_EDITMSG"
        prefill_message_file(message_file, "chore: Update 1 file")
        assert message_file.read_text() == "chore: Update 1 file\n"
