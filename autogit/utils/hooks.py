"""
prepare-commit-msg hook support.

The installed hook calls back into ``autogit prepare-message`` so that a plain
``git commit`` opens the editor with the best suggestion already filled in.
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger


HOOK_NAME = "prepare-commit-msg"
HOOK_MARKER = "# autogit prepare-commit-msg hook"


class HookInstallError(Exception):
    """Raised when the hook cannot be installed."""
    pass


def hook_script(python_exe: Optional[str] = None) -> str:
    """Render the shell script written into the hooks directory."""
    python_exe = python_exe or sys.executable
    return f"""#!/usr/bin/env sh
{HOOK_MARKER}
exec "{python_exe}" -m autogit.cli prepare-message "$@"
"""


def install_hook(hooks_dir: Path, python_exe: Optional[str] = None) -> Path:
    """Write the hook into ``hooks_dir`` and return its path.

    An existing hook that autogit did not write is left alone.
    """
    hook_path = hooks_dir / HOOK_NAME

    if hook_path.exists():
        try:
            existing_content = hook_path.read_text()
        except OSError as e:
            raise HookInstallError(f"Could not read existing hook {hook_path}: {e}")
        if HOOK_MARKER not in existing_content:
            raise HookInstallError(
                f"A {HOOK_NAME} hook already exists at {hook_path}; remove it first"
            )

    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
        with open(hook_path, 'w') as f:
            f.write(hook_script(python_exe))

        if sys.platform != "win32":
            hook_path.chmod(0o755)
    except OSError as e:
        raise HookInstallError(f"Failed to write hook {hook_path}: {e}")

    logger.info(f"Installed {HOOK_NAME} hook at {hook_path}")
    return hook_path


def should_prefill(source: Optional[str]) -> bool:
    """Only a bare ``git commit`` (no message source) gets a suggestion."""
    return not source


def prefill_message_file(message_file: Path, message: str) -> None:
    """Put ``message`` at the top of git's commit message file."""
    existing = message_file.read_text() if message_file.exists() else ""
    with open(message_file, 'w') as f:
        f.write(f"{message}\n{existing}")
    logger.debug(f"Wrote suggested message to {message_file}")
