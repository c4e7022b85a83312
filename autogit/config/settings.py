"""
Configuration management with Pydantic validation and environment variable support.
"""

import json
import os
import platform
import shutil
from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


def _default_git_binary() -> str:
    """Locate the git executable, falling back to the usual system path."""
    return shutil.which("git") or "/usr/bin/git"


class GitSettings(BaseModel):
    """Git invocation configuration."""

    binary: str = Field(
        default_factory=_default_git_binary,
        description="Path to the git executable"
    )
    log_count: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of commits shown by the log command"
    )


class SuggestionSettings(BaseModel):
    """Commit message suggestion configuration."""

    max_suggestions: int = Field(
        default=5,
        ge=1,
        le=5,
        description="Maximum number of suggestions to show"
    )
    commit_style: Literal["conventional", "simple"] = Field(
        default="conventional",
        description="Keep the '<type>: ' prefix (conventional) or drop it (simple)"
    )


class UISettings(BaseModel):
    """User interface configuration."""

    use_colors: bool = Field(
        default=True,
        description="Use colored output"
    )
    confirm_commits: bool = Field(
        default=True,
        description="Ask before committing with a generated message"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    git: GitSettings = Field(default_factory=GitSettings)
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    ui: UISettings = Field(default_factory=UISettings)

    model_config = {
        "env_prefix": "AUTOGIT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def __init__(self, **kwargs):
        # Only fall back to the config file when nothing was passed explicitly
        if not kwargs:
            config_path = self.default_config_path()
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        kwargs = json.load(f)
                except (json.JSONDecodeError, OSError):
                    pass  # Fall back to defaults

        super().__init__(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file values arrive as init kwargs; AUTOGIT_* variables must win
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @staticmethod
    def _config_base() -> Path:
        if platform.system() == "Windows":
            return Path(os.environ.get("APPDATA", "~"))
        return Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

    @classmethod
    def default_config_path(cls) -> Path:
        """Get the default config file path."""
        return (cls._config_base() / "autogit" / "config.json").expanduser()

    @classmethod
    def from_file(cls, config_path: Path) -> "Settings":
        """Load settings from a configuration file."""
        if config_path.exists():
            with open(config_path) as f:
                config_data = json.load(f)
            return cls(**config_data)
        return cls()

    def save_to_file(self, config_path: Optional[Path] = None) -> Path:
        """Save current settings to a configuration file."""
        config_path = config_path or self.default_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(self.model_dump(), f, indent=2)
        return config_path

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("LOCALAPPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CACHE_HOME", "~/.cache"))

        return (base / "autogit").expanduser()

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.cache_dir / "autogit.log"
