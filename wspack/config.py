"""Configuration management with Pydantic and XDG base directory support."""

import os
import sys
from pathlib import Path

from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


class Settings(BaseSettings):
    """wspack configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="WSPACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/wspack)",
    )

    # Workspace layout
    manifest_filename: str = Field(
        default="package.json",
        description="Name of the manifest file identifying a workspace",
    )

    lockfile_names: list[str] = Field(
        default_factory=lambda: ["yarn.lock", "package-lock.json", "pnpm-lock.yaml"],
        description="Files marking the root of a multi-workspace project",
    )

    state_dir_name: str = Field(
        default=".wspack",
        description="Directory (under the project root) holding the persisted install state",
    )

    # Install
    install_command: str = Field(
        default="npm install",
        description="Command used to populate the dependency tree",
    )

    # Archive
    default_filename: str = Field(
        default="package.tgz",
        description="Archive file name used when no --out template is given",
    )

    archive_prefix: str = Field(
        default="package",
        description="Directory prefix of every archive member",
    )

    compression_level: int = Field(
        default=9,
        ge=1,
        le=9,
        description="gzip compression level for generated archives",
    )

    log_level: str = Field(
        default="WARNING",
        description="Standard library logging level (DEBUG, INFO, WARNING, ...)",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)
    _data_dir_warning_emitted: bool = PrivateAttr(default=False)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self._resolved_data_dir is not None:
            return self._resolved_data_dir

        if self.data_dir:
            data_dir = self.data_dir
            data_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = data_dir
            return data_dir

        primary_dir = get_xdg_data_home() / "wspack"
        try:
            primary_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = Path.cwd() / ".wspack-data"
            fallback.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = fallback
            if not self._data_dir_warning_emitted:
                print(
                    f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                    f"Using local '{fallback}' instead. Pass --data-dir to override.",
                    file=sys.stderr,
                )
                self._data_dir_warning_emitted = True
            return fallback

    def get_script_log_dir(self) -> Path:
        """Get directory where lifecycle script transcripts are kept."""
        log_dir = self.get_data_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir

    def get_install_state_path(self, project_root: Path) -> Path:
        """Get path to the persisted install state of ``project_root``."""
        return Path(project_root) / self.state_dir_name / "install-state.json"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
