"""Configuration paths and reset handling."""

import shutil
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common.exceptions import ConfigurationError
from .common.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_NAME = ".cf-tunnel-buddy"
TUNNELS_FILE_NAME = "tunnels.json"
CREDENTIALS_FILE_NAME = "credentials.json"


def default_config_dir() -> Path:
    """Return the default configuration directory under the user's home."""
    return Path.home() / CONFIG_DIR_NAME


class ResetScope(str, Enum):
    """What a configuration reset deletes."""

    TUNNELS = "tunnels"
    ALL = "all"


class Settings(BaseModel):
    """Runtime settings for locating local state and the cloudflared binary."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    config_dir: Path = Field(
        default_factory=default_config_dir, description="Configuration directory"
    )
    binary: str = Field(
        default="cloudflared", min_length=1, description="cloudflared executable"
    )

    @field_validator("config_dir")
    @classmethod
    def expand_config_dir(cls, v: Path) -> Path:
        """Expand ``~`` in the configuration directory."""
        return v.expanduser()

    @property
    def tunnels_file(self) -> Path:
        return self.config_dir / TUNNELS_FILE_NAME

    @property
    def credentials_file(self) -> Path:
        return self.config_dir / CREDENTIALS_FILE_NAME

    def ensure_config_directory(self) -> Path:
        """Create the configuration directory if it does not exist.

        Returns:
            The configuration directory

        Raises:
            ConfigurationError: If the directory cannot be created
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create configuration directory {self.config_dir}: {e}"
            ) from e
        return self.config_dir


def reset_config(settings: Settings, scope: ResetScope) -> None:
    """Delete local configuration.

    Args:
        settings: Settings holding the paths to delete
        scope: ``TUNNELS`` removes only the tunnel file, ``ALL`` removes the
            whole configuration directory
    """
    if scope == ResetScope.ALL:
        if settings.config_dir.exists():
            shutil.rmtree(settings.config_dir)
        logger.info("Configuration directory removed", path=str(settings.config_dir))
    elif scope == ResetScope.TUNNELS:
        settings.tunnels_file.unlink(missing_ok=True)
        logger.info("Tunnel file removed", path=str(settings.tunnels_file))
