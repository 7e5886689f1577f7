"""Settings for the reviewpool service and CLI."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Searched in order when no config file is given explicitly
CONFIG_SEARCH_PATHS = (
    Path("reviewpool.yaml"),
    Path("reviewpool.yml"),
    Path(".reviewpool.yaml"),
    Path.home() / ".reviewpool" / "config.yaml",
)


class ReviewPoolConfig(BaseSettings):
    """Service settings.

    Values passed explicitly (or read from a YAML file) win over
    ``REVIEWPOOL_*`` environment variables and ``.env``, which win over the
    defaults below.
    """

    # HTTP server
    api_host: str = Field(default="0.0.0.0", description="Address the API binds to")
    api_port: int = Field(default=8080, description="Port the API listens on")

    # Storage
    storage: str = Field(default="sqlite", description="sqlite or postgresql")
    db_path: str = Field(default="./reviewpool.db", description="SQLite file, relative to the working directory")
    db_url: Optional[str] = Field(default=None, description="Full async SQLAlchemy URL; required for postgresql")
    db_echo: bool = Field(default=False, description="Log every SQL statement")

    # Assignment
    max_reviewers: int = Field(
        default=2,
        ge=0,
        description="Reviewers picked for a newly created pull request",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level name")
    log_file: Optional[str] = Field(default=None, description="Also write logs to this file")

    model_config = SettingsConfigDict(
        env_prefix="REVIEWPOOL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_database_url(self) -> str:
        """Resolve the SQLAlchemy URL for the configured backend.

        Raises:
            ValueError: For postgresql without ``db_url`` or an unknown backend
        """
        if self.db_url:
            return self.db_url

        if self.storage == "sqlite":
            db_path = Path(self.db_path)
            if not db_path.is_absolute():
                db_path = Path.cwd() / db_path
            return f"sqlite+aiosqlite:///{db_path}"
        if self.storage == "postgresql":
            raise ValueError("storage is postgresql but no db_url is set (REVIEWPOOL_DB_URL)")
        raise ValueError(f"Unknown storage backend: {self.storage}")

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ReviewPoolConfig":
        """Read settings from a YAML mapping.

        Raises:
            FileNotFoundError: If the file is missing
            ValueError: If the document is not a mapping
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a YAML mapping")
        return cls(**data)

    def to_yaml(self, config_path: str | Path) -> None:
        with open(config_path, "w") as f:
            yaml.safe_dump(self.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def create_default_config(cls, config_path: str | Path) -> "ReviewPoolConfig":
        """Write the default settings to ``config_path`` and return them."""
        config = cls()
        config.to_yaml(config_path)
        return config


_config: Optional[ReviewPoolConfig] = None


def init_config(config_path: Optional[str | Path] = None) -> ReviewPoolConfig:
    """Load settings into the process-wide instance.

    Without ``config_path`` the first existing file in ``CONFIG_SEARCH_PATHS``
    is used, falling back to environment and defaults.
    """
    global _config

    if config_path is None:
        config_path = next((path for path in CONFIG_SEARCH_PATHS if path.exists()), None)

    _config = ReviewPoolConfig.from_yaml(config_path) if config_path else ReviewPoolConfig()
    return _config


def get_config() -> ReviewPoolConfig:
    if _config is None:
        return init_config()
    return _config
