"""Configuration management for github-firestore-connector."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from github_firestore_connector.exceptions import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Load environment variables from .env file if it exists
dotenv_path = Path.cwd() / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)
else:
    # Also try loading from project root if running from subdirectory
    load_dotenv()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value


@dataclass
class ConnectorConfig:
    """Connector runtime configuration."""

    output_dir: Path
    collection: str
    max_workers: int  # threads in the shared transform pool
    log_level: str

    @classmethod
    def from_env(cls, prefix: str = "CONNECTOR") -> "ConnectorConfig":
        """Load configuration from environment variables.

        Args:
            prefix: Environment variable prefix (e.g., "CONNECTOR")

        Returns:
            ConnectorConfig instance

        Raises:
            ConfigError: If a setting is blank, non-numeric or out of range
        """
        collection = os.getenv(f"{prefix}_COLLECTION", "issues").strip()
        if not collection:
            raise ConfigError(f"{prefix}_COLLECTION cannot be blank")

        log_level = os.getenv(f"{prefix}_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"{prefix}_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        return cls(
            output_dir=Path(os.getenv(f"{prefix}_OUTPUT_DIR", "output")),
            collection=collection,
            max_workers=_int_from_env(f"{prefix}_MAX_WORKERS", 4),
            log_level=log_level,
        )
