"""Configuration management for checkdate."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_GLOBS = [".obsidian/**", ".trash/**", ".checkdate/**", ".git/**"]


def _find_repo_root(start_dir: Path) -> Path:
    """Nearest directory at or above start_dir holding .git or pyproject.toml.

    Falls back to start_dir when no marker exists up to the filesystem root.
    """
    for candidate in (start_dir, *start_dir.parents):
        if (candidate / ".git").exists() or (candidate / "pyproject.toml").exists():
            return candidate
    return start_dir


def _load_repo_config_data(repo_root: Path) -> Optional[dict]:
    """Parsed .checkdate/config.toml under repo_root, or None when absent or unreadable."""
    config_file = repo_root / ".checkdate" / "config.toml"
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring malformed config file {config_file}: {e}")
        return None


def _as_int(value: Any, *, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid config: {name} must be an int")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"Invalid config: {name} must be an int")


def resolve_vault_root(cli_vault_path: Optional[str] = None) -> Path:
    """Resolve vault root path with the following precedence:

    1. CLI --vault option (if provided)
    2. repo-local .checkdate/config.toml (walk upward from CWD)
    3. CHECKDATE_VAULT environment variable
    4. Current working directory

    Raises:
        FileNotFoundError: If the resolved path does not exist
    """
    if cli_vault_path:
        vault_path = Path(cli_vault_path).expanduser().resolve()
        source = "--vault"
    else:
        data = _load_repo_config_data(_find_repo_root(Path.cwd())) or {}
        repo_vault = data.get("vault_root")
        env_vault = os.environ.get("CHECKDATE_VAULT")
        if isinstance(repo_vault, str) and repo_vault.strip():
            vault_path = Path(repo_vault).expanduser().resolve()
            source = ".checkdate/config.toml"
        elif env_vault:
            vault_path = Path(env_vault).expanduser().resolve()
            source = "CHECKDATE_VAULT"
        else:
            vault_path = Path.cwd()
            source = "cwd"

    if not vault_path.is_dir():
        raise FileNotFoundError(f"Vault path from {source} is not a directory: {vault_path}")
    return vault_path


class CheckdateSettings(BaseModel):
    """User preferences, persisted as JSON with camelCase keys."""

    enable_real_time_adding: bool = Field(default=True, alias="enableRealTimeAdding")
    use_file_creation_date: bool = Field(default=True, alias="useFileCreationDate")
    enable_debug_logging: bool = Field(default=False, alias="enableDebugLogging")

    model_config = ConfigDict(populate_by_name=True)


class CheckdateConfig(BaseModel):
    """Process configuration for a vault run."""

    vault_path: Path = Field(default_factory=Path.cwd)
    settings_file: Optional[Path] = Field(default=None)
    batch_size: int = Field(default=10, ge=1)
    batch_delay_ms: int = Field(default=10, ge=0)
    exclude_globs: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_GLOBS))

    @property
    def settings_path(self) -> Path:
        if self.settings_file is not None:
            return self.settings_file
        return self.vault_path / ".checkdate" / "settings.json"

    @classmethod
    def from_env(cls, cli_vault_path: Optional[str] = None) -> "CheckdateConfig":
        """Load configuration from the repo config file, environment, and defaults.

        Args:
            cli_vault_path: Vault path from CLI --vault option (highest precedence)
        """
        vault_path = resolve_vault_root(cli_vault_path)
        data = _load_repo_config_data(_find_repo_root(Path.cwd())) or {}
        corpus = data.get("corpus", {})
        if not isinstance(corpus, dict):
            raise ValueError("Invalid config: [corpus] must be a table")

        batch_size = _as_int(
            os.environ.get("CHECKDATE_BATCH_SIZE", corpus.get("batch_size", 10)),
            name="batch_size",
        )
        batch_delay_ms = _as_int(
            os.environ.get("CHECKDATE_BATCH_DELAY_MS", corpus.get("batch_delay_ms", 10)),
            name="batch_delay_ms",
        )
        if batch_size < 1:
            raise ValueError("Invalid config: batch_size must be >= 1")
        if batch_delay_ms < 0:
            raise ValueError("Invalid config: batch_delay_ms must be >= 0")

        exclude_globs = corpus.get("exclude_globs", DEFAULT_EXCLUDE_GLOBS)
        if not isinstance(exclude_globs, list) or not all(isinstance(x, str) for x in exclude_globs):
            raise ValueError("Invalid config: [corpus].exclude_globs must be a list of strings")

        settings_env = os.environ.get("CHECKDATE_SETTINGS_FILE")
        return cls(
            vault_path=vault_path,
            settings_file=Path(settings_env).expanduser() if settings_env else None,
            batch_size=batch_size,
            batch_delay_ms=batch_delay_ms,
            exclude_globs=list(exclude_globs),
        )


class SettingsStore:
    """Loads and saves CheckdateSettings as a JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> CheckdateSettings:
        """Load settings, merging whatever the file holds over the defaults."""
        if not self.path.exists():
            logger.debug(f"Settings file {self.path} does not exist, using defaults")
            return CheckdateSettings()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must hold a JSON object")
            merged = CheckdateSettings().model_dump(by_alias=True)
            merged.update(data)
            return CheckdateSettings.model_validate(merged)
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning(f"Failed to load settings file {self.path}: {e}, using defaults")
            return CheckdateSettings()

    def save(self, settings: CheckdateSettings) -> None:
        """Save settings atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        temp_file = self.path.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(settings.model_dump(by_alias=True), f, indent=2)
                f.write("\n")
            temp_file.replace(self.path)
        except OSError:
            temp_file.unlink(missing_ok=True)
            raise
        logger.debug(f"Saved settings to {self.path}")
