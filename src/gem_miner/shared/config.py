"""
Configuration Module - Load and validate application settings.
==============================================================

Loads configuration from:
1. config/settings.yaml (defaults)
2. Environment variables from .env file
3. Environment variables from system

Environment variables override YAML defaults, including nested keys
written with a double underscore (e.g. PATHS__QREPORT_FILE).
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Load .env file early
load_dotenv()


def _find_project_root() -> Path:
    """Find the project root directory by looking for pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Nested Configuration Models
# ─────────────────────────────────────────────────────────────────────────────


class PathsConfig(BaseModel):
    """Data source paths."""

    data_dir: str = "data"
    qreport_file: str = "data/qreport-spring-2025.csv"
    catalog_file: str = "data/AY_2025_2026_courses.csv"
    signals_file: str = "data/canvas-cache.json"

    def resolve(self, base_path: Path) -> "ResolvedPaths":
        """Resolve paths relative to a base path."""
        return ResolvedPaths(
            data_dir=_resolve(base_path, self.data_dir),
            qreport_file=_resolve(base_path, self.qreport_file),
            catalog_file=_resolve(base_path, self.catalog_file),
            signals_file=_resolve(base_path, self.signals_file),
        )


class ResolvedPaths(BaseModel):
    """Resolved absolute paths."""

    data_dir: Path
    qreport_file: Path
    catalog_file: Path
    signals_file: Path

    model_config = {"arbitrary_types_allowed": True}


class CatalogConfig(BaseModel):
    """Catalog parsing and lookup settings."""

    gened_subject: str = "GENED"
    department_aliases: dict[str, str] = Field(default_factory=lambda: {"CS": "COMPSCI"})
    not_listed_instructor: str = "Instructor not listed"
    front_matter_markers: list[str] = Field(
        default_factory=lambda: ["HARVARD UNIVERSITY", "TABLE OF CONTENTS"]
    )

    @field_validator("gened_subject")
    @classmethod
    def upper_subject(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("department_aliases")
    @classmethod
    def upper_aliases(cls, v: dict[str, str]) -> dict[str, str]:
        return {k.strip().upper(): val.strip().upper() for k, val in v.items()}


class DefaultsConfig(BaseModel):
    """Synthetic values used when the evaluation source is empty."""

    rating: float = 4.0
    workload_hours: float = 6.0
    sentiment_score: float = 0.5


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    rich_console: bool = True
    file: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Main Settings Class
# ─────────────────────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """
    Main application settings.

    Loads from:
    1. config/settings.yaml (defaults)
    2. Environment variables

    Environment variables override YAML settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Top-level environment overrides
    qreport_csv_path: Optional[str] = Field(default=None, validation_alias="QREPORT_CSV_PATH")
    catalog_csv_path: Optional[str] = Field(default=None, validation_alias="CATALOG_AY_CSV_PATH")
    canvas_cache_path: Optional[str] = Field(default=None, validation_alias="CANVAS_CACHE_PATH")
    log_level: Optional[str] = Field(default=None, validation_alias="LOG_LEVEL")

    # Nested configurations (from YAML)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    _project_root: Path = PROJECT_ROOT
    _resolved_paths: Optional[ResolvedPaths] = None

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return self._project_root

    @property
    def resolved_paths(self) -> ResolvedPaths:
        """Get resolved absolute paths, with environment overrides applied."""
        if self._resolved_paths is None:
            resolved = self.paths.resolve(self._project_root)
            if self.qreport_csv_path:
                resolved.qreport_file = _resolve(self._project_root, self.qreport_csv_path)
            if self.catalog_csv_path:
                resolved.catalog_file = _resolve(self._project_root, self.catalog_csv_path)
            if self.canvas_cache_path:
                resolved.signals_file = _resolve(self._project_root, self.canvas_cache_path)
            self._resolved_paths = resolved
        return self._resolved_paths

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Environment first, then the YAML values passed as init kwargs."""
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    def get_effective_log_level(self) -> str:
        """Get the effective log level (env override or config)."""
        if self.log_level:
            return self.log_level.upper()
        return self.logging.level.upper()


def _resolve(base_path: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_path / path


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def _create_settings(config_path: Optional[Path] = None) -> Settings:
    """Create settings instance by merging YAML defaults with environment."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    yaml_config = _load_yaml_config(config_path)
    return Settings(**yaml_config)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the singleton settings instance.

    Returns:
        Settings instance with merged configuration

    Example:
        >>> settings = get_settings()
        >>> print(settings.defaults.rating)
        4.0
    """
    return _create_settings()


def reload_settings() -> Settings:
    """
    Force reload of settings (clears cache).

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
