"""Configuration management for the pitch-deck analysis service.

Loads and validates YAML configuration with sensible defaults
for extraction, analysis, storage, persistence, and pipeline settings.
"""

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DECKINSIGHT_AUTH_SECRET": ("auth", "secret"),
    "DECKINSIGHT_DATABASE_URL": ("database", "url"),
}


class ExtractionConfig(BaseModel):
    """Configuration for document text extraction."""

    default_strategy: Literal["local", "remote"] = "local"
    page_separator: str = "\n\n"
    textract_region: str = "us-east-1"
    textract_feature_types: list[str] = Field(
        default_factory=lambda: ["FORMS", "TABLES", "LAYOUT"]
    )


class AnalyzerConfig(BaseModel):
    """Configuration for the language-model analyzer."""

    model: str = "gpt-4o"
    temperature: float = 0.2
    max_tokens: int | None = None


class StorageConfig(BaseModel):
    """Configuration for the uploaded document object store."""

    type: str = "local"
    base_dir: str = "data/uploads"
    bucket: str = "pitch-decks"
    region: str = "us-east-1"


class DatabaseConfig(BaseModel):
    """Configuration for the relational store."""

    url: str = "sqlite:///./deckinsight.db"
    echo: bool = False


class PipelineConfig(BaseModel):
    """Configuration for the analysis pipeline."""

    deadline_seconds: float = 58.0
    max_upload_mb: int = 10


class AuthConfig(BaseModel):
    """Configuration for bearer-token session verification."""

    secret: str = "dev-secret-change-me"
    token_ttl_seconds: int = 24 * 60 * 60


class AppConfig(BaseModel):
    """Top-level application configuration."""

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    log_level: str = "INFO"


def _apply_env_overrides(raw: dict) -> dict:
    """Overlay secrets from the environment onto raw configuration.

    Args:
        raw: Parsed YAML mapping.

    Returns:
        The same mapping with any set environment values applied.
    """
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            raw.setdefault(section, {})[key] = value
    return raw


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    raw: dict = {}
    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("No config file found at %s, using defaults", path)

    return AppConfig(**_apply_env_overrides(raw))
