"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.utils.config import (
    AnalyzerConfig,
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    ExtractionConfig,
    PipelineConfig,
    StorageConfig,
    load_config,
)


class TestExtractionConfig:
    """Tests for ExtractionConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = ExtractionConfig()
        assert cfg.default_strategy == "local"
        assert cfg.page_separator == "\n\n"
        assert cfg.textract_feature_types == ["FORMS", "TABLES", "LAYOUT"]

    def test_override(self) -> None:
        cfg = ExtractionConfig(textract_region="eu-west-1")
        assert cfg.textract_region == "eu-west-1"

    def test_unknown_default_strategy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExtractionConfig(default_strategy="magic")


class TestAnalyzerConfig:
    """Tests for AnalyzerConfig defaults."""

    def test_defaults(self) -> None:
        cfg = AnalyzerConfig()
        assert cfg.model == "gpt-4o"
        assert cfg.temperature == 0.2
        assert cfg.max_tokens is None


class TestPipelineConfig:
    """Tests for PipelineConfig defaults."""

    def test_defaults(self) -> None:
        cfg = PipelineConfig()
        assert cfg.deadline_seconds == 58.0
        assert cfg.max_upload_mb == 10


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.extraction, ExtractionConfig)
        assert isinstance(cfg.analyzer, AnalyzerConfig)
        assert isinstance(cfg.storage, StorageConfig)
        assert isinstance(cfg.database, DatabaseConfig)
        assert isinstance(cfg.auth, AuthConfig)
        assert cfg.storage.type == "local"
        assert cfg.log_level == "INFO"

    def test_nested_override(self) -> None:
        cfg = AppConfig(
            pipeline=PipelineConfig(deadline_seconds=30),
            log_level="DEBUG",
        )
        assert cfg.pipeline.deadline_seconds == 30
        assert cfg.log_level == "DEBUG"


class TestLoadConfig:
    """Tests for the load_config function."""

    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DECKINSIGHT_AUTH_SECRET", raising=False)
        monkeypatch.delenv("DECKINSIGHT_DATABASE_URL", raising=False)

    def test_load_default_config(self, project_root: Path) -> None:
        cfg = load_config(project_root / "configs" / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.pipeline.deadline_seconds == 58
        assert cfg.analyzer.model == "gpt-4o"

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert cfg == AppConfig()

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "storage": {"type": "s3", "bucket": "decks"},
            "pipeline": {"deadline_seconds": 45},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.storage.type == "s3"
        assert cfg.storage.bucket == "decks"
        assert cfg.pipeline.deadline_seconds == 45
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)

    def test_env_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DECKINSIGHT_AUTH_SECRET", "from-env")
        monkeypatch.setenv("DECKINSIGHT_DATABASE_URL", "sqlite:///env.db")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("auth:\n  secret: from-file\n")

        cfg = load_config(config_file)
        assert cfg.auth.secret == "from-env"
        assert cfg.database.url == "sqlite:///env.db"

    def test_load_none_defaults_to_standard_path(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
