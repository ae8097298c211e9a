"""Tests for cryptonews.config."""

import pytest
import yaml

from cryptonews.config import Config, SourceConfig, load_config, load_sources, save_sources
from cryptonews.ingestion import DEFAULT_SOURCES


def _write(path, data) -> None:
    path.write_text(yaml.safe_dump(data))


class TestConfig:
    def test_defaults(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        _write(path, {})
        config = load_config(path)
        assert config.llm.provider == "gemini"
        assert config.llm.model == "gemini-2.0-flash"
        assert config.ingestion.item_delay == 0.1
        assert config.ingestion.max_content_chars == 4000
        assert config.annotation.language == "Thai"

    def test_secrets_from_environment(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "config.yaml"
        _write(path, {
            "postgres": {"password_env": "TEST_DB_PASSWORD"},
            "llm": {"provider": "gemini", "api_key_env": "TEST_GEMINI_KEY"},
        })
        monkeypatch.setenv("TEST_DB_PASSWORD", "secret")
        monkeypatch.setenv("TEST_GEMINI_KEY", "key-123")

        config = Config(path)
        assert config.get_db_config()["password"] == "secret"
        assert config.get_llm_config()["api_key"] == "key-123"

    def test_config_path_from_environment(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("CRYPTONEWS_CONFIG", str(tmp_path / "custom.yaml"))
        config = Config()
        assert config.config_path == tmp_path / "custom.yaml"
        assert config.sources_path == tmp_path / "sources.yaml"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_values(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        _write(path, {"ingestion": {"timeout": -1}})
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_unset_secret_variable_keeps_inline_value(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "config.yaml"
        _write(path, {"postgres": {"password": "inline", "password_env": "UNSET_DB_PASSWORD"}})
        monkeypatch.delenv("UNSET_DB_PASSWORD", raising=False)
        assert Config(path).get_db_config()["password"] == "inline"

    def test_top_level_must_be_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config(path)


class TestSources:
    def test_falls_back_to_builtin_sources(self, tmp_path) -> None:
        config = Config(tmp_path / "config.yaml")
        names = [s.name for s in config.get_sources()]
        assert names == ["CoinDesk", "Cointelegraph", "CoinGape", "Bitcoin Magazine", "CryptoSlate"]

    def test_builtin_field_strategies(self) -> None:
        by_name = {s.name: s.fields for s in DEFAULT_SOURCES}
        assert by_name["CoinGape"].rich_content is True
        assert by_name["CoinDesk"].rich_content is False
        assert by_name["Cointelegraph"].category_field == "category"

    def test_invalid_entries_are_skipped(self, tmp_path) -> None:
        path = tmp_path / "sources.yaml"
        _write(path, {"sources": [
            {"name": "Good", "url": "https://example.com/rss"},
            {"name": "Bad", "url": "https://example.com/bad", "fields": {"content_field": "encoded"}},
        ]})
        assert [s.name for s in load_sources(path)] == ["Good"]

    def test_saved_sources_keep_field_map(self, tmp_path) -> None:
        path = tmp_path / "sources.yaml"
        save_sources(list(DEFAULT_SOURCES), path)
        loaded = load_sources(path)
        assert loaded == list(DEFAULT_SOURCES)
        assert isinstance(loaded[0], SourceConfig)
