"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from config import Config, load_config


class TestConfig:
    """Test configuration defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("USE_DICTIONARY_HASH", raising=False)
        config = Config(_env_file=None)

        assert config.use_dictionary_hash is False
        assert config.store_backend == "postgres"
        assert config.base_url == "http://localhost:9200"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("USE_DICTIONARY_HASH", "true")
        monkeypatch.setenv("SERVER_PROTOCOL", "https")
        monkeypatch.setenv("SERVER_HOST", "sho.rt")
        monkeypatch.setenv("PATH_PREFIX", "/s")

        config = load_config()

        assert config.use_dictionary_hash is True
        assert config.base_url == "https://sho.rt/s"

    def test_invalid_store_backend(self):
        with pytest.raises(ValidationError):
            Config(store_backend="mongo")
