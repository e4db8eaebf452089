"""Tests for the configuration module."""

import json
import pytest
import yaml
from pytopic.config import Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop environment overrides that would leak into these tests."""
    for key in ("PYTOPIC_CONFIG", "PYTOPIC_DELIMITER", "PYTOPIC_STRICT_TOPICS",
                "PYTOPIC_UNIQUE_MATCHES", "LOG_LEVEL", "PROMETHEUS_ENABLED", "PROMETHEUS_PORT"):
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    """Tests for Config."""

    def test_defaults_without_file(self, tmp_path):
        """Test that a missing file gives the defaults."""
        config = Config(str(tmp_path / "missing.yaml"))
        assert config.get("index", "delimiter") == "/"
        assert config.get("index", "strict_topics") is True
        assert config.get("index", "unique_matches") is False
        assert config.get("logging", "level") == "INFO"
        assert config.get("monitoring", "prometheus_enabled") is False
        assert config.validate() == (True, [])

    def test_yaml_file_merged_over_defaults(self, tmp_path):
        """Test that file values replace only the keys they name."""
        path = tmp_path / "pytopic.yaml"
        path.write_text(yaml.dump({"index": {"delimiter": "."}, "logging": {"level": "DEBUG"}}))
        config = Config(str(path))
        assert config.get("index", "delimiter") == "."
        assert config.get("index", "strict_topics") is True
        assert config.get("logging", "level") == "DEBUG"

    def test_json_file(self, tmp_path):
        """Test loading a JSON config file."""
        path = tmp_path / "pytopic.json"
        path.write_text(json.dumps({"index": {"unique_matches": True}}))
        config = Config(str(path))
        assert config.get("index", "unique_matches") is True

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        """Test that PYTOPIC_CONFIG names the file."""
        path = tmp_path / "other.yml"
        path.write_text(yaml.dump({"index": {"delimiter": ":"}}))
        monkeypatch.setenv("PYTOPIC_CONFIG", str(path))
        assert Config().get("index", "delimiter") == ":"

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test that environment variables win over the file."""
        path = tmp_path / "pytopic.yaml"
        path.write_text(yaml.dump({"index": {"strict_topics": True}}))
        monkeypatch.setenv("PYTOPIC_STRICT_TOPICS", "false")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("PROMETHEUS_PORT", "9191")
        config = Config(str(path))
        assert config.get("index", "strict_topics") is False
        assert config.get("logging", "level") == "DEBUG"
        assert config.get("monitoring", "prometheus_port") == 9191

    @pytest.mark.parametrize("content", ["- index\n- logging\n", "just-a-string\n"])
    def test_non_mapping_file_rejected(self, tmp_path, content):
        """Test that a config file without sections raises ValueError."""
        path = tmp_path / "pytopic.yaml"
        path.write_text(content)
        with pytest.raises(ValueError):
            Config(str(path))

    def test_bad_env_value_ignored(self, tmp_path, monkeypatch):
        """Test that an unconvertible override is skipped."""
        monkeypatch.setenv("PROMETHEUS_PORT", "not-a-port")
        config = Config(str(tmp_path / "missing.yaml"))
        assert config.get("monitoring", "prometheus_port") == 9090

    def test_set_and_save(self, tmp_path):
        """Test saving config to YAML and reading it back."""
        config = Config(str(tmp_path / "pytopic.yaml"))
        config.set("index", "delimiter", ".")
        config.save()
        assert Config(str(tmp_path / "pytopic.yaml")).get("index", "delimiter") == "."

    @pytest.mark.parametrize("section,key,value,message", [
        ("index", "delimiter", "//", "Delimiter must be a single character"),
        ("index", "delimiter", "#", "Delimiter cannot be a wildcard character: #"),
        ("monitoring", "prometheus_port", 70000, "Invalid Prometheus port"),
        ("logging", "level", "TRACE", "Unknown log level: TRACE"),
    ])
    def test_validate(self, tmp_path, section, key, value, message):
        """Test validation errors."""
        config = Config(str(tmp_path / "missing.yaml"))
        config.set(section, key, value)
        is_valid, errors = config.validate()
        assert is_valid is False
        assert errors == [message]
