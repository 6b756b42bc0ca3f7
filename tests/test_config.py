"""
Tests for YAML run configuration.
"""

import pytest

from sieve240 import config as config_module
from sieve240.config import DEFAULT_CONFIG, load_config
from sieve240.segmented_sieve import SEGMENT_LEN


class TestLoadConfig:
    """Test load_config merging and validation."""

    def test_repo_default(self):
        """config/default.yaml loads with the library's segment length."""
        config = load_config()
        assert config["segment_len"] == SEGMENT_LEN
        assert config["limits"]
        assert config["check_limit"] > 0

    def test_overlay_on_defaults(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("segment_len: 64\nlimits: [1000, 2000]\nextra: yes\n")
        config = load_config(path)
        assert config["segment_len"] == 64
        assert config["limits"] == [1000, 2000]
        assert config["n_primes"] == DEFAULT_CONFIG["n_primes"]
        assert config["extra"] is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    @pytest.mark.parametrize("value", ["0", "-3", "big", "1.5", "true"])
    def test_rejects_bad_segment_len(self, tmp_path, value):
        path = tmp_path / "bad.yaml"
        path.write_text(f"segment_len: {value}\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_defaults_without_repo_file(self, tmp_path, monkeypatch):
        """With no config/default.yaml, load_config() returns DEFAULT_CONFIG."""
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "default.yaml")
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_defaults_not_mutated(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("segment_len: 8\n")
        load_config(path)
        assert DEFAULT_CONFIG["segment_len"] == SEGMENT_LEN
