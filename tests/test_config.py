"""
Tests for configuration loading.

Run with: pytest tests/test_config.py
"""

from pathlib import Path

import pytest

from cvcoach.config import (
    DEFAULT_SERVICE_URL,
    ENV_SERVICE_URL,
    ENV_TIMEOUT,
    Config,
    load_config_yaml,
)


class TestDefaults:

    def test_limits(self):
        config = Config()
        assert config.extraction.max_upload_bytes == 5 * 1024 * 1024
        assert config.extraction.max_text_chars == 50_000
        assert config.extraction.min_pdf_chars == 50
        assert config.service.base_url == DEFAULT_SERVICE_URL
        assert not config.workflow.strict_response_shapes


class TestEnvironment:

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv(ENV_SERVICE_URL, "http://localhost:5678/webhook")
        monkeypatch.setenv(ENV_TIMEOUT, "15")
        config = Config.from_env()
        assert config.service.base_url == "http://localhost:5678/webhook"
        assert config.service.timeout == 15.0

    def test_overrides_do_not_leak_into_fresh_configs(self, monkeypatch):
        monkeypatch.setenv(ENV_TIMEOUT, "15")
        Config.from_env()
        assert Config().service.timeout == 60.0

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv(ENV_TIMEOUT, "soon")
        with pytest.raises(ValueError, match=ENV_TIMEOUT):
            Config.from_env()


class TestYamlProfile:

    def test_partial_profile(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text(
            "service:\n"
            "  base_url: http://localhost:5678/webhook/\n"
            "  timeout: 30\n"
            "workflow:\n"
            "  strict_response_shapes: true\n"
            "  export_dir: exports\n",
            encoding="utf-8",
        )
        config = load_config_yaml(path)
        assert config.service.base_url == "http://localhost:5678/webhook"
        assert config.service.timeout == 30.0
        assert config.workflow.strict_response_shapes
        assert config.workflow.export_dir == Path("exports")
        assert config.extraction.min_pdf_chars == 50

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_yaml(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config_yaml(path)
