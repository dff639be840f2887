"""Tests for sample_tools.core.config — Configuration management."""

import pytest
from pydantic import ValidationError

from sample_tools.core.config import (
    DEFAULT_MAX_FRAME_BYTES,
    DEFAULT_SERVER_NAME,
    DEFAULT_TOOL_RESPONSE_MAX_CHARS,
    ServerConfig,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in (
        "SAMPLE_TOOLS_SERVER_NAME",
        "SAMPLE_TOOLS_LOG_LEVEL",
        "SAMPLE_TOOLS_LOG_FILE",
        "SAMPLE_TOOLS_TOOL_RESPONSE_MAX_CHARS",
        "SAMPLE_TOOLS_MAX_FRAME_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)


class TestServerConfigDefaults:
    def test_from_env_defaults(self):
        config = ServerConfig.from_env()
        assert config.name == DEFAULT_SERVER_NAME
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.tool_response_max_chars == DEFAULT_TOOL_RESPONSE_MAX_CHARS

    def test_constructor_defaults_match_env_defaults(self):
        assert ServerConfig() == ServerConfig.from_env()


class TestServerConfigFromEnv:
    def test_overrides(self, monkeypatch, tmp_path):
        log_file = tmp_path / "server.log"
        monkeypatch.setenv("SAMPLE_TOOLS_SERVER_NAME", "tools-under-test")
        monkeypatch.setenv("SAMPLE_TOOLS_LOG_LEVEL", "debug")
        monkeypatch.setenv("SAMPLE_TOOLS_LOG_FILE", str(log_file))
        monkeypatch.setenv("SAMPLE_TOOLS_TOOL_RESPONSE_MAX_CHARS", "128")

        config = ServerConfig.from_env()
        assert config.name == "tools-under-test"
        assert config.log_level == "DEBUG"
        assert config.log_file == str(log_file)
        assert config.tool_response_max_chars == 128

    def test_invalid_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_TOOLS_LOG_LEVEL", "chatty")
        assert ServerConfig.from_env().log_level == "INFO"

    @pytest.mark.parametrize("raw", ["abc", "0", "-5"])
    def test_invalid_max_chars_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("SAMPLE_TOOLS_TOOL_RESPONSE_MAX_CHARS", raw)
        assert ServerConfig.from_env().tool_response_max_chars == DEFAULT_TOOL_RESPONSE_MAX_CHARS

    def test_blank_name_uses_default(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_TOOLS_SERVER_NAME", "   ")
        assert ServerConfig.from_env().name == DEFAULT_SERVER_NAME


def test_max_chars_must_be_positive():
    with pytest.raises(ValidationError):
        ServerConfig(tool_response_max_chars=0)


def test_max_frame_bytes_default_and_override(monkeypatch):
    assert ServerConfig.from_env().max_frame_bytes == DEFAULT_MAX_FRAME_BYTES
    monkeypatch.setenv("SAMPLE_TOOLS_MAX_FRAME_BYTES", "2048")
    assert ServerConfig.from_env().max_frame_bytes == 2048


@pytest.mark.parametrize("raw", ["big", "0", "-1"])
def test_invalid_max_frame_bytes_falls_back(monkeypatch, raw):
    monkeypatch.setenv("SAMPLE_TOOLS_MAX_FRAME_BYTES", raw)
    assert ServerConfig.from_env().max_frame_bytes == DEFAULT_MAX_FRAME_BYTES
