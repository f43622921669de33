"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from unitcode.common.config import AppConfig, DefinitionsConfig, GeneratorConfig, ParserConfig
from unitcode.definitions.table import DEFAULT_DEFINITIONS_PATH


class TestConfig:
    """Test settings classes read from the environment."""

    def test_defaults(self, monkeypatch):
        for name in ("UNITCODE_DEFINITIONS_PATH", "UNITCODE_EXTENSION_PATH", "UNITCODE_LEGACY_EXPONENTS"):
            monkeypatch.delenv(name, raising=False)

        assert DefinitionsConfig().path == DEFAULT_DEFINITIONS_PATH
        assert DefinitionsConfig().extension_path is None
        assert ParserConfig().legacy_exponents is False

    def test_generator_values_normalized(self, monkeypatch):
        monkeypatch.setenv("UNITCODE_SPACING", "MINIMAL")
        monkeypatch.setenv("UNITCODE_NUMBER_FORMAT", "Scientific")

        config = GeneratorConfig()
        assert config.spacing == "minimal"
        assert config.number_format == "scientific"

    def test_invalid_spacing(self, monkeypatch):
        monkeypatch.setenv("UNITCODE_SPACING", "tight")
        with pytest.raises(ValidationError):
            GeneratorConfig()

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppConfig().log_level == "DEBUG"

    def test_legacy_flag(self, monkeypatch):
        monkeypatch.setenv("UNITCODE_LEGACY_EXPONENTS", "true")
        assert ParserConfig().legacy_exponents is True
