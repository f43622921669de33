"""Configuration management using Pydantic Settings"""
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from unitcode.definitions.table import DEFAULT_DEFINITIONS_PATH


class DefinitionsConfig(BaseSettings):
    """Definitions table configuration"""
    path: Path = Field(default=DEFAULT_DEFINITIONS_PATH, alias="UNITCODE_DEFINITIONS_PATH")
    extension_path: Path | None = Field(default=None, alias="UNITCODE_EXTENSION_PATH")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class ParserConfig(BaseSettings):
    """Tokenizer/parser configuration"""
    legacy_exponents: bool = Field(default=False, alias="UNITCODE_LEGACY_EXPONENTS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class GeneratorConfig(BaseSettings):
    """Generator defaults"""
    use_caret_for_exponents: bool = Field(default=True, alias="UNITCODE_USE_CARET")
    number_format: str = Field(default="plain", alias="UNITCODE_NUMBER_FORMAT")
    spacing: str = Field(default="canonical", alias="UNITCODE_SPACING")

    @field_validator("number_format")
    @classmethod
    def validate_number_format(cls, v: str) -> str:
        valid_formats = ["plain", "scientific"]
        if v.lower() not in valid_formats:
            raise ValueError(f"UNITCODE_NUMBER_FORMAT must be one of {valid_formats}")
        return v.lower()

    @field_validator("spacing")
    @classmethod
    def validate_spacing(cls, v: str) -> str:
        valid_spacings = ["minimal", "canonical"]
        if v.lower() not in valid_spacings:
            raise ValueError(f"UNITCODE_SPACING must be one of {valid_spacings}")
        return v.lower()

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class AppConfig(BaseSettings):
    """Application configuration"""
    name: str = Field(default="unitcode", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class Settings(BaseSettings):
    """Global settings"""
    definitions: DefinitionsConfig = Field(default_factory=DefinitionsConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    app: AppConfig = Field(default_factory=AppConfig)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Global settings instance
settings = Settings()
