"""Configuration management for scenario generation."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SCENARIOGEN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCENARIOGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Output
    debug: bool = Field(False, description="Embed raw actions and selector diagnostics in each step")
    scenario_version: str = Field("0.2", description="Version written to the scenario header")
    default_scenario_name: str = Field(
        "Recorded Scenario",
        description="Scenario name when no base URL is known"
    )
    mask_token: str = Field(
        "${env:SCENARIO_PASSWORD}",
        description="Replacement for values typed into password-like fields"
    )
    yaml_line_width: int = Field(120, ge=20, description="Preferred YAML line width")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    log_json: bool = Field(False, description="Render logs as JSON instead of console output")


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
