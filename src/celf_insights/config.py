"""Configuration management for CELF-P3 assessment insights."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent
DEFAULT_RULES_PATH = PACKAGE_DIR / "data" / "interpretations.json"

AUDIENCES = ("clinician", "family")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DataConfig(BaseSettings):
    """Input file and rule table locations."""

    model_config = SettingsConfigDict(env_prefix="CELF_", env_file=".env", extra="ignore")

    data_path: Path = Field(Path("data/celf_p3_responses.csv"), description="Assessment CSV export")
    rules_path: Path = Field(DEFAULT_RULES_PATH, description="Interpretation rule table")
    recent_store_path: Path = Field(
        Path(".celf_insights/recent_students.json"),
        description="File holding recently selected student ids",
    )
    recent_limit: int = Field(8, description="Maximum number of recent students kept")

    @field_validator("recent_limit")
    @classmethod
    def validate_recent_limit(cls, v):
        """Recent list must hold at least one student."""
        if v < 1:
            raise ValueError("recent_limit must be at least 1")
        return v


class InsightConfig(BaseSettings):
    """Thresholds used by the heuristic insights."""

    model_config = SettingsConfigDict(env_prefix="CELF_", env_file=".env", extra="ignore")

    comparison_gap: float = Field(10.0, description="Receptive/expressive average gap in points")
    progress_threshold: float = Field(5.0, description="Minimum score change reported as progress")
    default_audience: str = Field("clinician", description="Audience used when none is given")

    @field_validator("comparison_gap", "progress_threshold")
    @classmethod
    def validate_positive(cls, v):
        """Thresholds are point distances and must be positive."""
        if v <= 0:
            raise ValueError("thresholds must be positive")
        return v

    @field_validator("default_audience")
    @classmethod
    def validate_audience(cls, v):
        """Audience must be one of the rule table audiences."""
        v = v.strip().lower()
        if v not in AUDIENCES:
            raise ValueError(f"default_audience must be one of: {', '.join(AUDIENCES)}")
        return v


class AppConfig(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CELF_", env_file=".env", extra="ignore")

    log_level: str = Field("WARNING", description="Root log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Only standard logging level names are accepted."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        return v


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_prefix="CELF_SETTINGS_", env_file=".env", extra="ignore")

    data: DataConfig = Field(default_factory=DataConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)
    app: AppConfig = Field(default_factory=AppConfig)

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment."""
        return cls()


# Global settings instance
settings = Settings.load()
