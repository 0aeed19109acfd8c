"""Configuration settings for the ingestion pipeline."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator


class Settings(BaseSettings):
    """Pipeline configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env
    )

    # Tokenizer settings
    CUE_MIN_INDENT: int = 5  # Centered character cue
    DIALOGUE_MIN_INDENT: int = 1  # Dialogue under a cue
    MAX_CUE_LENGTH: int = 40

    # Narrative extractor settings
    MAX_NARRATIVE_NAME_LENGTH: int = 50

    # Content detection thresholds
    SCREENPLAY_CENTERED_RATIO: float = 0.05
    SCREENPLAY_CAPS_RATIO: float = 0.1
    TABULAR_LINE_RATIO: float = 0.5
    TABULAR_MIN_LINES: int = 5

    # Role lists: names at least this similar are flagged as possible duplicates
    ROLE_SIMILARITY_THRESHOLD: float = 0.75

    # Output batching for the persistence layer
    PERSIST_BATCH_SIZE: int = 500

    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def resolve_settings(self):
        """Keep indent thresholds consistent."""
        if self.DIALOGUE_MIN_INDENT < 1:
            self.DIALOGUE_MIN_INDENT = 1
        # A cue must sit deeper than plain dialogue
        if self.CUE_MIN_INDENT <= self.DIALOGUE_MIN_INDENT:
            self.CUE_MIN_INDENT = self.DIALOGUE_MIN_INDENT + 1

        self.LOG_LEVEL = self.LOG_LEVEL.upper()
        return self


# Global settings instance
settings = Settings()
