from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Web Catalog process settings

    Environment variables use the WEBCAT_ prefix.
    Example: WEBCAT_LOG_LEVEL=DEBUG, WEBCAT_IMPORT_WORKERS=4

    Extraction behaviour itself (naming heuristics, post-processors) lives in
    ExtractionConfig; these settings only cover how the process runs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WEBCAT_",
        extra="ignore",
    )

    # ========================================================================
    # Logging
    # ========================================================================

    log_level: str = Field(default="INFO")
    """Root log level (DEBUG, INFO, WARNING, ERROR)"""

    log_json: bool = Field(default=False)
    """Render log events as JSON lines"""

    # ========================================================================
    # Snapshot import
    # ========================================================================

    import_workers: int = Field(default=1, ge=1, le=64)
    """Parallel extraction passes during a batch import"""

    snapshot_prefix: str = Field(default="window_")
    """File name prefix of object graph snapshots in an import directory"""

    extraction_config_path: Path | None = Field(default=None)
    """Optional YAML/JSON ExtractionConfig used when no --config is given"""


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings (cached)."""
    return Settings()
