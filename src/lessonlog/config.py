"""Lesson-log configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LessonLogConfig(BaseSettings):
    """Engine configuration loaded from environment variables.

    Every field can be overridden with a ``LESSONLOG_``-prefixed variable.
    For local use, create a .env file in the project root.
    """

    # Paths
    data_dir: str = Field(
        default="data/lessonlog",
        description="Directory holding one JSON blob per data set",
    )
    export_dir: str = Field(
        default="data/exports",
        description="Default output directory for exported .docx sheets",
    )

    # Store write retry policy
    store_write_attempts: int = Field(
        default=3,
        description="Attempts per blob write before giving up",
    )
    store_retry_wait_seconds: float = Field(
        default=0.2,
        description="Fixed wait between blob write attempts",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "LESSONLOG_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: LessonLogConfig | None = None


def get_config() -> LessonLogConfig:
    """Get the lesson-log configuration singleton.

    Returns:
        LessonLogConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = LessonLogConfig()
    return _config


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config
    _config = None
