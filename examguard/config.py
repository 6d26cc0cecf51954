"""
ExamGuard Proctoring Service Configuration Settings

Operational knobs only; detection thresholds are class constants on the
detectors and scorers.
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration for the proctoring service."""

    # API Settings
    APP_NAME: str = "ExamGuard Proctoring Service"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"

    # Capture loop
    DETECTION_INTERVAL_SECONDS: float = 1.5

    # Violations
    WARNING_DISPLAY_SECONDS: float = 5.0
    MAX_MULTI_PERSON_WARNINGS: int = 3

    # Frames smaller than this are skipped before detection
    MIN_FRAME_WIDTH: int = 100
    MIN_FRAME_HEIGHT: int = 100

    # Delay before a stopped session is dropped from memory
    SESSION_CLEANUP_DELAY_SECONDS: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
