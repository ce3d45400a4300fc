"""Configuration settings for the vocabulary engine."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Engine defaults
DEFAULT_MASTERY_THRESHOLD = 7
DEFAULT_DECK_SIZE = 7
READINESS_THRESHOLD = 90  # percent of a book's words mastered
LEVERAGE_SCALE = 1000  # leverage scores are stored as integers


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///wordsprout.db")
    echo: bool = _env_bool("DATABASE_ECHO", "false")


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class NormalizerSettings:
    """Text normalizer settings."""
    lenient: bool = _env_bool("NORMALIZER_LENIENT", "true")
    min_letter_density: float = float(os.getenv("MIN_LETTER_DENSITY", "0.6"))
    relaxed_letter_density: float = float(os.getenv("RELAXED_LETTER_DENSITY", "0.4"))
    relaxed_min_letters: int = int(os.getenv("RELAXED_MIN_LETTERS", "10"))
    top_words_limit: int = int(os.getenv("TOP_WORDS_LIMIT", "10"))


@dataclass
class MasterySettings:
    """Defaults applied to newly created learners."""
    mastery_threshold: int = int(os.getenv("MASTERY_THRESHOLD", str(DEFAULT_MASTERY_THRESHOLD)))
    deck_size: int = int(os.getenv("DECK_SIZE", str(DEFAULT_DECK_SIZE)))
    demote_on_miss: bool = _env_bool("DEMOTE_ON_MISS", "true")
    stop_words_enabled: bool = _env_bool("STOP_WORDS_ENABLED", "false")
    grade_level_filter_enabled: bool = _env_bool("GRADE_LEVEL_FILTER_ENABLED", "false")


@dataclass
class ReadinessSettings:
    """Book readiness settings."""
    threshold: int = int(os.getenv("READINESS_THRESHOLD", str(READINESS_THRESHOLD)))


@dataclass
class ResyncSettings:
    """Global word statistics resync settings."""
    retry_delay: float = float(os.getenv("RESYNC_RETRY_DELAY", "5"))
    max_attempts: int = int(os.getenv("RESYNC_MAX_ATTEMPTS", "3"))
    sync_on_start: bool = _env_bool("RESYNC_ON_START", "true")


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = _env_bool("METRICS_ENABLED", "false")
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_normalizer_settings() -> NormalizerSettings:
    """Get normalizer settings."""
    return NormalizerSettings()


def get_mastery_settings() -> MasterySettings:
    """Get mastery settings."""
    return MasterySettings()


def get_readiness_settings() -> ReadinessSettings:
    """Get readiness settings."""
    return ReadinessSettings()


def get_resync_settings() -> ResyncSettings:
    """Get resync settings."""
    return ResyncSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    normalizer: NormalizerSettings = field(default_factory=get_normalizer_settings)
    mastery: MasterySettings = field(default_factory=get_mastery_settings)
    readiness: ReadinessSettings = field(default_factory=get_readiness_settings)
    resync: ResyncSettings = field(default_factory=get_resync_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.mastery.mastery_threshold < 1:
            raise ValueError("MASTERY_THRESHOLD must be positive")

        if self.mastery.deck_size < 1:
            raise ValueError("DECK_SIZE must be positive")

        if self.readiness.threshold < 0 or self.readiness.threshold > 100:
            raise ValueError("READINESS_THRESHOLD must be between 0 and 100")

        for name, value in (
            ("MIN_LETTER_DENSITY", self.normalizer.min_letter_density),
            ("RELAXED_LETTER_DENSITY", self.normalizer.relaxed_letter_density),
        ):
            if value < 0 or value > 1:
                raise ValueError(f"{name} must be between 0 and 1")

        if self.resync.max_attempts < 1:
            raise ValueError("RESYNC_MAX_ATTEMPTS must be positive")


# Create global settings instance
settings = Settings()
settings.validate()
