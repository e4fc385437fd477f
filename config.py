"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment."""
    return float(os.getenv(name, str(default)))


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class TimingConfig:
    """Presentation pacing delays, in seconds."""

    initial_delay: float = field(
        default_factory=lambda: _env_float("BLACKJACK_INITIAL_DELAY", 0.2)
    )
    after_shuffle: float = field(
        default_factory=lambda: _env_float("BLACKJACK_SHUFFLE_DELAY", 0.7)
    )
    before_deal: float = field(
        default_factory=lambda: _env_float("BLACKJACK_DEAL_DELAY", 0.5)
    )
    before_results: float = field(
        default_factory=lambda: _env_float("BLACKJACK_RESULTS_DELAY", 0.5)
    )
    after_hit: float = field(
        default_factory=lambda: _env_float("BLACKJACK_HIT_DELAY", 0.6)
    )

    @classmethod
    def instant(cls) -> "TimingConfig":
        """Zero-duration pauses for tests and non-interactive play."""
        return cls(
            initial_delay=0.0,
            after_shuffle=0.0,
            before_deal=0.0,
            before_results=0.0,
            after_hit=0.0,
        )


@dataclass(frozen=True)
class TableConfig:
    """Default table configuration."""

    num_decks: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_NUM_DECKS", "1"))
    )
    dealer_stands_on: int = 17
    initial_cards: int = 4


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    datefmt: str = "%H:%M:%S"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    table_ttl: int = 3600  # Idle table timeout in seconds

    timing: TimingConfig = field(default_factory=TimingConfig)
    table: TableConfig = field(default_factory=TableConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)


def setup_logging(logging_config: LoggingConfig | None = None) -> None:
    """Call once at program start."""
    logging_config = logging_config or config.logging
    logging.basicConfig(
        level=getattr(logging, logging_config.level, logging.INFO),
        format=logging_config.format,
        datefmt=logging_config.datefmt,
    )


# Global configuration instance
config = AppConfig()
