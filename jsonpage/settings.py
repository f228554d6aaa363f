"""Application configuration management."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


LOG_FORMATS = ("json", "text")


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "JSON Page Server"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Design mode (off unless switched on at startup)
    ai_design: bool = False

    # Filesystem layout
    content_dir: Path = Path(".")
    components_dir: Path = Path("components")
    cache_dir: Path = Path("components/cached")
    static_dir: Path = Path("static")

    # Requests
    request_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    def __post_init__(self):
        """Validate settings after initialization."""
        self.content_dir = Path(self.content_dir)
        self.components_dir = Path(self.components_dir)
        self.cache_dir = Path(self.cache_dir)
        self.static_dir = Path(self.static_dir)

        if not 0 < self.port < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")
        if self.request_timeout_seconds <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")


def load_settings_from_env() -> Settings:
    """Load settings from environment variables (and a local .env file)."""
    load_dotenv()

    def get_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes")

    def get_int(key: str, default: int) -> int:
        return int(os.getenv(key, str(default)))

    def get_float(key: str, default: float) -> float:
        return float(os.getenv(key, str(default)))

    components_dir = os.getenv("COMPONENTS_DIR", "components")

    return Settings(
        # App
        app_name=os.getenv("APP_NAME", "JSON Page Server"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        debug=get_bool("DEBUG", False),

        # Server
        host=os.getenv("HOST", "0.0.0.0"),
        port=get_int("PORT", 8080),

        # Design mode
        ai_design=get_bool("AI_DESIGN", False),

        # Filesystem layout
        content_dir=Path(os.getenv("CONTENT_DIR", ".")),
        components_dir=Path(components_dir),
        cache_dir=Path(os.getenv("CACHE_DIR", str(Path(components_dir) / "cached"))),
        static_dir=Path(os.getenv("STATIC_DIR", "static")),

        # Requests
        request_timeout_seconds=get_float("REQUEST_TIMEOUT_SECONDS", 10.0),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()


def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    get_settings.cache_clear()
