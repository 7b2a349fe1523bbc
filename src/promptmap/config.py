"""Configuration management for promptmap."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _optional_float(name: str) -> Optional[float]:
    """Read an optional float from the environment."""
    value = os.getenv(name)
    if value:
        return float(value)
    return None


class Settings(BaseModel):
    """Application settings."""

    # Database path for editing-session persistence
    database_path: Path = Path(os.getenv("DATABASE_PATH", "data/promptmap.db"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Field matching
    auto_map_threshold: int = int(os.getenv("AUTO_MAP_THRESHOLD", "80"))

    # Rendering limits
    max_render_values: int = int(os.getenv("MAX_RENDER_VALUES", "5"))
    max_context_rows: int = int(os.getenv("MAX_CONTEXT_ROWS", "100"))

    # Session persistence windows
    session_freshness_hours: int = int(os.getenv("SESSION_FRESHNESS_HOURS", "24"))
    session_retention_days: int = int(os.getenv("SESSION_RETENTION_DAYS", "7"))

    # Data refresh and expression evaluation
    catalog_refresh_timeout_seconds: float = float(
        os.getenv("CATALOG_REFRESH_TIMEOUT_SECONDS", "5.0")
    )
    evaluator_url: Optional[str] = os.getenv("EVALUATOR_URL")
    evaluator_timeout_seconds: Optional[float] = _optional_float("EVALUATOR_TIMEOUT_SECONDS")

    # Message shown when a custom validation expression fails
    default_validation_message: str = os.getenv(
        "DEFAULT_VALIDATION_MESSAGE",
        "Please make the required selections to proceed with AI analysis",
    )


settings = Settings()
