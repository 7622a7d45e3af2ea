"""Configuration management using Pydantic Settings"""

from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Party store
    database_url: str = "sqlite:///./suspense.db"

    # Service
    service_name: str = "suspense-ledger"
    log_level: str = "INFO"

    # Parsing
    default_reference_year: Optional[int] = None
    extra_locations: List[str] = []
    gazetteer_file: Optional[Path] = None  # One place name per line

    # Matching
    recent_transactions_limit: int = 5
    narration_fallback_confidence: float = 40.0
    narration_search_limit: int = 50

    @field_validator("extra_locations")
    @classmethod
    def _upper_locations(cls, value: List[str]) -> List[str]:
        return [v.strip().upper() for v in value if v.strip()]


settings = Settings()
