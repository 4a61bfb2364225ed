from pydantic_settings import BaseSettings
from typing import List, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Job Match API"

    # Database Settings
    DATABASE_URL: str = "sqlite:///./jobmatch.db"

    # Token Settings
    # Rotating SECRET_KEY invalidates every outstanding token.
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    TOKEN_REVOCATION_ENABLED: bool = False

    # Password hashing (bcrypt cost factor)
    PASSWORD_HASH_ROUNDS: int = 10

    # Password recovery
    OTP_EXPIRE_MINUTES: int = 10

    # Categories inserted at startup when missing (JSON list or comma separated)
    DEFAULT_CATEGORIES: Union[List[str], str] = [
        "Restaurant", "Cafe", "Retail", "Delivery", "Events", "Cleaning"
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8000"]

    @field_validator("BACKEND_CORS_ORIGINS", "DEFAULT_CATEGORIES", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[List[str], str]) -> List[str]:
        """Parse a list setting from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("PASSWORD_HASH_ROUNDS")
    @classmethod
    def validate_hash_rounds(cls, v: int) -> int:
        """bcrypt accepts cost factors between 4 and 31"""
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
