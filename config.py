"""
Environment configuration for the grievance portal.

Values come from the process environment, optionally seeded from a `.env`
file in the working directory.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    APP_NAME: str = "Grievance Portal API"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: Union[List[str], str] = ["*"]
    MAX_BODY_BYTES: int = 50 * 1024 * 1024

    # Database
    DATABASE_URL: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "MONGO_URI")
    )
    DATABASE_NAME: str = "grievance_portal"
    DATABASE_TIMEOUT_MS: int = 5000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None
    EMAIL_FROM: str = '"Grievance Portal" <ecedepartment100@gmail.com>'

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list or a comma separated string"""
        if isinstance(v, str):
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
