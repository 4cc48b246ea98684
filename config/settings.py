from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from chatbot.errors import ConfigError


load_dotenv()


REQUIRED_ENV_VARS = (
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_INSTANCE_NAME",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
)

DEFAULT_API_VERSION = "2024-02-15-preview"

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.azure_openai_api_key: Optional[str] = os.getenv("AZURE_OPENAI_API_KEY")
        self.azure_openai_instance_name: Optional[str] = os.getenv("AZURE_OPENAI_INSTANCE_NAME")
        self.azure_openai_deployment_name: Optional[str] = os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME")
        self.azure_openai_api_version: str = (
            os.getenv("AZURE_OPENAI_API_VERSION") or DEFAULT_API_VERSION
        )
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.7"))
        self.max_tokens: int = int(os.getenv("MODEL_MAX_TOKENS", "1000"))
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.logs_dir: str = os.getenv("LOGS_DIR", "./logs")
        self.public_dir: str = os.getenv("PUBLIC_DIR", str(PROJECT_ROOT / "public"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

    @property
    def azure_openai_endpoint(self) -> str:
        return f"https://{self.azure_openai_instance_name}.openai.azure.com/"

    def missing_required(self) -> List[str]:
        values = {
            "AZURE_OPENAI_API_KEY": self.azure_openai_api_key,
            "AZURE_OPENAI_INSTANCE_NAME": self.azure_openai_instance_name,
            "AZURE_OPENAI_DEPLOYMENT_NAME": self.azure_openai_deployment_name,
        }
        return [name for name in REQUIRED_ENV_VARS if not values[name]]

    def validate(self) -> None:
        missing = self.missing_required()
        if missing:
            raise ConfigError(missing)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
