# backend/vocab_quiz/config.py

import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_SESSION_SECRET = "development-secret-key"
DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseModel):
    app_env: str = "development"
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "mistralai/mistral-7b-instruct:free"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    app_referer: str = "http://localhost:5000"
    session_secret: str = DEFAULT_SESSION_SECRET
    allowed_origin: Optional[str] = None
    log_level: str = "DEBUG"
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and .env, if present)."""
        load_dotenv()
        env = {
            "app_env": os.getenv("APP_ENV"),
            "admin_username": os.getenv("ADMIN_USERNAME"),
            "admin_password": os.getenv("ADMIN_PASSWORD"),
            "openrouter_api_key": os.getenv("OPENROUTER_API_KEY"),
            "openrouter_model": os.getenv("OPENROUTER_MODEL"),
            "openrouter_base_url": os.getenv("OPENROUTER_BASE_URL"),
            "app_referer": os.getenv("APP_REFERER"),
            "session_secret": os.getenv("SESSION_SECRET"),
            "allowed_origin": os.getenv("ALLOWED_ORIGIN"),
            "log_level": os.getenv("LOG_LEVEL"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
        }
        # empty strings count as unset
        return cls(**{k: v for k, v in env.items() if v})

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_username and self.admin_password)

    @property
    def cors_origins(self) -> List[str]:
        origins = list(DEFAULT_ORIGINS)
        if self.allowed_origin:
            origins.append(self.allowed_origin)
        return origins

    def describe(self) -> Dict[str, str]:
        """Startup snapshot; secrets are reported only as SET / NOT SET."""

        def _mask(value: Optional[str]) -> str:
            return "***SET***" if value else "NOT SET"

        return {
            "APP_ENV": self.app_env,
            "PORT": str(self.port),
            "ADMIN_USERNAME": _mask(self.admin_username),
            "ADMIN_PASSWORD": _mask(self.admin_password),
            "OPENROUTER_API_KEY": _mask(self.openrouter_api_key),
            "OPENROUTER_MODEL": self.openrouter_model,
            "SESSION_SECRET": (
                "***SET***"
                if self.session_secret != DEFAULT_SESSION_SECRET
                else "NOT SET (using default)"
            ),
            "ALLOWED_ORIGIN": self.allowed_origin or "NOT SET",
        }
