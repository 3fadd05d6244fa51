# -*- coding: utf-8 -*-
"""
cbt_admin/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Application settings loaded with Pydantic.

Values come from a ``.env`` file in the project root when it exists,
otherwise from plain environment variables. Every field has a default so the
admin client works out of the box against a local API.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (the directory that holds pyproject.toml)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ROOT_ENV_PATH = (BASE_DIR / ".env").resolve()


class Settings(BaseSettings):
    """Settings for the CBT admin front end."""

    _env_file = ROOT_ENV_PATH if ROOT_ENV_PATH.exists() else None

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        env_prefix="CBT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote exam API
    api_base_url: str = "https://api-cbt.naditechno.id/api/v1"
    api_timeout_seconds: float = 30.0
    question_import_template_url: str = (
        "https://api-cbt.naditechno.id/question-import.csv"
    )

    # List screens
    search_debounce_seconds: float = 0.4
    default_paginate: int = 10
    category_paginate: int = 50
    # Role id of "pengawas" accounts in the user-management API
    pengawas_role_id: int = 3

    # BFF application
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    cors_allow_origins: str = ""

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    def get_allowed_origins(self) -> list[str]:
        """Origins allowed for CORS; falls back to localhost dev ports."""
        if self.cors_allow_origins:
            return [
                origin.strip()
                for origin in self.cors_allow_origins.split(",")
                if origin.strip()
            ]
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    def get_config_source(self) -> str:
        """Where the configuration came from, for startup logs."""
        if ROOT_ENV_PATH.exists():
            return f"root: {ROOT_ENV_PATH}"
        return "environment variables only"


settings = Settings()
