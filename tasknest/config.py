"""
TaskNest API - Configuration Module

This module handles application configuration via environment variables.
"""

import os
from typing import Optional


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "TaskNest API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Storage - two independent JSON array documents
    DATA_DIR: str = os.getenv("DATA_DIR", "data")
    USERS_FILE: str = os.getenv("USERS_FILE", os.path.join(DATA_DIR, "users.json"))
    TASKS_FILE: str = os.getenv("TASKS_FILE", os.path.join(DATA_DIR, "tasks.json"))

    # CORS - Allowed origins for client requests
    # Multiple origins can be comma-separated
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if origin.strip()
    ]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # JWT Configuration
    # No default: startup is aborted when the secret is missing
    JWT_SECRET_KEY: Optional[str] = os.getenv("JWT_SECRET_KEY") or None
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Password hashing work factor
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "8"))


settings = Settings()
