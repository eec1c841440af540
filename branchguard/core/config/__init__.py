"""Configuration module for the branchguard service.

Provides centralized configuration management with type-safe enums.

Usage:
    from branchguard.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from branchguard.core.config.enums import Environment
from branchguard.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
