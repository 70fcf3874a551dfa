"""
Environment-specific configurations for the RPA console
"""

import os
from config.app_config import AppConfig


def get_environment_config() -> AppConfig:
    """
    Pick the configuration class from APP_ENV

    - 'development' (default) -> DevelopmentConfig: local API, small pages
    - 'production' -> ProductionConfig: API URL from RPA_API_URL, no self-registration
    - anything else -> AppConfig.load() with secrets/env values
    """
    env = os.getenv("APP_ENV", "development").lower()

    if env == "development":
        from .development import get_development_config
        return get_development_config()
    if env == "production":
        from .production import get_production_config
        return get_production_config()
    return AppConfig.load()
