"""
Production environment configuration overrides
"""

import os
from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""

    def __post_init__(self):

        # Production-specific overrides
        self.environment = "production"
        self.debug = False

        # Production logging - less verbose, focus on errors
        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"

        # Production UI - clean and professional
        self.ui.app_title = "🤖 RPA Console"

        # Production API settings
        self.api.base_url = os.getenv("RPA_API_URL", self.api.base_url)
        self.api.timeout_seconds = 15.0

        # Production security settings
        self.auth.allow_self_registration = False


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
