"""
Development environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class DevelopmentConfig(AppConfig):
    """Development environment configuration"""

    def __post_init__(self):

        # Development-specific overrides
        self.environment = "development"
        self.debug = True

        # More verbose logging in development
        self.logging.level = "DEBUG"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/dev-app.log"

        # Development UI changes
        self.ui.app_title = "🧪 RPA Console (DEV)"

        # Local backend and a separate session file
        self.api.base_url = "http://127.0.0.1:8000/"
        self.auth.session_store_path = ".console_session.dev.json"

        # Small pages for the seed catalog
        self.console.rpa_bots_page_size = 3
        self.console.business_units_page_size = 3


def get_development_config() -> DevelopmentConfig:
    """Get development-specific configuration"""
    return DevelopmentConfig()
