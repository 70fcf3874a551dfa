"""
Unified Configuration System for the RPA Console

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


DEFAULT_API_URL = "http://127.0.0.1:8000/"
SESSION_STORE_BACKENDS = ("browser", "session_state", "file")


@dataclass
class APIConfig:
    """Remote API configuration settings"""
    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = 30.0

    @classmethod
    def from_secrets(cls) -> 'APIConfig':
        """Load API config from Streamlit secrets"""
        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls._from_env()

        try:
            return cls(
                base_url=st.secrets.get("RPA_API_URL", DEFAULT_API_URL),
                timeout_seconds=float(st.secrets.get("RPA_API_TIMEOUT", 30.0))
            )
        except Exception:
            # Fallback to environment variables if secrets not available
            return cls._from_env()

    @classmethod
    def _from_env(cls) -> 'APIConfig':
        return cls(
            base_url=os.getenv("RPA_API_URL", DEFAULT_API_URL),
            timeout_seconds=float(os.getenv("RPA_API_TIMEOUT", "30"))
        )


@dataclass
class AuthConfig:
    """Authentication and session persistence configuration"""
    enabled: bool = True
    allow_self_registration: bool = True
    allow_federated_login: bool = True
    token_storage_key: str = "auth_token"
    user_storage_key: str = "user_data"
    session_store_backend: str = "browser"  # browser | session_state | file
    session_cookie_max_age_days: int = 7
    session_store_path: str = ".console_session.json"
    login_route: str = "login"


@dataclass
class ConsoleConfig:
    """List screen configuration"""
    business_units_page_size: int = 10
    rpa_bots_page_size: int = 9
    business_processes_page_size: int = 10

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "business_units_page_size": self.business_units_page_size,
            "rpa_bots_page_size": self.rpa_bots_page_size,
            "business_processes_page_size": self.business_processes_page_size
        }


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "RPA Console"
    page_icon: str = "🤖"
    screens: List[str] = field(default_factory=lambda: [
        "Business Units",
        "Business Processes",
        "RPA Bots"
    ])


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        config = cls()

        # Load API configuration from secrets/environment
        config.api = APIConfig.from_secrets()

        # Apply environment-specific overrides
        if config.environment == "production":
            config.debug = False
            config.logging.level = "WARNING"
        elif config.environment == "development":
            config.debug = True
            config.logging.level = "DEBUG"

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.api.base_url.startswith(("http://", "https://")):
            errors.append(f"API base URL must be http(s): {self.api.base_url!r}")

        if self.api.timeout_seconds <= 0:
            errors.append("API timeout must be positive")

        if self.auth.token_storage_key == self.auth.user_storage_key:
            errors.append("Token and user storage keys must differ")

        if self.auth.session_store_backend not in SESSION_STORE_BACKENDS:
            errors.append(f"Unknown session store backend: {self.auth.session_store_backend!r}")

        if self.auth.session_cookie_max_age_days < 1:
            errors.append("Session cookie lifetime must be at least 1 day")

        for name, size in self.console.to_dict().items():
            if size < 1:
                errors.append(f"{name} must be at least 1")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = AppConfig.load()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()
