"""
Tests for configuration system
"""

import pytest
import os
import tempfile
from pathlib import Path
from config.app_config import (
    AppConfig, APIConfig, AuthConfig, ConsoleConfig, UIConfig, LoggingConfig,
    DEFAULT_API_URL, get_config, reload_config
)


class TestAPIConfig:
    """Test API configuration"""

    def test_from_secrets_fallback_to_env(self, monkeypatch):
        """Test fallback to environment variables when secrets unavailable"""
        monkeypatch.setenv("RPA_API_URL", "https://rpa.example.com/api/")
        monkeypatch.setenv("RPA_API_TIMEOUT", "12.5")

        config = APIConfig.from_secrets()

        assert config.base_url == "https://rpa.example.com/api/"
        assert config.timeout_seconds == 12.5

    def test_env_defaults(self, monkeypatch):
        """Test defaults when nothing is configured"""
        monkeypatch.delenv("RPA_API_URL", raising=False)
        monkeypatch.delenv("RPA_API_TIMEOUT", raising=False)

        config = APIConfig.from_secrets()

        assert config.base_url == DEFAULT_API_URL
        assert config.timeout_seconds == 30.0


class TestAuthConfig:
    """Test authentication configuration"""

    def test_default_storage_keys(self):
        config = AuthConfig()

        assert config.token_storage_key == "auth_token"
        assert config.user_storage_key == "user_data"
        assert config.session_store_backend == "browser"
        assert config.session_cookie_max_age_days == 7
        assert config.login_route == "login"


class TestConsoleConfig:
    """Test list screen configuration"""

    def test_default_page_sizes(self):
        config = ConsoleConfig()

        assert config.business_units_page_size == 10
        assert config.rpa_bots_page_size == 9
        assert config.business_processes_page_size == 10

    def test_to_dict(self):
        """Test conversion to dictionary"""
        config = ConsoleConfig(rpa_bots_page_size=6)

        assert config.to_dict() == {
            "business_units_page_size": 10,
            "rpa_bots_page_size": 6,
            "business_processes_page_size": 10
        }


class TestAppConfig:
    """Test main application configuration"""

    def test_default_initialization(self):
        """Test default configuration initialization"""
        config = AppConfig()

        assert isinstance(config.api, APIConfig)
        assert isinstance(config.auth, AuthConfig)
        assert isinstance(config.console, ConsoleConfig)
        assert isinstance(config.ui, UIConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_environment_detection(self, monkeypatch):
        """Test environment detection"""
        monkeypatch.setenv("APP_ENV", "production")
        config = AppConfig()
        assert config.environment == "production"

        monkeypatch.setenv("APP_ENV", "development")
        config = AppConfig()
        assert config.environment == "development"

    def test_debug_flag(self, monkeypatch):
        """Test debug flag configuration"""
        monkeypatch.setenv("DEBUG", "true")
        config = AppConfig()
        assert config.debug is True

        monkeypatch.setenv("DEBUG", "false")
        config = AppConfig()
        assert config.debug is False

    def test_production_overrides(self, monkeypatch):
        """Test production environment overrides"""
        monkeypatch.setenv("APP_ENV", "production")
        config = AppConfig.load()

        assert config.debug is False
        assert config.logging.level == "WARNING"

    def test_development_overrides(self, monkeypatch):
        """Test development environment overrides"""
        monkeypatch.setenv("APP_ENV", "development")
        config = AppConfig.load()

        assert config.debug is True
        assert config.logging.level == "DEBUG"

    def _valid_config(self) -> AppConfig:
        config = AppConfig()
        config.logging.enable_file_logging = False
        return config

    def test_validate_clean_config(self):
        assert self._valid_config().validate() == []

    def test_validate_bad_url(self):
        config = self._valid_config()
        config.api.base_url = "ftp://example.com"

        errors = config.validate()
        assert any("http(s)" in e for e in errors)

    def test_validate_non_positive_timeout(self):
        config = self._valid_config()
        config.api.timeout_seconds = 0

        assert "API timeout must be positive" in config.validate()

    def test_validate_shared_storage_key(self):
        """Token and identity must live under distinct keys"""
        config = self._valid_config()
        config.auth.user_storage_key = config.auth.token_storage_key

        assert "Token and user storage keys must differ" in config.validate()

    def test_validate_unknown_store_backend(self):
        config = self._valid_config()
        config.auth.session_store_backend = "redis"

        errors = config.validate()
        assert any("Unknown session store backend" in e for e in errors)

    def test_loaded_defaults_are_valid(self, monkeypatch):
        """Nothing beyond the defaults is needed to start the console"""
        for name in ("RPA_API_URL", "RPA_API_TIMEOUT", "GOOGLE_CLIENT_ID"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("APP_ENV", "production")
        config = AppConfig.load()
        config.logging.enable_file_logging = False

        assert config.auth.allow_federated_login is True
        assert config.validate() == []

    @pytest.mark.parametrize("backend", ["browser", "session_state", "file"])
    def test_validate_known_store_backends(self, backend):
        config = self._valid_config()
        config.auth.session_store_backend = backend

        assert config.validate() == []

    def test_validate_cookie_lifetime(self):
        config = self._valid_config()
        config.auth.session_cookie_max_age_days = 0

        assert "Session cookie lifetime must be at least 1 day" in config.validate()

    def test_validate_page_size(self):
        config = self._valid_config()
        config.console.rpa_bots_page_size = 0

        assert "rpa_bots_page_size must be at least 1" in config.validate()

    def test_validate_creates_directories(self):
        """Test validation creates necessary directories"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config = self._valid_config()
            config.logging.log_file = os.path.join(temp_dir, "logs", "test.log")
            config.logging.enable_file_logging = True

            config.validate()

            assert Path(temp_dir, "logs").exists()


class TestConfigSingleton:
    """Test configuration singleton behavior"""

    def test_get_config_singleton(self):
        """Test that get_config returns the same instance"""
        config1 = get_config()
        config2 = get_config()

        assert config1 is config2

    def test_reload_config(self, monkeypatch):
        """Test configuration reloading"""
        config1 = get_config()
        monkeypatch.setenv("RPA_API_URL", "https://reloaded.example.com/")
        config2 = reload_config()

        # Should be different instances after reload
        assert config1 is not config2
        assert isinstance(config2, AppConfig)
        assert config2.api.base_url == "https://reloaded.example.com/"


if __name__ == "__main__":
    pytest.main([__file__])
