# Tests for settings loading in forge_client/config.py.
import pytest

from forge_client.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, load_settings
from forge_client.errors import ConfigurationError, ForgeError


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        """Test that only the token is required."""
        settings = load_settings({"FORGE_API_TOKEN": "abc"})
        assert settings.api_token == "abc"
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_overrides(self):
        """Test base URL and timeout overrides."""
        settings = load_settings({
            "FORGE_API_TOKEN": " abc ",
            "FORGE_BASE_URL": "https://forge.example/api/v1/",
            "FORGE_TIMEOUT": "12.5",
        })
        assert settings.api_token == "abc"
        assert settings.base_url == "https://forge.example/api/v1"
        assert settings.timeout == 12.5

    @pytest.mark.parametrize("environ", [{}, {"FORGE_API_TOKEN": "   "}])
    def test_missing_token(self, environ):
        """Test that a missing or blank token is a configuration error."""
        with pytest.raises(ConfigurationError, match="FORGE_API_TOKEN"):
            load_settings(environ)

    @pytest.mark.parametrize("timeout", ["soon", "0", "-3"])
    def test_bad_timeout(self, timeout):
        """Test that the timeout must be a positive number."""
        with pytest.raises(ConfigurationError, match="FORGE_TIMEOUT"):
            load_settings({"FORGE_API_TOKEN": "abc", "FORGE_TIMEOUT": timeout})

    def test_configuration_error_is_forge_error(self):
        """Test the error hierarchy."""
        assert issubclass(ConfigurationError, ForgeError)

    def test_token_not_in_repr(self):
        """Test that the token never shows up in logs via repr()."""
        assert "abc" not in repr(load_settings({"FORGE_API_TOKEN": "abc"}))
