"""
Test validation for the URL content chatbot.
"""

import pytest
import logging
from unittest.mock import Mock

from url_content_chatbot.validation import InputValidator


@pytest.fixture
def mock_config():
    """Create a mock configuration for testing."""
    config = Mock()

    config.validation = Mock()
    config.validation.max_url_length = 100
    config.validation.max_message_length = 50
    config.validation.allowed_schemes = ["http", "HTTPS"]

    return config


@pytest.fixture
def validator(mock_config):
    """Create a validator instance for testing."""
    return InputValidator(mock_config, Mock(spec=logging.Logger))


class TestValidateUrl:
    """Test URL validation."""

    def test_valid_url_is_trimmed(self, validator):
        result = validator.validate_url("  https://example.com/page  ")

        assert result.is_valid is True
        assert result.error_message is None
        assert result.sanitized_input == "https://example.com/page"

    @pytest.mark.parametrize("url", ["", "   ", None])
    def test_empty_url(self, validator, url):
        result = validator.validate_url(url)

        assert result.is_valid is False
        assert "empty" in result.error_message.lower()

    def test_too_long(self, validator):
        result = validator.validate_url("https://example.com/" + "a" * 100)

        assert result.is_valid is False
        assert "cannot exceed" in result.error_message.lower()

    def test_disallowed_scheme(self, validator):
        result = validator.validate_url("javascript:alert(1)")

        assert result.is_valid is False
        assert "scheme" in result.error_message.lower()

    def test_missing_scheme(self, validator):
        result = validator.validate_url("example.com")

        assert result.is_valid is False
        assert "scheme" in result.error_message.lower()

    def test_missing_host(self, validator):
        result = validator.validate_url("http:///path")

        assert result.is_valid is False
        assert "host" in result.error_message.lower()

    def test_inner_whitespace(self, validator):
        result = validator.validate_url("https://example.com/a page")

        assert result.is_valid is False
        assert "whitespace" in result.error_message.lower()


class TestValidateMessage:
    """Test chat message validation."""

    def test_message_passes_through_unchanged(self, validator):
        result = validator.validate_message("  What is this page about?  ")

        assert result.is_valid is True
        assert result.sanitized_input == "  What is this page about?  "

    @pytest.mark.parametrize("text", ["", "\n\t ", None])
    def test_empty_message(self, validator, text):
        result = validator.validate_message(text)

        assert result.is_valid is False
        assert "empty" in result.error_message.lower()

    def test_too_long(self, validator):
        result = validator.validate_message("a" * 51)

        assert result.is_valid is False
        assert "cannot exceed" in result.error_message.lower()
