"""
Input validation for the URL content chatbot.
"""

import logging
from typing import Optional
from urllib.parse import urlparse
from pydantic import BaseModel

from .config import Config


class ValidationResult(BaseModel):
    """Result of input validation."""
    is_valid: bool
    error_message: Optional[str] = None
    sanitized_input: Optional[str] = None


class InputValidator:
    """Validates URLs and chat messages before they enter the workflow."""

    def __init__(self, config: Config, logger: logging.Logger):
        """Initialize input validator."""
        self.config = config
        self.logger = logger
        self.max_url_length = config.validation.max_url_length
        self.max_message_length = config.validation.max_message_length
        self.allowed_schemes = [scheme.lower() for scheme in config.validation.allowed_schemes]

    def validate_url(self, url: Optional[str]) -> ValidationResult:
        """Validate and trim a URL."""
        if not url or not url.strip():
            return ValidationResult(
                is_valid=False,
                error_message="URL cannot be empty"
            )

        url = url.strip()

        if len(url) > self.max_url_length:
            return ValidationResult(
                is_valid=False,
                error_message=f"URL cannot exceed {self.max_url_length} characters"
            )

        if any(char.isspace() for char in url):
            return ValidationResult(
                is_valid=False,
                error_message="URL cannot contain whitespace"
            )

        parsed = urlparse(url)
        if parsed.scheme.lower() not in self.allowed_schemes:
            self.logger.warning(f"Rejected URL scheme: {parsed.scheme or '(none)'}")
            return ValidationResult(
                is_valid=False,
                error_message=f"URL scheme must be one of: {', '.join(self.allowed_schemes)}"
            )

        if not parsed.netloc:
            return ValidationResult(
                is_valid=False,
                error_message="URL must include a host"
            )

        return ValidationResult(is_valid=True, sanitized_input=url)

    def validate_message(self, text: Optional[str]) -> ValidationResult:
        """Validate a chat message; the text itself is passed through unchanged."""
        if not text or not text.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Message cannot be empty"
            )

        if len(text) > self.max_message_length:
            return ValidationResult(
                is_valid=False,
                error_message=f"Message cannot exceed {self.max_message_length} characters"
            )

        return ValidationResult(is_valid=True, sanitized_input=text)
