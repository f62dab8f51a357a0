"""
Logging manager for the URL content chatbot.
Configures one package logger and hands out a child logger per component
(gateway, tracker, pipeline, chat, teardown, ...), so log lines show which
part of the session they came from.
"""

import logging
from pathlib import Path
from typing import Dict, Any

from .config import Config


PACKAGE_LOGGER = "url_content_chatbot"
CONSOLE_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class LoggingManager:
    """Owns the package logger's handlers and the component loggers under it."""

    def __init__(self, config: Config):
        """Initialize the logging manager."""
        self.config = config
        self._components: Dict[str, logging.Logger] = {}
        self.package_logger = self._configure_package_logger()

    def _configure_package_logger(self) -> logging.Logger:
        level = getattr(logging, self.config.logging.level.upper())
        logger = logging.getLogger(PACKAGE_LOGGER)
        logger.setLevel(level)

        # A new manager takes over from any earlier one in the same process
        self._remove_handlers(logger)

        log_file = Path(self.config.logging.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(self.config.logging.format))
        logger.addHandler(file_handler)

        # Keep the terminal chat readable: only warnings and errors reach the console
        if self.config.logging.console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.WARNING)
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            logger.addHandler(console_handler)

        return logger

    def get_logger(self, component: str) -> logging.Logger:
        """Get the logger for a component, e.g. ``gateway`` -> ``url_content_chatbot.gateway``.

        Component loggers carry no handlers of their own; records propagate
        to the package logger.
        """
        if component not in self._components:
            self._components[component] = self.package_logger.getChild(component)
        return self._components[component]

    def shutdown(self) -> None:
        """Flush and detach the package logger's handlers."""
        self._remove_handlers(self.package_logger)

    @staticmethod
    def _remove_handlers(logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def get_system_info(self) -> Dict[str, Any]:
        """Get logging system information."""
        return {
            "log_level": self.config.logging.level,
            "log_file": self.config.logging.file,
            "components": sorted(self._components)
        }
