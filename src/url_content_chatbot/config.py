"""
Configuration management for the URL content chatbot.
"""

import os
import yaml
from typing import Any, Optional
from pathlib import Path
from pydantic import BaseModel
from dotenv import load_dotenv


DEFAULT_BASE_URL = "https://builder.empromptu.ai/api_tools"


class GatewayConfig(BaseModel):
    """Remote content/agent service configuration."""
    base_url: str = DEFAULT_BASE_URL
    api_key: str
    app_id: str
    timeout: float = 60.0


class PipelineConfig(BaseModel):
    """Names and prompts used while ingesting a URL."""
    content_object_name: str = "url_content"
    summary_object_name: str = "url_summary"
    summary_prompt: str = "Please provide a comprehensive summary of this content: {content_ref}"
    input_mode: str = "combine_events"


class AgentConfig(BaseModel):
    """Conversational agent configuration."""
    name: str = "Website Content Assistant"
    instructions_template: str = (
        "You are a helpful assistant that can discuss and answer questions about the following "
        "content that was just summarized from the website {url}: {summary}. Be conversational "
        "and helpful, and reference the content when relevant to user questions."
    )
    greeting_prompt: str = (
        "Please greet the user and briefly mention what you learned from the website content they provided."
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/url_chatbot.log"
    console: bool = False


class ValidationConfig(BaseModel):
    """Input validation configuration."""
    max_url_length: int = 2048
    max_message_length: int = 4000
    allowed_schemes: list[str] = ["http", "https"]


class Config(BaseModel):
    """Main configuration class."""
    gateway: GatewayConfig
    pipeline: PipelineConfig = PipelineConfig()
    agent: AgentConfig = AgentConfig()
    logging: LoggingConfig = LoggingConfig()
    validation: ValidationConfig = ValidationConfig()


class ConfigManager:
    """Configuration manager for the URL content chatbot."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager."""
        self.config_path = config_path or "config.yaml"
        load_dotenv()  # Load environment variables

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        try:
            config_file = Path(self.config_path)
            if not config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(config_file, 'r', encoding='utf-8') as file:
                config_data = yaml.safe_load(file) or {}

            config_data = self._substitute_env_vars(config_data)

            return Config(**config_data)

        except Exception as e:
            raise RuntimeError(f"Failed to load configuration: {str(e)}")

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute environment variables in configuration."""
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
            env_var = data[2:-1]
            # ${CHATBOT_API_BASE:-https://...}
            if ":-" in env_var:
                var_name, default_value = env_var.split(":-", 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(env_var, "")
        else:
            return data

    def validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        if not config.gateway.api_key or config.gateway.api_key.strip() == "":
            raise ValueError("Gateway API key is required. Please set CHATBOT_API_KEY environment variable.")

        if not config.gateway.app_id or config.gateway.app_id.strip() == "":
            raise ValueError("Gateway application ID is required. Please set CHATBOT_APP_ID environment variable.")

        if not config.gateway.base_url.startswith(("http://", "https://")):
            raise ValueError("Gateway base URL must start with http:// or https://")

        if config.gateway.timeout <= 0:
            raise ValueError("Gateway timeout must be positive")

        if config.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {config.logging.level}")

        logs_dir = Path(config.logging.file).parent
        logs_dir.mkdir(parents=True, exist_ok=True)
