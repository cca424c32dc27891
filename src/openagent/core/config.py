"""
Configuration Management for OpenAgent

Handles configuration loading, validation and persistence of user settings
(API key, selected model, auth type, logging).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from dotenv import load_dotenv

from .models import DEFAULT_MODEL

logger = structlog.get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

AUTH_OPENROUTER = "openrouter"
SUPPORTED_AUTH_TYPES = (AUTH_OPENROUTER,)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("structured", "json", "plain")


@dataclass(frozen=True)
class ContentGeneratorConfig:
    """Everything the content generator needs to reach the provider"""
    api_key: str
    base_url: str = OPENROUTER_BASE_URL
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = 60.0


@dataclass
class APIConfig:
    """API configuration"""
    openrouter_key: str = ""
    base_url: str = OPENROUTER_BASE_URL
    timeout: float = 60.0


@dataclass
class ModelConfig:
    """Model configuration"""
    default: str = DEFAULT_MODEL


@dataclass
class SecurityConfig:
    """Security configuration"""
    auth_type: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    format: str = "structured"  # structured, json, plain


class Config:
    """
    Main configuration class.

    Values come from the YAML settings file first, then from ``.env`` and
    the process environment.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self._get_default_config_path()
        self.config_dir = self.config_path.parent

        # Load environment variables
        load_dotenv()

        self.api = APIConfig()
        self.models = ModelConfig()
        self.security = SecurityConfig()
        self.logging = LoggingConfig()

        self._load_config()
        self._validate_config()

        logger.info("Configuration loaded", config_path=str(self.config_path))

    @staticmethod
    def _get_default_config_path() -> Path:
        """Get the default configuration file path"""
        return Path.home() / ".openagent" / "config.yaml"

    def _load_config(self):
        """Load configuration from file and environment variables"""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    config_data = yaml.safe_load(f) or {}
                self._apply_config_data(config_data)
                logger.debug("Configuration loaded from file")
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Failed to load config file", error=str(e))

        self._load_from_environment()

    def _apply_config_data(self, config_data: Dict[str, Any]):
        """Apply configuration data to config objects"""
        if "api" in config_data:
            api_config = config_data["api"] or {}
            stored_key = api_config.get("openrouter_key", "")
            # Ignore the placeholder written when no key was known
            if stored_key and stored_key != "${OPENROUTER_API_KEY}":
                self.api.openrouter_key = stored_key
            self.api.base_url = api_config.get("base_url", self.api.base_url)
            self.api.timeout = api_config.get("timeout", self.api.timeout)

        if "models" in config_data:
            models_config = config_data["models"] or {}
            self.models.default = models_config.get("default", self.models.default)

        if "security" in config_data:
            security_config = config_data["security"] or {}
            self.security.auth_type = security_config.get("auth_type", self.security.auth_type)

        if "logging" in config_data:
            logging_config = config_data["logging"] or {}
            self.logging.level = logging_config.get("level", self.logging.level)
            self.logging.format = logging_config.get("format", self.logging.format)

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        env_key = os.getenv("OPENROUTER_API_KEY")
        if env_key:
            self.api.openrouter_key = env_key

        if os.getenv("OPENROUTER_BASE_URL"):
            self.api.base_url = os.getenv("OPENROUTER_BASE_URL")

        if os.getenv("OPENAGENT_MODEL"):
            self.models.default = os.getenv("OPENAGENT_MODEL")

        if os.getenv("OPENAGENT_LOG_LEVEL"):
            self.logging.level = os.getenv("OPENAGENT_LOG_LEVEL").upper()

    def _validate_config(self):
        """Validate configuration settings"""
        errors = []

        if self.api.timeout <= 0:
            errors.append("API timeout must be positive")

        if self.logging.level.upper() not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.logging.level}")

        if self.logging.format not in LOG_FORMATS:
            errors.append(f"Unknown log format: {self.logging.format}")

        if self.security.auth_type and self.security.auth_type not in SUPPORTED_AUTH_TYPES:
            errors.append(f"Unsupported auth type: {self.security.auth_type}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error("Configuration validation failed", errors=errors)
            raise ValueError(error_msg)

    def validate_auth(self, auth_type: Optional[str] = None) -> Optional[str]:
        """Return an error message if the auth method cannot be used"""
        auth_type = auth_type or self.security.auth_type or AUTH_OPENROUTER
        if auth_type not in SUPPORTED_AUTH_TYPES:
            return f"Unsupported auth type: {auth_type}"
        if not self.api.openrouter_key:
            return (
                "OPENROUTER_API_KEY environment variable not found. "
                "Add it to your .env file or config and try again."
            )
        return None

    def save_config(self):
        """Save current configuration to file"""
        api_key_to_save = self.api.openrouter_key if self.api.openrouter_key else "${OPENROUTER_API_KEY}"

        config_data = {
            "api": {
                "openrouter_key": api_key_to_save,
                "base_url": self.api.base_url,
                "timeout": self.api.timeout,
            },
            "models": {
                "default": self.models.default,
            },
            "security": {
                "auth_type": self.security.auth_type,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, "w", encoding="utf-8") as f:
                yaml.dump(config_data, f, default_flow_style=False, indent=2)

            logger.info("Configuration saved", path=str(self.config_path))

        except OSError as e:
            logger.error("Failed to save configuration", error=str(e))
            raise

    def set_model(self, model_name: str):
        """Select a model and persist the choice"""
        model_name = model_name.strip()
        if not model_name:
            raise ValueError("Model name cannot be empty")
        self.models.default = model_name
        self.save_config()
        logger.info("Model switched", model=model_name)

    def set_auth_type(self, auth_type: str):
        """Select an auth method and persist the choice"""
        error = self.validate_auth(auth_type)
        if error:
            raise ValueError(error)
        self.security.auth_type = auth_type
        self.save_config()
        logger.info("Auth type selected", auth_type=auth_type)

    def generator_config(self, headers: Optional[Dict[str, str]] = None) -> ContentGeneratorConfig:
        """Build the explicit configuration handed to the content generator"""
        return ContentGeneratorConfig(
            api_key=self.api.openrouter_key,
            base_url=self.api.base_url,
            headers=dict(headers or {}),
            timeout=self.api.timeout,
        )

    @property
    def openrouter_api_key(self) -> str:
        """Get OpenRouter API key"""
        return self.api.openrouter_key

    @property
    def default_model(self) -> str:
        """Get the selected model"""
        return self.models.default
