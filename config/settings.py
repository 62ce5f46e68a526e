"""
Configuration management module with environment variable support, validation, and singleton pattern.

This module provides a centralized configuration system that:
- Loads settings from environment variables using python-dotenv
- Validates configurations with descriptive error messages
- Supports different environments (dev, test, prod)
- Implements singleton pattern for consistent configuration access
- Provides type-annotated properties with sensible defaults

Config Schema:
    ENVIRONMENT (str): Application environment (dev, test, prod)
    LOG_LEVEL (str): Logging level (DEBUG, INFO, WARNING, ERROR)
    USE_LOGURU (bool): Whether to emit logs through loguru sinks or standard logging
    LEXICON_PATH (str): Path to the YAML lexicon (abbreviations, synonyms, jargon, weights)
    CACHE_MAX_SIZE (int): Maximum number of cached queries
    CACHE_EVICTION_BATCH (int): Number of oldest cache entries dropped when full
    ANALYTICS_LOG_SIZE (int): Capacity of the timestamped query log
    CONTEXT_HISTORY_SIZE (int): Capacity of the personalization search history
    SCORING_BATCH_SIZE (int): Number of documents scored per batch
    MONITOR_MAX_METRICS (int): Capacity of the per-search performance log
    ENABLE_PROMETHEUS_METRICS (bool): Whether engines keep a Prometheus registry
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from loguru import logger


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


class Config:
    """
    Singleton configuration class that manages application settings.

    Loads configuration from environment variables and provides validation
    with descriptive error messages for invalid values.
    """

    _instance: Optional['Config'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Config':
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize configuration if not already done."""
        if not self._initialized:
            self._load_environment()
            self._initialized = True

    def _load_environment(self) -> None:
        """Load environment variables from .env file if available."""
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment from {env_path}")

    def _positive_int(self, name: str, default: str, allow_zero: bool = False) -> int:
        try:
            value = int(os.getenv(name, default))
            if value < 0 or (value == 0 and not allow_zero):
                raise ValueError(f"{name} must be {'non-negative' if allow_zero else 'positive'}")
            return value
        except ValueError as e:
            raise ConfigurationError(f"Invalid {name}: {e}")

    def _flag(self, name: str, default: str) -> bool:
        return os.getenv(name, default).lower() in ('true', '1', 'yes', 'on')

    @property
    def ENVIRONMENT(self) -> Literal['dev', 'test', 'prod']:
        """Application environment."""
        env = os.getenv('ENVIRONMENT', 'dev').lower()
        if env not in ('dev', 'test', 'prod'):
            raise ConfigurationError(f"ENVIRONMENT must be one of 'dev', 'test', 'prod', got '{env}'")
        return env  # type: ignore

    @property
    def LOG_LEVEL(self) -> str:
        """Logging level."""
        level = os.getenv('LOG_LEVEL', 'INFO').upper()
        valid_levels = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        if level not in valid_levels:
            raise ConfigurationError(f"LOG_LEVEL must be one of {valid_levels}, got '{level}'")
        return level

    @property
    def USE_LOGURU(self) -> bool:
        """Whether to use loguru sinks for structured logging instead of standard logging."""
        return self._flag('USE_LOGURU', 'true')

    @property
    def LEXICON_PATH(self) -> str:
        """Path to the YAML lexicon resource."""
        return os.getenv('LEXICON_PATH', str(Path(__file__).parent / 'lexicon.yaml'))

    @property
    def CACHE_MAX_SIZE(self) -> int:
        """Maximum number of cached result lists."""
        return self._positive_int('CACHE_MAX_SIZE', '100')

    @property
    def CACHE_EVICTION_BATCH(self) -> int:
        """Number of oldest cache entries evicted at once when the cache is full."""
        return self._positive_int('CACHE_EVICTION_BATCH', '20')

    @property
    def ANALYTICS_LOG_SIZE(self) -> int:
        """Capacity of the timestamped query log used for trending queries."""
        return self._positive_int('ANALYTICS_LOG_SIZE', '1000')

    @property
    def CONTEXT_HISTORY_SIZE(self) -> int:
        """Capacity of the personalization search history."""
        return self._positive_int('CONTEXT_HISTORY_SIZE', '50')

    @property
    def SCORING_BATCH_SIZE(self) -> int:
        """Number of documents scored between early-exit checks."""
        return self._positive_int('SCORING_BATCH_SIZE', '50')

    @property
    def MONITOR_MAX_METRICS(self) -> int:
        """Capacity of the per-search performance log."""
        return self._positive_int('MONITOR_MAX_METRICS', '1000')

    @property
    def ENABLE_PROMETHEUS_METRICS(self) -> bool:
        """Whether to enable Prometheus metrics collection."""
        return self._flag('ENABLE_PROMETHEUS_METRICS', 'true')

    def validate(self) -> None:
        """
        Validate all configuration values.

        Raises:
            ConfigurationError: If any configuration is invalid.
        """
        errors = []

        lexicon_path = Path(self.LEXICON_PATH)
        if not lexicon_path.is_file():
            errors.append(f"LEXICON_PATH '{lexicon_path}' does not exist")

        for name in ('ENVIRONMENT', 'LOG_LEVEL', 'CACHE_MAX_SIZE', 'CACHE_EVICTION_BATCH',
                     'ANALYTICS_LOG_SIZE', 'CONTEXT_HISTORY_SIZE', 'SCORING_BATCH_SIZE',
                     'MONITOR_MAX_METRICS'):
            try:
                getattr(self, name)
            except ConfigurationError as e:
                errors.append(str(e))

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ConfigurationError(error_msg)

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == 'dev'

    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == 'test'

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'prod'

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for debugging."""
        return {
            'ENVIRONMENT': self.ENVIRONMENT,
            'LOG_LEVEL': self.LOG_LEVEL,
            'USE_LOGURU': self.USE_LOGURU,
            'LEXICON_PATH': self.LEXICON_PATH,
            'CACHE_MAX_SIZE': self.CACHE_MAX_SIZE,
            'CACHE_EVICTION_BATCH': self.CACHE_EVICTION_BATCH,
            'ANALYTICS_LOG_SIZE': self.ANALYTICS_LOG_SIZE,
            'CONTEXT_HISTORY_SIZE': self.CONTEXT_HISTORY_SIZE,
            'SCORING_BATCH_SIZE': self.SCORING_BATCH_SIZE,
            'MONITOR_MAX_METRICS': self.MONITOR_MAX_METRICS,
            'ENABLE_PROMETHEUS_METRICS': self.ENABLE_PROMETHEUS_METRICS,
        }

    def __repr__(self) -> str:
        """String representation of configuration."""
        config_dict = self.to_dict()
        return f"Config({', '.join(f'{k}={v}' for k, v in config_dict.items())})"


# Global configuration instance
config = Config()
