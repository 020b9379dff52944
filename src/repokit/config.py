"""
Configuration Management for repokit

🔧 Unified Configuration System:
Dataclass-based configuration for database wiring and logging, with
presets per environment and loaders for dictionaries, JSON files and
environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class DatabaseConfig:
    """Database connection configuration"""
    url: str = "sqlite:///repokit.db"
    async_url: Optional[str] = "sqlite+aiosqlite:///repokit.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600
    expire_on_commit: bool = False
    connect_args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class RepoKitConfig:
    """Complete library configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'RepoKitConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.logging.level = "DEBUG"
            config.database.echo = True

        elif environment == Environment.TESTING:
            config.database.url = "sqlite://"
            config.database.async_url = "sqlite+aiosqlite://"
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.logging.level = "INFO"
            config.database.pool_size = 10
            config.database.max_overflow = 20

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'RepoKitConfig':
        """Create configuration from dictionary"""
        environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        config = cls.for_environment(environment)

        if "debug" in config_dict:
            config.debug = config_dict["debug"]

        for section in ("database", "logging"):
            target = getattr(config, section)
            for key, value in config_dict.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)

        if "custom" in config_dict:
            config.custom.update(config_dict["custom"])

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'RepoKitConfig':
        """Load configuration from a JSON file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix != '.json':
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        with open(config_path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_environment(cls) -> 'RepoKitConfig':
        """Create configuration from environment variables"""
        environment = Environment(os.getenv('REPOKIT_ENV', 'development'))
        config = cls.for_environment(environment)

        if os.getenv('REPOKIT_DEBUG'):
            config.debug = os.getenv('REPOKIT_DEBUG').lower() == 'true'

        if os.getenv('REPOKIT_DATABASE_URL'):
            config.database.url = os.getenv('REPOKIT_DATABASE_URL')

        if os.getenv('REPOKIT_ASYNC_DATABASE_URL'):
            config.database.async_url = os.getenv('REPOKIT_ASYNC_DATABASE_URL')

        if os.getenv('REPOKIT_LOG_LEVEL'):
            config.logging.level = os.getenv('REPOKIT_LOG_LEVEL').upper()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "database": {
                "url": self.database.url,
                "async_url": self.database.async_url,
                "echo": self.database.echo,
                "pool_size": self.database.pool_size,
                "max_overflow": self.database.max_overflow,
                "pool_timeout": self.database.pool_timeout,
                "pool_recycle": self.database.pool_recycle,
                "expire_on_commit": self.database.expire_on_commit,
                "connect_args": self.database.connect_args,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count,
            },
            "custom": self.custom,
        }


def configure_logging(config: LoggingConfig, logger_name: str = "repokit") -> logging.Logger:
    """
    Attach handlers to the library logger.

    A stream handler is always installed; a size-rotating file handler is
    added when ``config.file_path`` is set. Calling this again replaces the
    handlers it installed before.
    """
    target = logging.getLogger(logger_name)
    target.setLevel(config.level.upper())

    for handler in list(target.handlers):
        if getattr(handler, "_repokit_handler", False):
            target.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format)
    handlers = [logging.StreamHandler()]
    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._repokit_handler = True
        target.addHandler(handler)

    return target


# Global configuration management
_current_config: Optional[RepoKitConfig] = None


def set_config(config: Optional[RepoKitConfig]):
    """Set the global configuration"""
    global _current_config
    _current_config = config


def get_config() -> RepoKitConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        _current_config = RepoKitConfig.from_environment()

    return _current_config


def configure_from_file(config_path: Union[str, Path]) -> RepoKitConfig:
    """Configure the library from file"""
    config = RepoKitConfig.from_file(config_path)
    set_config(config)
    return config


def configure_from_dict(config_dict: Dict[str, Any]) -> RepoKitConfig:
    """Configure the library from dictionary"""
    config = RepoKitConfig.from_dict(config_dict)
    set_config(config)
    return config


__all__ = [
    "Environment", "DatabaseConfig", "LoggingConfig", "RepoKitConfig",
    "configure_logging", "set_config", "get_config",
    "configure_from_file", "configure_from_dict",
]
