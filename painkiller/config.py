#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Configuration
Centralised configuration built from environment variables, with validation
"""

import os
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz


class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class StorageConfig:
    """Habit storage settings"""
    path: Path


@dataclass
class AIConfig:
    """Advisory (OpenAI) settings"""
    openai_api_key: Optional[str]
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 120
    request_timeout: int = 30
    max_retries: int = 2
    retry_delay: float = 1.0


@dataclass
class ServerConfig:
    """Dashboard API server settings"""
    host: str = "127.0.0.1"
    port: int = 8080
    debug_mode: bool = False


class AppConfig:
    """Main configuration class"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Read settings from environment variables"""

        # Directories
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(
            path=self.data_dir / os.getenv('DATA_FILE', 'habits.json'),
        )

        openai_key = os.getenv('OPENAI_API_KEY')
        self.ai = AIConfig(
            openai_api_key=openai_key or None,
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
            openai_max_tokens=int(os.getenv('OPENAI_MAX_TOKENS', 120)),
            request_timeout=int(os.getenv('AI_TIMEOUT', 30)),
            max_retries=int(os.getenv('AI_MAX_RETRIES', 2)),
        )

        self.server = ServerConfig(
            host=os.getenv('HOST', '127.0.0.1'),
            port=int(os.getenv('PORT', 8080)),
            debug_mode=os.getenv('DEBUG_MODE', 'false').lower() == 'true'
        )

        # The calendar day is computed in this zone
        self.timezone_name = os.getenv('TIMEZONE', 'UTC')

        # Logging
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

        self.features = {
            'ai_enabled': bool(self.ai.openai_api_key),
            'file_logging': self.log_to_file,
        }

    def _validate_config(self):
        """Validate the loaded settings"""
        errors = []

        if not 1024 <= self.server.port <= 65535:
            errors.append(f"Port {self.server.port} is outside the allowed range (1024-65535)")

        if self.timezone_name not in pytz.all_timezones_set:
            errors.append(f"Unknown TIMEZONE: {self.timezone_name}")

        if self.ai.max_retries < 1:
            errors.append("AI_MAX_RETRIES must be at least 1")

        if self.ai.openai_max_tokens <= 0:
            errors.append("OPENAI_MAX_TOKENS must be positive")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"- {error}" for error in errors))

    @property
    def timezone(self):
        return pytz.timezone(self.timezone_name)

    def get_logging_config(self) -> Dict[str, Any]:
        """Build a dictConfig mapping for the logging module"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stderr
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'httpx': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'openai': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"painkiller_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the configuration, hiding secrets"""
        return {
            'environment': self.environment.value,
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'features': self.features,
            'ai_enabled': bool(self.ai.openai_api_key),
            'ai_model': self.ai.openai_model,
            'storage_path': str(self.storage.path),
            'timezone': self.timezone_name,
            'log_level': self.log_level.value
        }


# Global configuration instance
config = AppConfig()

__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'AIConfig',
    'ServerConfig',
]
