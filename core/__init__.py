"""
Users API Service - Core Modules
"""

from .config import ConfigError, DatabaseConfig, ServiceConfig, load_config, load_database_config
from .logger import setup_logging

__all__ = [
    'ConfigError',
    'DatabaseConfig',
    'ServiceConfig',
    'load_config',
    'load_database_config',
    'setup_logging',
]
