"""
Configuration package for the fractional car ownership backend.

This package contains the environment settings and logging setup.
"""

from app.config.settings import settings, get_settings
from app.config.logging import setup_logging, get_logger

__all__ = ['settings', 'get_settings', 'setup_logging', 'get_logger']
