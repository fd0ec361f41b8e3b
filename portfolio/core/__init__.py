"""Core functionality for the portfolio package."""

from .logging import setup_logging
from .config import Settings, get_settings
from .database import Base, get_session

__all__ = [
    'setup_logging',
    'Settings',
    'get_settings',
    'Base',
    'get_session',
]
