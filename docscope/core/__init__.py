"""
DocScope - Core Module
"""

from .config import Settings, get_settings
from .logging_config import configure_logging, bind_document

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "bind_document",
]
