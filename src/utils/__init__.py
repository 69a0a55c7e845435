"""
Utils package
"""

from src.utils.config import Settings, get_settings
from src.utils.logger import logger, memory_handler

__all__ = [
    "Settings",
    "get_settings",
    "logger",
    "memory_handler",
]
