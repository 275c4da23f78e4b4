"""
🔧 Genetic Engine Core Module
Settings and logging shared by the engine
"""

__version__ = "0.1.0"
__description__ = "Generic evolutionary computation engine"

from .config import Settings, get_settings
from .logger import get_logger, get_ga_logger, get_event_logger

__all__ = [
    "Settings",
    "get_settings",
    "get_logger",
    "get_ga_logger",
    "get_event_logger"
]
