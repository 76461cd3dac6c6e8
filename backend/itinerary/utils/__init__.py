"""
Configuration and logging helpers.
"""

from .config import ItineraryConfig, configure_logging, load_config

__all__ = [
    "ItineraryConfig",
    "configure_logging",
    "load_config",
]
