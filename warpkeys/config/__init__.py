"""Configuration package exports."""

from .loader import ConfigError, ConfigLocator, ConfigRepository
from .models import DEFAULT_SOURCES, GlobalConfig, ScheduleConfig, ScheduleType

__all__ = [
    "ConfigError",
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_SOURCES",
    "GlobalConfig",
    "ScheduleConfig",
    "ScheduleType",
]
