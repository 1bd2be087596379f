"""Configuration management module."""

from rpbands.core.config.settings import (
    BandMultipliers,
    ConfigManager,
    FeedConfig,
    LoggingConfig,
    MergeConfig,
    RPBandsConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "BandMultipliers",
    "ConfigManager",
    "FeedConfig",
    "LoggingConfig",
    "MergeConfig",
    "RPBandsConfig",
    "get_default_config",
    "load_config_from_env",
]
