"""Configuration module for the barter exchange."""

from .app_config import (
    APP_CONFIG,
    AppSettings,
    StoreConfig,
    LatencyConfig,
    CodeConfig,
    BarterPolicyConfig,
    get_app_settings,
)

__all__ = [
    'APP_CONFIG',
    'AppSettings',
    'StoreConfig',
    'LatencyConfig',
    'CodeConfig',
    'BarterPolicyConfig',
    'get_app_settings',
]
