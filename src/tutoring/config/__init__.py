"""Configuration package for the tutoring marketplace."""

from tutoring.config.app_config import (
    AppConfig,
    DonationConfig,
    ListingConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DonationConfig",
    "ListingConfig",
    "clear_config_cache",
    "load_app_config",
]
