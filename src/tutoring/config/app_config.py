"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from tutoring.config.app_config import load_app_config

    config = load_app_config()
    rate = config.donations.rate_for(Tier.TOP)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from tutoring.core.errors import InvalidArgumentError
from tutoring.core.ordering import LISTING_ORDERS, OrderBy
from tutoring.core.reputation import Tier

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class DonationConfig:
    """Share of each donation the tutor keeps, per reputation tier.

    The platform keeps ``1 - rate``.
    """

    tutor_rates: dict[Tier, float] = field(
        default_factory=lambda: {
            Tier.APPRENTICE: 0.40,
            Tier.TUTOR: 0.80,
            Tier.TOP: 0.90,
        }
    )

    def __post_init__(self):
        for tier, rate in self.tutor_rates.items():
            if not isinstance(tier, Tier):
                raise InvalidArgumentError(f"Unknown tier in donation rates: {tier!r}")
            if isinstance(rate, bool) or not isinstance(rate, (int, float)) or not 0 <= rate <= 1:
                raise InvalidArgumentError(f"Donation rate for {tier.value} must be between 0 and 1")

        missing = [tier.value for tier in Tier if tier not in self.tutor_rates]
        if missing:
            raise InvalidArgumentError(f"Missing donation rate for: {', '.join(missing)}")
        self.tutor_rates = {tier: float(rate) for tier, rate in self.tutor_rates.items()}

    def rate_for(self, tier: Tier) -> float:
        return self.tutor_rates[tier]


@dataclass
class ListingConfig:
    """Listing defaults for both directories."""

    default_order: OrderBy = OrderBy.NAME


@dataclass
class AppConfig:
    """Application-wide configuration."""

    donations: DonationConfig = field(default_factory=DonationConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def state_dir(self) -> Path:
        return Path(self.paths.get("state_dir", "data/state"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "donations": {
            "tutor_rates": {
                "apprentice": 0.40,
                "tutor": 0.80,
                "top": 0.90,
            },
        },
        "listing": {
            "default_order": "name",
        },
        "paths": {
            "state_dir": "data/state",
            "config_dir": "data/config",
        },
    }


def _parse_rates(data: dict[str, Any]) -> DonationConfig:
    """Parse ``{tier: rate}`` keyed by tier name.

    Range and completeness checks happen in DonationConfig.
    """
    rates: dict[Tier, float] = {}
    for key, value in data.items():
        try:
            tier = Tier.parse(key)
        except ValueError:
            raise InvalidArgumentError(f"Unknown tier in donation rates: {key!r}") from None
        rates[tier] = value
    return DonationConfig(tutor_rates=rates)


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    donations_data = data.get("donations") or {}
    rates_data = donations_data.get("tutor_rates") or defaults["donations"]["tutor_rates"]
    donations = _parse_rates(rates_data)

    listing_data = data.get("listing") or {}
    order = OrderBy.parse(listing_data.get("default_order", "name"))
    if order not in LISTING_ORDERS:
        raise InvalidArgumentError(f"Invalid default listing order: {order.value!r}")

    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(donations=donations, listing=ListingConfig(default_order=order), paths=paths)


def load_app_config(force_reload: bool = False, config_file: Path | None = None) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.
        config_file: Alternate YAML file. Defaults to CONFIG_FILE.

    Returns:
        AppConfig object with all settings.

    Raises:
        InvalidArgumentError: If the file holds invalid rates or orders.
    """
    global _cached_config

    if _cached_config is not None and not force_reload and config_file is None:
        return _cached_config

    path = config_file or CONFIG_FILE
    data: dict[str, Any]

    if path.exists():
        logger.debug("loading_app_config", source=str(path))
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    config = _parse_config(data)
    if config_file is None:
        _cached_config = config
    return config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
