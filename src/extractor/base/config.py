"""Configuration management for the item identity extractors.

Settings are loaded from a YAML file holding global settings and a section
per supported site. Host-side profile limits are validated with pydantic.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .models import Site

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/extractors.yaml"


class ProfileLimits(BaseModel):
    """Length and count limits applied to a record before it becomes a profile."""

    max_item_id_length: int = Field(100, gt=0)
    max_owner_id_length: int = Field(50, gt=0)
    max_display_name_length: int = Field(100, gt=3)
    max_media_reference_length: int = Field(200, gt=0)
    max_url_length: int = Field(200, gt=0)
    max_tags: int = Field(20, ge=0)
    min_tag_length: int = Field(3, gt=0)
    max_tag_length: int = Field(20, gt=0)

    @model_validator(mode="after")
    def check_tag_lengths(self) -> "ProfileLimits":
        if self.min_tag_length > self.max_tag_length:
            raise ValueError("min_tag_length cannot exceed max_tag_length")
        return self


class SiteConfigManager:
    """Centralized configuration manager for the site adapters."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """Initialize the configuration manager.

        Args:
        ----
            config_path: Path to the YAML configuration file, absolute or
                relative to the project root

        """
        self.config_path = config_path
        self._config = self._load_config()
        self._validate_config()

    def _load_config(self) -> dict[str, Any]:
        """Read the YAML file into a mapping."""
        # Relative paths are taken from the project root
        project_root = Path(__file__).parent.parent.parent.parent
        config_file = project_root / self.config_path

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        with open(config_file, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _validate_config(self) -> None:
        """Check the required sections and the profile limits."""
        for section in ("global_settings", "sites"):
            if section not in self._config:
                raise ValueError(f"Required configuration section missing: {section}")

        for site_name in self._config["sites"] or {}:
            try:
                Site(site_name)
            except ValueError:
                logger.warning(f"Ignoring configuration for unknown site: {site_name}")

        # Invalid limits fail at load
        self.get_profile_limits()

    def get_global_settings(self) -> dict[str, Any]:
        """Return the ``global_settings`` section."""
        return self._config.get("global_settings") or {}

    def get_site_config(self, site: Site) -> dict[str, Any]:
        """Get configuration for a specific site.

        Raises:
        ------
            ValueError: If the site is not configured

        """
        site_config = (self._config.get("sites") or {}).get(site.value)
        if site_config is None:
            raise ValueError(f"No configuration found for site: {site.value}")
        return site_config

    def is_site_enabled(self, site: Site) -> bool:
        try:
            return bool(self.get_site_config(site).get("enabled", False))
        except ValueError:
            return False

    def get_enabled_sites(self) -> list[Site]:
        """Get list of enabled sites, in configuration order."""
        enabled = []
        for site_name, config in (self._config.get("sites") or {}).items():
            if not (config or {}).get("enabled", False):
                continue
            try:
                enabled.append(Site(site_name))
            except ValueError:
                continue
        return enabled

    def is_debug_enabled(self) -> bool:
        return bool(self.get_global_settings().get("debug", False))

    def get_profile_limits(self) -> ProfileLimits:
        """Get validated host-side profile limits.

        Raises:
        ------
            ValueError: If the configured limits are invalid

        """
        raw_limits = self.get_global_settings().get("profile_limits") or {}
        try:
            return ProfileLimits(**raw_limits)
        except ValidationError as e:
            raise ValueError(f"Invalid profile_limits configuration: {e}") from e


# Shared by the dispatch entry point and the tools
_config_manager: SiteConfigManager | None = None


def get_config_manager(config_path: str = DEFAULT_CONFIG_PATH) -> SiteConfigManager:
    """Get the global configuration manager instance.

    Args:
    ----
        config_path: Path to configuration file (only used on first call)

    Returns:
    -------
        SiteConfigManager instance

    """
    global _config_manager

    if _config_manager is None:
        _config_manager = SiteConfigManager(config_path)

    return _config_manager


def reset_config_manager() -> None:
    """Drop the global instance so the next call reloads configuration."""
    global _config_manager
    _config_manager = None
