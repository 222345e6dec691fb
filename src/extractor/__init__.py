"""Multi-site item identity extraction with factory and registry support.

This package resolves the canonical identity of the photo or profile a user
is viewing on a supported site, from a read-only snapshot of the page.

Architecture:
    - base/: Site-agnostic foundation (models, config, page context, pipeline)
    - sites/: One adapter per supported site
    - profile.py: Host-side limits and profile building

Usage:
    # Using the factory
    adapter = AdapterFactory.create_adapter(Site.FLICKR)
    result = adapter.try_extract(context)

    # Dispatch on the page URL
    result = extract_active_item(PageContext.from_snapshot(snapshot))
    print(result.to_wire())

    # Capture a live botasaurus page
    result = extract_from_driver(driver)
"""

import importlib
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from .base import (
    AdapterRegistry,
    ContentAdapter,
    ExtractionResult,
    PageContext,
    Site,
    get_config_manager,
)
from .base.config import DEFAULT_CONFIG_PATH

if TYPE_CHECKING:
    from botasaurus.browser import Driver

logger = logging.getLogger(__name__)

# Adapter module of each site, under the sites package
SITE_MODULES = {
    Site.FLICKR: "flickr",
    Site.FIVEHUNDRED_PX: "fivehundredpx",
    Site.IPERNITY: "ipernity",
    Site.ONE_X: "onex",
    Site.SEVENTY_TWO_DPI: "seventytwodpi",
    Site.PHOTOSHELTER: "photoshelter",
    Site.PIXOTO: "pixoto",
    Site.SMUGMUG: "smugmug",
    Site.TRIPLEJ: "triplej",
    Site.VIEWBUG: "viewbug",
    Site.YOUPIC: "youpic",
}


class AdapterFactory:
    """Factory class for creating site adapters.

    Adapters register themselves when their module is imported; the factory
    imports them on demand and refuses sites disabled in configuration.
    """

    @classmethod
    def create_adapter(
        cls,
        site: Site,
        config_path: str | None = None,
        debug_sink: Callable[[str], None] | None = None,
    ) -> ContentAdapter:
        """Create an adapter instance for the specified site.

        Args:
        ----
            site: The site to create an adapter for
            config_path: Optional path to configuration file
            debug_sink: Optional callable receiving fault diagnostics

        Returns:
        -------
            Site-specific adapter instance

        Raises:
        ------
            ValueError: If site is not supported or not enabled

        """
        if not AdapterRegistry.is_site_supported(site):
            cls._auto_import_site(site)

            if not AdapterRegistry.is_site_supported(site):
                available = AdapterRegistry.get_available_sites()
                raise ValueError(
                    f"Site {site.value} is not supported. "
                    f"Available sites: {[s.value for s in available]}"
                )

        config_manager = get_config_manager(config_path or DEFAULT_CONFIG_PATH)
        if not config_manager.is_site_enabled(site):
            raise ValueError(
                f"Site {site.value} is not enabled in configuration. "
                f"Set 'sites.{site.value}.enabled: true' in config file."
            )

        adapter_class = AdapterRegistry.get_adapter_class(site)
        return adapter_class(debug_sink=debug_sink)  # type: ignore[misc]

    @classmethod
    def get_available_sites(cls) -> list[Site]:
        """Get list of sites with an adapter, importing every known adapter."""
        for site in Site:
            cls._auto_import_site(site)
        return AdapterRegistry.get_available_sites()

    @classmethod
    def get_enabled_sites(cls, config_path: str | None = None) -> list[Site]:
        config_manager = get_config_manager(config_path or DEFAULT_CONFIG_PATH)
        return config_manager.get_enabled_sites()

    @classmethod
    def adapter_for(
        cls,
        context: PageContext,
        config_path: str | None = None,
        debug_sink: Callable[[str], None] | None = None,
    ) -> ContentAdapter | None:
        """Return an adapter for the enabled site the page belongs to, if any."""
        for site in cls.get_enabled_sites(config_path):
            adapter = cls.create_adapter(site, config_path, debug_sink)
            if adapter.host_matches(context):
                return adapter
        return None

    @classmethod
    def _auto_import_site(cls, site: Site) -> None:
        """Import the adapter module of a site so it registers itself.

        Raises:
        ------
            ImportError: If the site module cannot be imported

        """
        module_name = SITE_MODULES.get(site)
        if module_name is None:
            return
        try:
            importlib.import_module(f"{__name__}.sites.{module_name}")
        except ImportError as e:
            logger.debug(f"Could not import {site.value} adapter: {e}")
            raise ImportError(f"Site {site.value} module not available") from e


def extract_active_item(
    context: PageContext,
    config_path: str | None = None,
    debug_sink: Callable[[str], None] | None = None,
) -> ExtractionResult:
    """Run the adapter for the page's site, if one is enabled.

    Args:
    ----
        context: Read-only snapshot of the current page
        config_path: Optional path to configuration file
        debug_sink: Optional callable receiving fault diagnostics

    Returns:
    -------
        The adapter's result, or NO_ITEM for a page on no supported site

    """
    adapter = AdapterFactory.adapter_for(context, config_path, debug_sink)
    if adapter is None:
        logger.debug(f"No enabled adapter for {context.hostname or context.url}")
        return ExtractionResult.no_item()
    if is_debug_enabled(config_path) and not context.debug:
        context = replace(context, debug=True)
    return adapter.try_extract(context)


def extract_from_driver(
    driver: "Driver",
    config_path: str | None = None,
    debug_sink: Callable[[str], None] | None = None,
) -> ExtractionResult:
    """Capture the driver's current page and run its site adapter.

    Only the window globals the matching adapter reads are serialized.

    Args:
    ----
        driver: Botasaurus browser driver positioned on the page
        config_path: Optional path to configuration file
        debug_sink: Optional callable receiving fault diagnostics

    Returns:
    -------
        The adapter's result, or NO_ITEM for a page on no supported site

    """
    from .base.browser import capture_page_context

    # Adapters match on the location alone
    location = PageContext.from_html(driver.current_url, "")
    adapter = AdapterFactory.adapter_for(location, config_path, debug_sink)
    if adapter is None:
        logger.debug(f"No enabled adapter for {location.hostname or location.url}")
        return ExtractionResult.no_item()

    context = capture_page_context(
        driver, adapter.script_globals, debug=is_debug_enabled(config_path)
    )
    return adapter.try_extract(context)


def is_debug_enabled(config_path: str | None = None) -> bool:
    return get_config_manager(config_path or DEFAULT_CONFIG_PATH).is_debug_enabled()


__all__ = [
    "AdapterFactory",
    "SITE_MODULES",
    "extract_active_item",
    "extract_from_driver",
    "is_debug_enabled",
]
