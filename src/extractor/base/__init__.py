"""Base infrastructure for the multi-site extraction architecture.

This package provides the common foundation that all site adapters build
upon: models, page context, DOM helpers, the field pipeline, validators and
configuration.

Public API:
    - Site: Enum of supported sites
    - ItemIdentity / DisplayName: The extracted identity record
    - ExtractionResult / ExtractionStatus: Tri-state attempt outcome
    - ContentAdapter: Abstract base class for site adapters
    - AdapterRegistry: Registry for site adapters
    - PageContext: Read-only page snapshot
    - FieldPipeline: Ordered short-circuiting field resolution
    - SiteConfigManager: YAML configuration manager

Live capture from a botasaurus driver lives in ``base.browser``.
"""

# Configuration management
from .config import (
    ProfileLimits,
    SiteConfigManager,
    get_config_manager,
    reset_config_manager,
)
from .context import PageContext

# Core models and interfaces
from .models import (
    AdapterRegistry,
    ContentAdapter,
    DisplayName,
    ExtractionResult,
    ExtractionStatus,
    ItemIdentity,
    Site,
    WireField,
    register_adapter,
)
from .pipeline import FieldPipeline

# Utilities
from .utils import (
    get_path,
    host_check,
    object_exists,
    stringify,
    trim_url_argument,
)

__all__ = [
    # Core models and interfaces
    "AdapterRegistry",
    "ContentAdapter",
    "DisplayName",
    "ExtractionResult",
    "ExtractionStatus",
    "ItemIdentity",
    "Site",
    "WireField",
    "register_adapter",
    "PageContext",
    "FieldPipeline",
    # Configuration management
    "ProfileLimits",
    "SiteConfigManager",
    "get_config_manager",
    "reset_config_manager",
    # Utilities
    "get_path",
    "host_check",
    "object_exists",
    "stringify",
    "trim_url_argument",
]
