"""Pytest configuration and shared fixtures for the extractor tests."""

import logging
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from src.extractor.base import PageContext, ProfileLimits, Site, reset_config_manager


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def make_context() -> Callable[..., PageContext]:
    """Build a page context from a URL and HTML body."""

    def _make(
        url: str,
        html: str,
        ready_state: str = "complete",
        script_state: dict[str, Any] | None = None,
        frames: dict[str, PageContext | None] | None = None,
        debug: bool = False,
    ) -> PageContext:
        return PageContext.from_html(
            url,
            html,
            ready_state=ready_state,
            script_state=script_state,
            frames=frames,
            debug=debug,
        )

    return _make


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Configuration with every site enabled and default limits."""
    return {
        "global_settings": {
            "debug": False,
            "profile_limits": ProfileLimits().model_dump(),
        },
        "sites": {site.value: {"enabled": True} for site in Site},
    }


@pytest.fixture
def config_file(temp_dir: Path, config_data: dict[str, Any]) -> Path:
    """Write the configuration to a temporary YAML file."""
    config_path = temp_dir / "extractors.yaml"
    config_path.write_text(yaml.safe_dump(config_data, sort_keys=False), encoding="utf-8")
    return config_path


@pytest.fixture
def profile_limits() -> ProfileLimits:
    return ProfileLimits()


@pytest.fixture(autouse=True)
def fresh_config_manager():
    """Drop the global configuration manager around each test."""
    reset_config_manager()
    yield
    reset_config_manager()


@pytest.fixture(autouse=True)
def setup_logging():
    """Set up logging for tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
