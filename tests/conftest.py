"""Shared test fixtures."""

from pathlib import Path

import pytest
from diplodocus.config import Config, DocsConfig, ServerConfig, SiteConfig
from diplodocus.core.markdown import MarkdownRenderer
from diplodocus.core.types import NavGroup, NavPage


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with a tmp_path content directory.

    Creates source_dir and returns a Config instance suitable for testing.
    Use exist_ok=True to allow other fixtures to also create the docs dir.
    """
    source_dir = tmp_path / "docs"
    source_dir.mkdir(exist_ok=True)

    return Config(
        server=ServerConfig(),
        docs=DocsConfig(source_dir=source_dir),
        site=SiteConfig(
            name="Test Site",
            toc_levels=(2, 3),
            nav=(
                NavPage(title="About", path="/about"),
                NavGroup(
                    title="Lorem",
                    items=(NavPage(title="Lorem 01", path="/lorem/01"),),
                ),
            ),
        ),
    )


@pytest.fixture
def docs_dir(test_config: Config) -> Path:
    """Content directory of the test configuration."""
    return test_config.docs.source_dir


@pytest.fixture
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()
