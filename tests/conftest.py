"""Shared test fixtures."""

from pathlib import Path

import pytest
from kiln.config import (
    Config,
    DirConfig,
    NavigationConfig,
    PagesConfig,
    ServerConfig,
    SiteConfig,
)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Creates the input and layouts directories and returns a Config instance
    suitable for testing. Output is written under tmp_path/dist.
    """
    input_dir = tmp_path / "src"
    input_dir.mkdir(exist_ok=True)
    layouts_dir = tmp_path / "_layouts"
    layouts_dir.mkdir(exist_ok=True)

    return Config(
        dir=DirConfig(
            input_dir=input_dir,
            output_dir=tmp_path / "dist",
            layouts_dir=layouts_dir,
        ),
        server=ServerConfig(),
        site=SiteConfig(),
        pages=PagesConfig(),
        navigation=NavigationConfig(),
    )
