"""
Unit test fixtures: fresh configuration per test and fake Playwright pages.
"""

from typing import Generator

import pytest

from storefront_tools.common import ConfigLoader

from .fakes import FakePage


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch) -> Generator[None, None, None]:
    """Every test starts from the bundled config.yaml with no overrides."""
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def config() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage(url="https://www.yugustore.com/collections/all")
