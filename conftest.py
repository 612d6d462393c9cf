"""
Repository-level pytest configuration.

Settings come from config/config.yaml; any `a.b_c` key can be overridden for
a run by exporting `A_B_C` (see storefront_tools.common.config_loader).
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).resolve().parent
