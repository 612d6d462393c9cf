"""
================================================================================
Storefront Tools
================================================================================

Shared utilities for the storefront end-to-end suite.

Modules:
    - common: Configuration loading and Loguru logging setup
    - report_tools: Allure attachment helpers and run-summary reporting

Example:
    from storefront_tools.common import ConfigLoader, init_logger

    init_logger()
    base_url = ConfigLoader().get("storefront.base_url")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
