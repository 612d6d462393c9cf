"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the storefront suite.

Components:
    - smart_locator: Element location with fallback strategies
    - button_text: Classification of add-to-cart buttons by label
    - popup_handler: Best-effort popup dismissal
    - page_base: Base page object for common operations
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .smart_locator import SmartLocator, ElementNotFoundError, chain
from .popup_handler import PopupHandler
from .page_base import BasePage
from .browser_manager import BrowserManager

__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "chain",
    "PopupHandler",
    "BasePage",
    "BrowserManager",
]
