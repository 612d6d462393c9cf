"""
================================================================================
Popup Handler
================================================================================

Best-effort dismissal of newsletter / promo popups that cover the storefront
and the checkout form. Closes at most one popup per call.

================================================================================
"""

from __future__ import annotations

from loguru import logger
from playwright.async_api import Page


POPUP_CLOSE_SELECTORS = [
    'button[aria-label="Close"]',
    "button.close",
    ".popup-close",
    ".modal-close",
    'button:has-text("Close")',
    ".newsletter-close",
    "[data-close]",
    'button[data-dismiss="modal"]',
]


class PopupHandler:
    """
    Closes the first visible popup.

    Usage:
        popups = PopupHandler(page, settle_ms=2000)
        await popups.dismiss()
    """

    def __init__(self, page: Page, settle_ms: int = 2000):
        self.page = page
        self.settle_ms = settle_ms

    async def dismiss(self) -> bool:
        """
        Close one popup if any close control is visible.

        A control that is covered or detaches while clicked is skipped and
        the sweep goes on with the next selector.

        Returns:
            True when a popup was closed
        """
        logger.debug("🛡️ Checking for popups...")
        for selector in POPUP_CLOSE_SELECTORS:
            try:
                close_button = self.page.locator(selector).first
                if not await close_button.is_visible():
                    continue
                await close_button.click()
                logger.info(f"✅ Closed popup with selector: {selector}")
                await self.page.wait_for_timeout(self.settle_ms)
                return True
            except Exception as e:
                logger.debug(f"ℹ️ Popup close {selector} skipped: {e}")
        return False


__all__ = [
    "PopupHandler",
    "POPUP_CLOSE_SELECTORS",
]
