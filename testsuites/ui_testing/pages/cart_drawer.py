"""
================================================================================
Cart Drawer (Async / Playwright)
================================================================================

The slide-out cart that opens after a product is added; its "Check out"
button leads to the hosted checkout.

================================================================================
"""

from __future__ import annotations

import re

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from testsuites.ui_testing.framework.page_base import PageBase
from testsuites.ui_testing.pages.checkout_page import CheckoutError


CHECKOUT_URL_PATTERN = re.compile(r".*checkout.*")


class CartDrawer(PageBase):
    """Cart drawer page object (async)."""

    @property
    def checkout_button(self):
        return self.page.get_by_role("button", name="Check out").first

    @allure.step("Proceed to checkout")
    async def proceed_to_checkout(self) -> None:
        """
        Wait for the cart to update, click "Check out" and wait for the checkout URL.

        Raises:
            CheckoutError: Checkout button never appeared or the checkout page never loaded
        """
        logger.info("⏳ Waiting for cart to update...")
        await self.settle("cart_update", 8000)

        logger.info("🚀 Clicking checkout button...")
        button = self.checkout_button
        try:
            await button.wait_for(state="visible", timeout=self.timeout("checkout_button", 90000))
        except PlaywrightError as e:
            raise CheckoutError(f"Checkout button not visible: {e}") from e

        await self.settle("before_checkout_click", 3000)
        await button.click()
        logger.info("✅ Checkout button clicked")

        logger.info("⏳ Waiting for checkout page to load...")
        try:
            await self.wait_for_url(CHECKOUT_URL_PATTERN, timeout=self.timeout("checkout_url", 60000))
        except PlaywrightError as e:
            raise CheckoutError(f"Checkout page not reached from {self.page.url}: {e}") from e
        logger.info("✅ Checkout page loaded")

        await self.settle("checkout_form_ready", 5000)


__all__ = ["CartDrawer", "CHECKOUT_URL_PATTERN"]
