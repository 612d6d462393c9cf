"""
================================================================================
Quick Shop Modal (Async / Playwright)
================================================================================

The "Select options" flow: after a listing button asks for a variant, the
theme either opens a quick-shop modal or navigates to the product page.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator

from testsuites.ui_testing.framework.button_text import (
    is_cart_button,
    is_non_cart_modal_button,
    read_button_label,
)
from testsuites.ui_testing.framework.page_base import PageBase
from testsuites.ui_testing.framework.smart_locator import SmartLocator
from testsuites.ui_testing.pages.product_page import (
    SELECT_OPTIONS_COMPLETED,
    SELECT_OPTIONS_FAILED,
    ProductPage,
)


PRODUCT_MODAL_SELECTORS: List[str] = [
    ".m-quick-shop-modal",
    ".product-modal",
    "[data-product-modal]",
    ".m-modal--product",
    ".quick-shop-modal",
    ".m-modal.m-open-modal",
    ".modal--quick-shop",
    '[data-modal="product"]',
]

MODAL_ADD_TO_CART_SELECTORS: List[str] = [
    'button:has-text("Add to cart")',
    'button:has-text("Add to Cart")',
    'button:has-text("ADD TO CART")',
    ".add-to-cart",
    ".product-form__cart-button",
    '[type="submit"]',
    '.m-button--primary:has-text("Add")',
    ".shopify-payment-button__button",
]

MODAL_PRIMARY_BUTTONS = 'button[type="submit"], .m-button--primary, .button--primary'


class QuickShopModal(PageBase):
    """Quick-shop (variant) modal opened from a product card."""

    def __init__(self, page, base_url: str = "", config=None, smart=None):
        super().__init__(page, base_url=base_url, config=config, smart=smart)
        self.product_page = ProductPage(page, base_url=base_url, config=self.config, smart=self.smart)

    async def find(self) -> Optional[Locator]:
        """Visible product modal, any open modal as fallback, or None."""
        hit = await self.smart.first_visible(PRODUCT_MODAL_SELECTORS, element_name="product_modal")
        if hit:
            selector, modal = hit
            logger.info(f"✅ Product modal found: {selector}")
            return modal

        logger.warning("❌ No product modal found, trying to find any open modal...")
        any_open = ", ".join(SmartLocator.LOCATORS["open_modal"].values())
        open_modals = self.page.locator(any_open)
        if await open_modals.count() > 0:
            logger.info("✅ Found open modal")
            self.smart.record_hit("product_modal", PRODUCT_MODAL_SELECTORS, any_open, strategy="open_modal")
            return open_modals.first
        return None

    async def _click_modal_add_to_cart(self, modal: Locator, select_if_disabled: bool) -> bool:
        for selector in MODAL_ADD_TO_CART_SELECTORS:
            try:
                button = modal.locator(selector).first
                if not await button.is_visible():
                    continue
                label = await read_button_label(button, default=selector)
                logger.info(f"✅ Found Add to Cart button in modal: \"{label}\"")

                if select_if_disabled and not await button.is_enabled():
                    logger.warning("⚠️ Add to Cart button is disabled, may need variant selection")
                    await self.product_page.select_first_variant(modal)
                    await self.settle("variant_settle", 2000)

                await button.click(timeout=self.timeout("cart_click", 15000))
                logger.info(f"🖱️ Clicked Add to Cart in product modal: \"{label}\"")
                self.smart.record_hit("modal_add_to_cart", MODAL_ADD_TO_CART_SELECTORS, selector)
                return True
            except Exception as e:
                logger.debug(f"Selector {selector} failed: {e}")
        return False

    async def _click_primary_button(self, modal: Locator) -> bool:
        logger.info("🔄 Trying fallback: primary buttons in product modal...")
        buttons = modal.locator(MODAL_PRIMARY_BUTTONS)
        count = await buttons.count()
        logger.info(f"🔍 Found {count} primary/submit buttons in product modal")

        for i in range(count):
            button = buttons.nth(i)
            if not await button.is_visible():
                continue
            label = await read_button_label(button, default="Unknown Button")
            logger.debug(f"🔍 Modal Primary Button {i + 1}: \"{label}\"")

            if is_non_cart_modal_button(label):
                logger.debug(f"⏭️ Skipping non-cart button: {label}")
                continue

            if is_cart_button(label):
                try:
                    await button.click(timeout=self.timeout("cart_click", 15000))
                except Exception as click_error:
                    logger.warning(f"❌ Failed to click button: {click_error}")
                    continue
                logger.info(f"🖱️ Clicked modal primary button: \"{label}\"")
                self.smart.record_hit(
                    "modal_add_to_cart", MODAL_ADD_TO_CART_SELECTORS, MODAL_PRIMARY_BUTTONS, strategy="primary_button"
                )
                return True
        return False

    @allure.step("Handle Select Options flow")
    async def handle_select_options_flow(self) -> str:
        """
        Complete a "Select options" add-to-cart.

        Returns:
            SELECT_OPTIONS_COMPLETED or SELECT_OPTIONS_FAILED
        """
        try:
            logger.info("🔄 Handling Select Options flow...")
            await self.settle("modal_open", 5000)

            modal = await self.find()
            if modal is None:
                logger.warning("❌ No modal detected at all, checking if we are on product page...")
                if "/products/" in self.page.url:
                    logger.info("✅ Redirected to product page, handling there...")
                    return await self.product_page.add_to_cart_and_return()
                return SELECT_OPTIONS_FAILED

            logger.info("🛒 Looking for Add to Cart button in product modal...")
            added = await self._click_modal_add_to_cart(modal, select_if_disabled=True)

            if not added:
                logger.info("🔄 Add to Cart button not found, checking if variant selection is needed...")
                if await self.product_page.select_first_variant(modal):
                    logger.info("✅ Variant selected, trying Add to Cart again...")
                    await self.settle("after_variant", 3000)
                    added = await self._click_modal_add_to_cart(modal, select_if_disabled=False)

            if not added:
                added = await self._click_primary_button(modal)

            await self.settle("after_modal_add", 5000)

            if added:
                logger.info("✅ Successfully added product to cart from modal")
                return SELECT_OPTIONS_COMPLETED
            logger.error("❌ Could not add product to cart from modal")
            return SELECT_OPTIONS_FAILED

        except Exception as error:
            logger.error(f"❌ Error in Select Options flow: {error}")
            return SELECT_OPTIONS_FAILED


__all__ = [
    "QuickShopModal",
    "PRODUCT_MODAL_SELECTORS",
    "MODAL_ADD_TO_CART_SELECTORS",
]
