"""
================================================================================
Product Page Object (Async / Playwright)
================================================================================

Product detail page reached when "Select options" navigates away from the
listing instead of opening a quick-shop modal.

Also owns variant selection, which the quick-shop modal reuses.

================================================================================
"""

from __future__ import annotations

from typing import Any, List, Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.button_text import read_button_label
from testsuites.ui_testing.framework.page_base import PageBase
from testsuites.ui_testing.pages.collection_page import PRODUCT_CARD_SELECTOR


SELECT_OPTIONS_COMPLETED = "select_options_completed"
SELECT_OPTIONS_FAILED = "select_options_failed"

VARIANT_SELECTORS: List[str] = [
    'select[class*="variant"]',
    'select[name*="variant"]',
    ".variant-selector select",
    ".product-options select",
    'input[type="radio"][name*="variant"]',
    '.swatch input[type="radio"]',
]

PRODUCT_PAGE_ADD_TO_CART_SELECTORS: List[str] = [
    'button:has-text("Add to cart")',
    'button:has-text("Add to Cart")',
    'button:has-text("ADD TO CART")',
    '[type="submit"][name="add"]',
    ".product-form__cart-button",
    ".add-to-cart",
]


class ProductPage(PageBase):
    """Product detail page object (async)."""

    URL_PATH = "/products/"

    async def select_first_variant(self, scope: Optional[Any] = None) -> bool:
        """
        Pick the first selectable variant inside `scope` (page or modal).

        Dropdowns get the option at index 1 (index 0 is usually the
        placeholder); radio variants get their first input checked.

        Returns:
            True when a variant control was found and set
        """
        scope = scope if scope is not None else self.page
        logger.info("🔄 Looking for variant selectors...")

        for selector in VARIANT_SELECTORS:
            try:
                variant_input = scope.locator(selector).first
                if not await variant_input.is_visible():
                    continue
                logger.info(f"✅ Found variant selector: {selector}")

                if selector.startswith("select") or " select" in selector:
                    await variant_input.select_option(index=1)
                    logger.info("✅ Selected first variant from dropdown")
                else:
                    await variant_input.check()
                    logger.info("✅ Selected first variant radio button")

                self.smart.record_hit("variant_selector", VARIANT_SELECTORS, selector)
                await self.settle("variant_settle", 2000)
                return True
            except Exception as e:
                logger.debug(f"Variant selector {selector} skipped: {e}")

        logger.info("ℹ️ No variant selectors found")
        return False

    @allure.step("Add to cart from product page")
    async def add_to_cart_and_return(self) -> str:
        """
        Add the product on the current detail page and go back to the listing.

        Returns:
            SELECT_OPTIONS_COMPLETED or SELECT_OPTIONS_FAILED
        """
        try:
            logger.info("🔄 Handling product page flow...")
            await self.smart.locate(
                "product_page_form",
                timeout=self.timeout("product_page_form", 10000),
            )

            logger.info("🛒 Looking for Add to Cart button on product page...")
            for selector in PRODUCT_PAGE_ADD_TO_CART_SELECTORS:
                try:
                    button = self.page.locator(selector).first
                    if not await button.is_visible():
                        continue
                    label = await read_button_label(button, default=selector)
                    logger.info(f"✅ Found Add to Cart button on product page: \"{label}\"")

                    if not await button.is_enabled():
                        logger.warning("⚠️ Add to Cart button is disabled, selecting first variant...")
                        await self.select_first_variant()
                        await self.settle("variant_settle", 2000)

                    await button.click(timeout=self.timeout("cart_click", 15000))
                    logger.info("🖱️ Clicked Add to Cart on product page")
                    self.smart.record_hit("product_page_add_to_cart", PRODUCT_PAGE_ADD_TO_CART_SELECTORS, selector)

                    await self.settle("after_product_page_add", 5000)
                    await self.page.go_back(
                        wait_until="domcontentloaded",
                        timeout=self.timeout("go_back", 30000),
                    )
                    await self.wait_for_element(PRODUCT_CARD_SELECTOR, timeout=15000)
                    return SELECT_OPTIONS_COMPLETED
                except Exception as e:
                    logger.debug(f"Product page selector {selector} failed: {e}")

            logger.error("❌ Could not find Add to Cart button on product page")
            return SELECT_OPTIONS_FAILED

        except Exception as error:
            logger.error(f"❌ Error in product page flow: {error}")
            return SELECT_OPTIONS_FAILED


__all__ = [
    "ProductPage",
    "SELECT_OPTIONS_COMPLETED",
    "SELECT_OPTIONS_FAILED",
    "VARIANT_SELECTORS",
]
