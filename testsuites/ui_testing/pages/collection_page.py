"""
================================================================================
Collection Page Object (Async / Playwright)
================================================================================

Product listing page (`/collections/all`) of the storefront.

Highlights:
  - Product card access (count, nth card, product name)
  - Add-to-cart fallback chain scoped to a single product card
  - Category navigation and return
  - Pagination (`?page=N` / rel=next links)

================================================================================
"""

from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import parse_qs, urlencode, urljoin, urlparse, urlunparse

import allure
from loguru import logger
from playwright.async_api import Locator, expect

from testsuites.ui_testing.framework.button_text import (
    ERROR_OCCURRED,
    NO_BUTTON_FOUND,
    get_button_type,
    is_cart_button,
    is_wishlist_button,
    read_button_label,
)
from testsuites.ui_testing.framework.page_base import PageBase
from testsuites.ui_testing.framework.smart_locator import SmartLocator


PRODUCT_CARD_SELECTOR = ".m-product-card"

# Ordered: most specific theme controls first, generic submit buttons last
ADD_TO_CART_SELECTORS: List[str] = [
    # Quick Add buttons
    'button:has-text("Quick Add")',
    'button.m-button--white:has-text("Quick Add")',
    'button.m-button--secondary:has-text("Quick Add")',

    # Select Options buttons (including span text)
    'button:has-text("Select options")',
    'button:has-text("Select Options")',
    'button:has-text("Select option")',
    'button:has-text("SELECT OPTIONS")',
    'button:has(span:has-text("Select options"))',
    'button:has(span:has-text("Select Options"))',

    # Add to Cart buttons
    'button[aria-label="Add to cart"]',
    'button:has-text("Add to cart")',
    'button:has-text("Add to Cart")',
    'button:has-text("ADD TO CART")',

    # General cart buttons
    ".add-to-cart",
    ".product-add-to-cart",
    "[data-add-to-cart]",
    'button[type="submit"]',

    # Theme class-based buttons
    '.m-button:has-text("Add")',
    ".product-form__cart-button",
    ".shopify-payment-button",
]

NEXT_PAGE_SELECTORS: List[str] = [
    *SmartLocator.LOCATORS["pagination_next"].values(),
    "link[rel='next']",
]


def build_page_url(url: str, page_number: int) -> str:
    """
    Return `url` pointing at listing page `page_number`.

    Page 1 drops the `page` query parameter; other query parameters are kept.
    """
    parts = urlparse(url)
    query = {k: v for k, v in parse_qs(parts.query, keep_blank_values=True).items() if k != "page"}
    if page_number > 1:
        query["page"] = [str(page_number)]
    return urlunparse(parts._replace(query=urlencode(query, doseq=True)))


def page_number_from_url(url: str) -> int:
    """Listing page number encoded in `url` (1 when absent or malformed)."""
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return 1
    try:
        return max(int(values[0]), 1)
    except ValueError:
        return 1


class CollectionPage(PageBase):
    """Collection (product listing) page object (async)."""

    URL_PATH = "/collections/all"

    def __init__(self, page, base_url: str = "", config=None, smart=None):
        super().__init__(page, base_url=base_url, config=config, smart=smart)
        self.URL_PATH = self.config.get("storefront.collection_path", self.URL_PATH)

    # ============================================================
    # Navigation
    # ============================================================

    @allure.step("Open collection page")
    async def open(self, url: Optional[str] = None, timeout: Optional[int] = None) -> "CollectionPage":
        """Navigate to the listing (or a given listing page URL) and wait for product cards."""
        await self.navigate_to(url or self.url, timeout=timeout)
        await self.wait_for_products()
        return self

    @allure.step("Open collection page (with retry)")
    async def open_with_retry(self) -> "CollectionPage":
        """Slow-network-tolerant navigation used before category browsing."""
        await self.goto_with_retry(self.url, url_pattern=re.compile(r"collections/all"))
        return self

    async def wait_for_products(self, timeout: Optional[int] = None) -> None:
        await self.smart.locate(
            "product_card",
            timeout=timeout or self.timeout("product_cards", 30000),
        )

    @allure.step("Open category link: {name}")
    async def open_category(self, name: str) -> None:
        """Click a category link, wait for the new listing to render, verify the URL changed."""
        link = self.page.get_by_role("link", name=name).first
        await link.wait_for(state="visible", timeout=self.timeout("category_link", 120000))
        await expect(link).to_be_enabled()

        nav_timeout = self.timeout("navigation_retry", 180000)
        async with self.page.expect_navigation(wait_until="domcontentloaded", timeout=nav_timeout):
            await link.click()

        await self.page.wait_for_function(
            """() => {
                const main = document.querySelector('main');
                return main && main.offsetHeight > 200 && main.offsetWidth > 200;
            }""",
            timeout=nav_timeout,
        )
        await expect(self.page).not_to_have_url(self.url)
        logger.info(f"✅ Opened category '{name}': {self.page.url}")

    @allure.step("Go back to collection")
    async def go_back(self) -> None:
        """History back; a missing navigation event is tolerated after a short wait."""
        try:
            await self.page.go_back(
                wait_until="domcontentloaded",
                timeout=self.wait_ms("go_back_fallback", 5000),
            )
        except Exception as err:
            logger.debug(f"go_back produced no navigation in time: {err}")
        await self.wait_for_element("main", timeout=self.timeout("category_link", 120000))

    async def verify_on_collection(self) -> None:
        await expect(self.page).to_have_url(self.url)

    @allure.step("Verify landmark product is listed")
    async def verify_landmark_product(self, name: Optional[str] = None) -> None:
        """The known product and a price are rendered."""
        name = name or self.config.get("storefront.landmark_product", "Leather Boho Stud Bag Burgundy")
        timeout = self.timeout("category_link", 120000)
        await expect(self.page.get_by_text(name)).to_be_visible(timeout=timeout)
        await expect(self.page.get_by_text("£").nth(2)).to_be_visible(timeout=timeout)

    @allure.step("Quick Add first product")
    async def quick_add_first(self) -> None:
        button = self.page.get_by_role("button", name="Quick Add").first
        await button.wait_for(state="visible", timeout=self.timeout("quick_add", 10000))
        await self.scroll_into_view(button)
        await button.click()

    # ============================================================
    # Product cards
    # ============================================================

    @property
    def product_cards(self) -> Locator:
        return self.page.locator(PRODUCT_CARD_SELECTOR)

    async def product_count(self) -> int:
        return await self.product_cards.count()

    def product_card(self, index: int) -> Locator:
        return self.product_cards.nth(index)

    async def product_name(self, index: int, default: Optional[str] = None) -> str:
        """Product name from the card link's aria-label."""
        default = default or f"Product {index + 1}"
        try:
            name = await self.product_card(index).locator("a[aria-label]").first.get_attribute(
                "aria-label", timeout=5000
            )
        except Exception:
            logger.debug("Could not get product name")
            return default
        return name or default

    async def add_to_cart(self, card: Locator) -> str:
        """
        Add one product to the cart from its card.

        Tries ADD_TO_CART_SELECTORS in order, then any visible cart-like,
        non-wishlist button of the card.

        Args:
            card: Product card locator

        Returns:
            The add-to-cart method (e.g. "quick_add", "select_options"),
            NO_BUTTON_FOUND or ERROR_OCCURRED
        """
        try:
            logger.info("🔍 Looking for cart buttons...")

            for selector in ADD_TO_CART_SELECTORS:
                try:
                    button = card.locator(selector).first
                    if not await button.is_visible():
                        continue
                    label = await read_button_label(button, default=selector)
                    logger.info(f"✅ Found button: {label}")

                    await button.click()
                    logger.info(f"🖱️ Clicked: {label}")
                    # every listed selector is a known theme control
                    self.smart.record_hit("add_to_cart_button", ADD_TO_CART_SELECTORS, selector, strategy="primary")
                    return get_button_type(selector, label)
                except Exception as e:
                    logger.debug(f"Selector {selector} skipped: {e}")

            return await self._add_with_any_cart_button(card)

        except Exception as error:
            logger.error(f"❌ Error in add_to_cart: {error}")
            return ERROR_OCCURRED

    async def _add_with_any_cart_button(self, card: Locator) -> str:
        logger.info("🔄 Trying fallback: any non-wishlist button in product card...")
        buttons = card.locator("button")
        count = await buttons.count()
        logger.info(f"🔍 Found {count} total buttons in product card")

        for i in range(count):
            button = buttons.nth(i)
            if not await button.is_visible():
                continue
            label = await read_button_label(button, default="Unknown Button")
            logger.debug(f"🔍 Button {i + 1}: \"{label}\"")

            if is_wishlist_button(label):
                logger.debug(f"⏭️ Skipping wishlist button: {label}")
                continue

            if is_cart_button(label):
                await button.click()
                logger.info(f"🖱️ Clicked fallback button: \"{label}\"")
                self.smart.record_hit("add_to_cart_button", ADD_TO_CART_SELECTORS, "button", strategy="any_cart_button")
                return get_button_type("fallback", label)

        logger.warning("❌ No cart buttons found with any selector")
        for i in range(count):
            button = buttons.nth(i)
            label = await read_button_label(button, default="No text")
            try:
                visible = await button.is_visible()
            except Exception:
                visible = False
            logger.debug(f"  {i + 1}. \"{label}\" - Visible: {visible}")

        return NO_BUTTON_FOUND

    # ============================================================
    # Pagination
    # ============================================================

    def page_url(self, page_number: int) -> str:
        return build_page_url(self.url, page_number)

    def current_page_number(self) -> int:
        return page_number_from_url(self.page.url)

    async def next_page_url(self) -> Optional[str]:
        """Absolute URL of the next listing page, or None on the last page."""
        for selector in NEXT_PAGE_SELECTORS:
            try:
                link = self.page.locator(selector).first
                if not await link.count():
                    continue
                href = await link.get_attribute("href")
            except Exception as e:
                logger.debug(f"Pagination selector {selector} skipped: {e}")
                continue
            if href:
                return urljoin(self.page.url, href)
        return None

    @allure.step("Go to next listing page")
    async def go_to_next_page(self) -> bool:
        """Open the next listing page. Returns False on the last page."""
        next_url = await self.next_page_url()
        if not next_url:
            return False
        await self.open(next_url)
        logger.info(f"📄 Listing page {self.current_page_number()}: {next_url}")
        return True


__all__ = [
    "CollectionPage",
    "ADD_TO_CART_SELECTORS",
    "PRODUCT_CARD_SELECTOR",
    "build_page_url",
    "page_number_from_url",
]
