"""
================================================================================
Storefront Checkout Flow
================================================================================

Orchestrates the page objects into end-to-end purchase runs:

    - one product: add to cart -> checkout -> payment -> back to its listing
    - every product of every listing page, one checkout per product
    - the first product only, stopping after the checkout form

Per-product failures become ProductResult records; a run never aborts
because one product could not be bought.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import allure
from loguru import logger
from playwright.async_api import Locator, Page

from storefront_tools.common import ConfigLoader
from storefront_tools.report_tools import attach_json, attach_text
from testsuites.ui_testing.framework.button_text import is_add_failure
from testsuites.ui_testing.framework.smart_locator import SmartLocator
from testsuites.ui_testing.pages.cart_drawer import CartDrawer
from testsuites.ui_testing.pages.checkout_page import CheckoutData, CheckoutPage
from testsuites.ui_testing.pages.collection_page import CollectionPage
from testsuites.ui_testing.pages.product_modal import QuickShopModal
from testsuites.ui_testing.pages.product_page import SELECT_OPTIONS_FAILED


STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"

NO_CART_BUTTON = "no_cart_button"


@dataclass
class ProductResult:
    """Outcome of processing one product."""

    product: str
    status: str
    method: Optional[str] = None
    checkout: Optional[str] = None
    reason: Optional[str] = None
    page_number: int = 1

    @classmethod
    def success(cls, product: str, method: str, page_number: int = 1) -> "ProductResult":
        return cls(product=product, status=STATUS_SUCCESS, method=method,
                   checkout="completed", page_number=page_number)

    @classmethod
    def failure(cls, product: str, reason: str, page_number: int = 1) -> "ProductResult":
        return cls(product=product, status=STATUS_FAILED, reason=reason, page_number=page_number)

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class CheckoutRunSummary:
    """Aggregated statistics of a checkout run."""

    successful: List[ProductResult] = field(default_factory=list)
    failed: List[ProductResult] = field(default_factory=list)
    methods: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Sequence[ProductResult]) -> "CheckoutRunSummary":
        methods = Counter(r.method for r in results if r.method)
        return cls(
            successful=[r for r in results if r.status == STATUS_SUCCESS],
            failed=[r for r in results if r.status == STATUS_FAILED],
            methods=dict(methods),
        )

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def success_rate(self) -> float:
        """Percentage of successful checkouts, rounded to 2 decimals (0.0 for an empty run)."""
        if not self.total:
            return 0.0
        return round(len(self.successful) / self.total * 100, 2)

    def to_text(self) -> str:
        lines = [
            "📊 FINAL AUTOMATION SUMMARY",
            "==========================",
            f"✅ Successful Checkouts: {len(self.successful)}",
            f"❌ Failed Checkouts: {len(self.failed)}",
            f"📦 Total Products Processed: {self.total}",
            f"🎯 Success Rate: {self.success_rate:.2f}%",
            "",
            "🛒 METHODS USED:",
            "---------------",
        ]
        lines.extend(f"• {method}: {count}" for method, count in self.methods.items())

        if self.failed:
            lines.extend(["", "❌ FAILED PRODUCTS DETAILS:", "-------------------------"])
            lines.extend(
                f"{i}. {r.product}: {r.reason}" for i, r in enumerate(self.failed, start=1)
            )

        if self.successful:
            lines.extend(["", "✅ SUCCESSFUL PRODUCTS:", "---------------------"])
            lines.extend(
                f"{i}. {r.product} ({r.method or 'unknown'})"
                for i, r in enumerate(self.successful, start=1)
            )

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successful": len(self.successful),
            "failed": len(self.failed),
            "total": self.total,
            "success_rate": self.success_rate,
            "methods": dict(self.methods),
            "failed_products": [r.to_dict() for r in self.failed],
            "successful_products": [r.to_dict() for r in self.successful],
        }


class StorefrontCheckoutFlow:
    """
    Buys storefront products one by one through the UI.

    Usage:
        flow = StorefrontCheckoutFlow(page)
        results = await flow.process_all_products_with_individual_checkout()
    """

    def __init__(
        self,
        page: Page,
        config: Optional[ConfigLoader] = None,
        checkout_data: Optional[CheckoutData] = None,
    ):
        self.page = page
        self.config = config or ConfigLoader()
        self.checkout_data = checkout_data or CheckoutData.from_config(self.config)

        # shared by every page object: one locator health report per run
        self.smart = SmartLocator(page)
        self.collection = CollectionPage(page, config=self.config, smart=self.smart)
        self.modal = QuickShopModal(page, config=self.config, smart=self.smart)
        self.cart = CartDrawer(page, config=self.config, smart=self.smart)
        self.checkout = CheckoutPage(page, config=self.config, smart=self.smart)

    async def add_product_to_cart(self, card: Locator) -> str:
        """
        Add one product card to the cart, completing the Select Options flow when asked.

        Returns:
            The add-to-cart method, or NO_CART_BUTTON / SELECT_OPTIONS_FAILED
        """
        logger.info("🛒 Adding product to cart...")
        method = await self.collection.add_to_cart(card)

        if is_add_failure(method):
            logger.warning("❌ No cart button found")
            return NO_CART_BUTTON

        logger.info(f"✅ Product added to cart via {method}")

        if method == "select_options":
            logger.info("🔄 Handling select options modal...")
            modal_result = await self.modal.handle_select_options_flow()
            if "failed" in modal_result:
                logger.warning("❌ Select options flow failed")
                return SELECT_OPTIONS_FAILED

        return method

    async def _checkout_cart(self) -> None:
        await self.cart.proceed_to_checkout()
        logger.info("📝 Filling checkout form...")
        await self.checkout.fill_checkout_form(self.checkout_data)
        logger.info("✅ Checkout form filled")

    async def _return_to_listing(self, listing_url: str, timeout: int) -> None:
        logger.info("🔄 Returning to products page...")
        await self.collection.open(listing_url, timeout=timeout)
        logger.info("✅ Products page loaded successfully")

    async def process_product_with_checkout(
        self,
        index: int,
        listing_url: Optional[str] = None,
        page_number: int = 1,
    ) -> ProductResult:
        """
        Buy the product at `index` of the current listing page.

        Ends back on `listing_url` so the next index refers to the same grid.
        """
        listing_url = listing_url or self.collection.url
        try:
            name = await self.collection.product_name(index)
            logger.info(f"📦 Product: {name}")

            outcome = await self.add_product_to_cart(self.collection.product_card(index))
            if outcome in (NO_CART_BUTTON, SELECT_OPTIONS_FAILED):
                logger.warning(f"❌ Skipping product: {outcome}")
                return ProductResult.failure(name, outcome, page_number)

            await self._checkout_cart()

            logger.info("💳 Completing payment...")
            await self.checkout.complete_payment()
            logger.info("✅ Payment completed")

            logger.info("⏳ Waiting before returning to products...")
            await self.collection.settle("before_return", 8000)
            await self._return_to_listing(
                listing_url,
                timeout=self.collection.timeout("return_to_listing", 60000),
            )

            logger.info(f"🎉 Successfully processed: {name}")
            return ProductResult.success(name, outcome, page_number)

        except Exception as error:
            logger.error(f"❌ Failed to process product {index + 1}: {error}")
            try:
                logger.info("🔄 Attempting to return to products page after error...")
                await self._return_to_listing(
                    listing_url,
                    timeout=self.collection.timeout("navigation", 120000),
                )
            except Exception as e:
                logger.error(f"❌ Could not return to products page: {e}")
            return ProductResult.failure(f"Product {index + 1}", str(error), page_number)

    @allure.step("Process all products with individual checkout")
    async def process_all_products_with_individual_checkout(self) -> List[ProductResult]:
        """
        Buy every product of every listing page, one checkout each.

        Pagination stops on the last page, on a repeated page URL, at
        `storefront.max_pages`, or once `storefront.product_limit` products
        were processed (0 disables either limit).
        """
        max_pages = self.config.get("storefront.max_pages", 0)
        product_limit = self.config.get("storefront.product_limit", 0)
        results: List[ProductResult] = []

        try:
            logger.info("🚀 Starting automation for all products with individual checkout...")
            await self.collection.open()
            listing_url = self.collection.url
            page_number = 1
            visited = {listing_url}

            while True:
                count = await self.collection.product_count()
                if product_limit:
                    count = min(count, product_limit - len(results))
                logger.info(f"📄 Page {page_number}: {count} products to process")

                for i in range(count):
                    logger.info(f"🔄 Processing Product {i + 1}/{count} (page {page_number})")
                    results.append(await self.process_product_with_checkout(i, listing_url, page_number))
                    await self.collection.settle("between_products", 5000)

                if product_limit and len(results) >= product_limit:
                    logger.info(f"⏹️ Product limit reached ({product_limit})")
                    break
                if max_pages and page_number >= max_pages:
                    logger.info(f"⏹️ Page limit reached ({max_pages})")
                    break

                await self.collection.open(listing_url)
                next_url = await self.collection.next_page_url()
                if not next_url:
                    logger.info("🏁 Last listing page reached")
                    break
                if next_url in visited:
                    logger.warning(f"⚠️ Pagination loops back to {next_url}, stopping")
                    break

                visited.add(next_url)
                listing_url = next_url
                page_number += 1
                await self.collection.open(listing_url)

            self.log_final_summary(results)
            return results

        except Exception as error:
            logger.error(f"❌ Automation failed: {error}")
            await self.collection.screenshot("automation-error")
            raise

    @allure.step("Add single product and checkout")
    async def add_single_product_and_checkout(self) -> str:
        """
        Add the first listed product and fill the checkout form.

        Returns:
            checkout_completed_via_<method>, NO_CART_BUTTON or SELECT_OPTIONS_FAILED
        """
        try:
            logger.info("🛒 Starting single product checkout process...")
            await self.collection.open(timeout=self.collection.timeout("return_to_listing", 60000))

            name = await self.collection.product_name(0, default="First Product")
            logger.info(f"📦 Adding to cart: {name}")

            outcome = await self.add_product_to_cart(self.collection.product_card(0))
            if outcome in (NO_CART_BUTTON, SELECT_OPTIONS_FAILED):
                return outcome

            await self._checkout_cart()
            logger.info("🎉 Single product checkout completed successfully!")
            return f"checkout_completed_via_{outcome}"

        except Exception as error:
            logger.error(f"❌ Checkout failed: {error}")
            await self.collection.screenshot("checkout-error")
            raise

    def log_final_summary(self, results: Sequence[ProductResult]) -> CheckoutRunSummary:
        """Log the run summary and attach it (text + JSON) to the Allure report."""
        summary = CheckoutRunSummary.from_results(results)
        text = summary.to_text()

        for line in text.splitlines():
            logger.info(line)
        logger.info("🎉 AUTOMATION COMPLETED!")

        attach_text(text, name="Checkout Run Summary")
        attach_json(summary.to_dict(), name="Checkout Run Summary (JSON)")
        attach_text(self.smart.get_health_report(), name="Locator Health")
        return summary


__all__ = [
    "StorefrontCheckoutFlow",
    "ProductResult",
    "CheckoutRunSummary",
    "NO_CART_BUTTON",
    "STATUS_SUCCESS",
    "STATUS_FAILED",
]
