"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation with a retry path for slow storefront responses
    - Smart element location
    - Fixed settle delays and closed-page-safe waits
    - Scrolling helpers
    - Screenshot and debugging utilities
    - Cart request capture

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern
from weakref import WeakKeyDictionary

import allure
from loguru import logger
from playwright.async_api import Locator, Page, Response, expect

from storefront_tools.common import ConfigLoader
from storefront_tools.report_tools import attach_json, attach_png, attach_text

from .popup_handler import PopupHandler
from .smart_locator import SmartLocator


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

DEFAULT_BASE_URL = "https://www.yugustore.com"


class CartRequestLog:
    """The last `limit` `/cart` responses one page received."""

    def __init__(self, limit: int = 20):
        self.limit = limit
        self.entries: List[Dict[str, Any]] = []

    async def record(self, response: Response) -> None:
        if "/cart" not in response.url:
            return
        try:
            body = await response.text()
        except Exception:
            body = "<unable to read>"

        self.entries.append({
            "timestamp": datetime.now().isoformat(),
            "url": response.url,
            "status": response.status,
            "body": body[:1000],
        })
        if len(self.entries) > self.limit:
            self.entries.pop(0)

    def recent(self, count: int = 10) -> List[Dict[str, Any]]:
        return self.entries[-count:]


# page -> its log; one response listener per page however many page objects wrap it
_REQUEST_LOGS: "WeakKeyDictionary[Page, CartRequestLog]" = WeakKeyDictionary()


def request_log_for(page: Page) -> CartRequestLog:
    """Cart request log of `page`, listening for responses from the first call on."""
    log = _REQUEST_LOGS.get(page)
    if log is None:
        log = CartRequestLog()
        _REQUEST_LOGS[page] = log
        page.on("response", log.record)
    return log


class BasePage:
    """
    Base class for all page objects.

    Provides common functionality for:
        - Navigation and URL handling
        - Smart element interaction
        - Configured timeouts and settle delays
        - Screenshot capture
        - Cart request/response logging

    Usage:
        class CollectionPage(BasePage):
            URL_PATH = "/collections/all"

            async def open(self):
                await self.navigate(wait_for="domcontentloaded")
    """

    # Override in subclasses
    URL_PATH: str = "/"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[ConfigLoader] = None,
        smart: Optional[SmartLocator] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Storefront base URL (defaults to storefront.base_url)
            config: Configuration loader (defaults to the shared instance)
            smart: Locator shared with the other page objects of a flow, so
                one health report covers all of them
        """
        self.page = page
        self.config = config or ConfigLoader()
        if not base_url:
            base_url = self.config.get("storefront.base_url", DEFAULT_BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.smart = smart or SmartLocator(page)
        self.popups = PopupHandler(page, settle_ms=self.wait_ms("popup_close", 2000))
        self.requests = request_log_for(page)

    # =========================================================================
    # Configuration shortcuts
    # =========================================================================

    def timeout(self, name: str, default: int) -> int:
        """Timeout in milliseconds from the `timeouts` section."""
        return self.config.get(f"timeouts.{name}", default)

    def wait_ms(self, name: str, default: int) -> int:
        """Settle delay in milliseconds from the `waits` section."""
        return self.config.get(f"waits.{name}", default)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(
        self,
        wait_for: str = "domcontentloaded",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'commit', 'load', 'domcontentloaded', 'networkidle'
            timeout: Navigation timeout in milliseconds
        """
        await self.navigate_to(self.url, wait_for=wait_for, timeout=timeout)

    async def navigate_to(
        self,
        url_or_path: str,
        wait_for: str = "domcontentloaded",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Navigate to an absolute URL or a path below the base URL.

        Args:
            url_or_path: Absolute URL or path starting with "/"
            wait_for: Wait condition
            timeout: Navigation timeout in milliseconds
        """
        full_url = url_or_path if url_or_path.startswith("http") else f"{self.base_url}{url_or_path}"
        timeout = timeout or self.timeout("navigation", 120000)
        with allure.step(f"Navigate to {full_url}"):
            await self.page.goto(full_url, wait_until=wait_for, timeout=timeout)
            logger.debug(f"Navigated to: {full_url}")

    async def goto_with_retry(
        self,
        url: Optional[str] = None,
        url_pattern: Optional[Pattern[str]] = None,
    ) -> None:
        """
        Navigate with a fast first attempt and one slower retry.

        The first attempt only waits for the first response byte, then for
        DOMContentLoaded, then (optionally) for the URL to match `url_pattern`.
        On any failure the navigation is retried waiting for DOMContentLoaded
        and a visible <main>.
        """
        url = url or self.url
        try:
            await self.page.goto(
                url,
                wait_until="commit",
                timeout=self.timeout("navigation", 250000),
            )
            try:
                await self.page.wait_for_load_state("domcontentloaded", timeout=120000)
            except Exception as err:
                logger.warning(f"domcontentloaded already fired or page is SPA, skipping... {err}")

            if url_pattern is not None:
                await expect(self.page).to_have_url(url_pattern, timeout=60000)
        except Exception as error:
            logger.error(f"❌ Navigation to {url} failed: {error}")
            logger.info("🔁 Retrying navigation...")
            retry_timeout = self.timeout("navigation_retry", 180000)
            await self.page.goto(url, wait_until="domcontentloaded", timeout=retry_timeout)
            await self.page.locator("main").wait_for(state="visible", timeout=retry_timeout)

    async def wait_for_page_load(
        self,
        state: str = "domcontentloaded",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds (defaults to timeouts.navigation)
        """
        await self.page.wait_for_load_state(state, timeout=timeout or self.timeout("navigation", 120000))

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    async def safe_wait(self, milliseconds: int) -> None:
        """Fixed delay that is skipped on a closed page and never raises."""
        try:
            if self.page is not None and not self.page.is_closed():
                await self.page.wait_for_timeout(milliseconds)
        except Exception as error:
            logger.warning(f"⚠️ Safe wait interrupted: {error}")

    async def settle(self, name: str, default: int) -> None:
        """Apply the configured settle delay `waits.<name>`."""
        await self.safe_wait(self.wait_ms(name, default))

    async def wait_for_url(
        self,
        url_pattern: Any,
        timeout: int = 10000,
    ) -> None:
        """
        Wait for URL to match pattern.

        Args:
            url_pattern: Glob string, compiled regex or predicate
            timeout: Timeout in milliseconds
        """
        with allure.step(f"Wait for URL: {url_pattern}"):
            await self.page.wait_for_url(url_pattern, timeout=timeout)

    async def wait_for_element(
        self,
        selector: str,
        state: str = "visible",
        timeout: Optional[int] = None,
    ) -> None:
        """Wait for `selector` to reach `state` ('visible', 'hidden', 'attached', 'detached')."""
        await self.page.wait_for_selector(
            selector,
            state=state,
            timeout=timeout or self.timeout("element", 60000),
        )

    async def dismiss_popups(self) -> bool:
        """Close one blocking popup if present."""
        return await self.popups.dismiss()

    # =========================================================================
    # Scrolling
    # =========================================================================

    async def scroll_by(self, dy: int, dx: int = 0) -> None:
        """Scroll by offset from current position."""
        await self.page.evaluate(f"window.scrollBy({dx}, {dy})")

    async def scroll_to_bottom(self) -> None:
        """Scroll to bottom of page."""
        await self.page.evaluate("window.scrollTo(0, document.body.scrollHeight)")

    async def scroll_into_view(self, locator: Locator) -> None:
        """Scroll element into view, centring it via JS when Playwright refuses."""
        try:
            await locator.scroll_into_view_if_needed()
        except Exception as err:
            logger.warning(f"scroll_into_view_if_needed failed, trying JS scroll... {err}")
            handle = await locator.element_handle()
            await self.page.evaluate(
                "el => el.scrollIntoView({ behavior: 'auto', block: 'center' })",
                handle,
            )

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    def _screenshot_dir(self) -> Path:
        configured = self.config.get("reports.screenshots_dir")
        return Path(configured) if configured else SCREENSHOT_DIR

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        directory = self._screenshot_dir()
        directory.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = directory / f"{name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            attach_png(filepath, name=name)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Recent cart requests
            - Current URL
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", full_page=True)
            attach_text(self.page.url, name="Current URL")
            if self.requests.entries:
                attach_json(self.requests.recent(10), name="Recent Cart Requests")

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
    "CartRequestLog",
    "PageBase",
    "DEFAULT_BASE_URL",
    "request_log_for",
]

# Backward-compatible alias (many Page Objects prefer PageBase naming)
PageBase = BasePage
