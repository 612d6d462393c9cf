"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Single browser instance per run
    - Context isolation
    - Launch presets for watching a run against the live storefront
      (headed, maximized window, slow motion)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from storefront_tools.common import ConfigLoader


class BrowserManager:
    """
    Manages browser instances and contexts for UI testing.

    Usage:
        async with BrowserManager.from_config() as manager:
            page = await manager.new_page()
            await page.goto("https://www.yugustore.com/collections/all")
    """

    SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

    DEFAULT_LAUNCH_ARGS: List[str] = ["--start-maximized"]

    # viewport disabled so the page follows the maximized window size
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "no_viewport": True,
        "ignore_https_errors": True,
        "java_script_enabled": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        slow_mo: int = 0,
        launch_args: Optional[List[str]] = None,
        context_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
            slow_mo: Delay in milliseconds applied to every Playwright action
            launch_args: Extra browser command line switches
            context_options: Overrides merged into DEFAULT_CONTEXT_OPTIONS
        """
        if browser_type not in self.SUPPORTED_BROWSERS:
            raise ValueError(f"Unsupported browser type: {browser_type}")

        self.headless = headless
        self.browser_type = browser_type
        self.slow_mo = slow_mo
        self.launch_args = list(launch_args if launch_args is not None else self.DEFAULT_LAUNCH_ARGS)
        self.context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **(context_options or {})}

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "BrowserManager":
        """Build a manager from the `browser` configuration section."""
        config = config or ConfigLoader()
        return cls(
            headless=config.get("browser.headless", False),
            browser_type=config.get("browser.type", "chromium"),
            slow_mo=config.get("browser.slow_mo", 0),
            launch_args=config.get("browser.args", cls.DEFAULT_LAUNCH_ARGS),
            context_options={
                "ignore_https_errors": config.get("browser.ignore_https_errors", True),
            },
        )

    def launch_options(self) -> Dict[str, Any]:
        """Keyword arguments passed to `BrowserType.launch()`."""
        return {
            "headless": self.headless,
            "slow_mo": self.slow_mo,
            "args": list(self.launch_args),
        }

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> Browser:
        """Start Playwright and launch the configured browser engine."""
        self._playwright = await async_playwright().start()
        engine = getattr(self._playwright, self.browser_type)
        self._browser = await engine.launch(**self.launch_options())
        logger.info(
            f"🌐 {self.browser_type} launched "
            f"(headless={self.headless}, slow_mo={self.slow_mo}ms)"
        )
        return self._browser

    async def close(self) -> None:
        """Close every context this manager opened, then the browser and Playwright."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(
        self,
        **options: Any,
    ) -> BrowserContext:
        """Open an isolated context (own cookies and cart) with the configured options."""
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.context_options, **options}
        context = await self._browser.new_context(**context_options)
        self._contexts.append(context)

        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """Open a page in `context`, or in a fresh context when none is given."""
        if context is None:
            context = await self.new_context(**context_options)

        return await context.new_page()


__all__ = [
    "BrowserManager",
]
