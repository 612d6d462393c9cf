"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for the storefront UI tests, providing fixtures
for browser management, page objects, and test setup/teardown.

Key Features:
- One browser per session, one context/page per test module
  (tests inside a module run serially on the same page)
- Page Object and flow fixtures
- Screenshot capture on failure
- Optional Playwright inspector pause when a module finishes

================================================================================
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from loguru import logger
from playwright.async_api import BrowserContext, Page

from storefront_tools.common import ConfigLoader, init_logger
from testsuites.ui_testing.flows import StorefrontCheckoutFlow
from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.page_base import PageBase, request_log_for
from testsuites.ui_testing.pages import CollectionPage, FooterSection


# ================================================================================
# Pytest Hooks
# ================================================================================

def pytest_configure(config):
    init_logger()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item for fixture teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def ui_config() -> ConfigLoader:
    return ConfigLoader()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def browser_manager(ui_config: ConfigLoader) -> AsyncGenerator[BrowserManager, None]:
    """
    Session-scoped browser manager fixture.

    Launch options come from the `browser` config section
    (headed, maximized, slow motion by default).
    """
    async with BrowserManager.from_config(ui_config) as manager:
        yield manager


@pytest_asyncio.fixture(scope="module", loop_scope="session")
async def context(browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """
    Module-scoped browser context fixture.

    Every test module gets a fresh cart and cookie jar.
    """
    context = await browser_manager.new_context()
    yield context
    await context.close()


@pytest_asyncio.fixture(scope="module", loop_scope="session")
async def page(context: BrowserContext, ui_config: ConfigLoader) -> AsyncGenerator[Page, None]:
    """Module-scoped page shared by the serial tests of one module."""
    page = await context.new_page()
    # cart responses are logged from the first request on, for capture_failure
    request_log_for(page)
    yield page
    if ui_config.get("browser.pause_on_finish", False):
        await page.pause()
    await page.close()


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def _capture_on_failure(request) -> AsyncGenerator[None, None]:
    """Attach `PageBase.capture_failure` details to Allure when a UI test fails."""
    yield
    report = getattr(request.node, "rep_call", None)
    if report is None or not report.failed or "page" not in request.fixturenames:
        return

    page: Page = request.getfixturevalue("page")
    ui_config: ConfigLoader = request.getfixturevalue("ui_config")
    try:
        await PageBase(page, config=ui_config).capture_failure(request.node.name)
    except Exception as e:
        logger.warning(f"Failed to capture failure details: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def collection_page(page: Page, ui_config: ConfigLoader) -> CollectionPage:
    return CollectionPage(page, config=ui_config)


@pytest.fixture
def footer_section(page: Page, ui_config: ConfigLoader) -> FooterSection:
    return FooterSection(page, config=ui_config)


@pytest.fixture
def checkout_flow(page: Page, ui_config: ConfigLoader) -> StorefrontCheckoutFlow:
    """
    Provides the end-to-end checkout flow bound to the module page.
    """
    return StorefrontCheckoutFlow(page, config=ui_config)

