"""
================================================================================
Footer Section (Async / Playwright)
================================================================================

Storefront footer: social links open in a new tab, internal policy links
navigate in the same tab.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import expect

from testsuites.ui_testing.framework.page_base import PageBase


DEFAULT_SOCIAL_LINKS: List[str] = ["instagram", "tiktok", "threads"]

DEFAULT_INTERNAL_LINKS: List[str] = [
    "International shipping",
    "Career",
    "Privacy Policy",
    "Terms and Condition",
    "Cookies Policy",
]


class FooterSection(PageBase):
    """Footer of any storefront page (async)."""

    URL_PATH = "/collections/all"

    def __init__(self, page, base_url: str = "", config=None, smart=None):
        super().__init__(page, base_url=base_url, config=config, smart=smart)
        self.URL_PATH = self.config.get("storefront.collection_path", self.URL_PATH)

    @property
    def social_links(self) -> List[str]:
        return list(self.config.get("footer.social_links", DEFAULT_SOCIAL_LINKS))

    @property
    def internal_links(self) -> List[str]:
        return list(self.config.get("footer.internal_links", DEFAULT_INTERNAL_LINKS))

    def link(self, name: str):
        return self.page.get_by_role("link", name=name)

    async def scroll_to_footer(self) -> None:
        await self.wait_for_page_load()
        await self.scroll_to_bottom()
        await self.settle("footer_scroll", 1200)

    @allure.step("Open social link: {name}")
    async def open_social_link(self, name: str) -> str:
        """
        Click a social link, wait for its tab to load and close it.

        Returns:
            URL the new tab loaded
        """
        async with self.page.context.expect_page() as new_page_info:
            await self.link(name).click()
        new_page = await new_page_info.value

        await new_page.wait_for_load_state("domcontentloaded")
        opened_url = new_page.url
        logger.info(f"✅ {name} opened in new tab: {opened_url}")
        await new_page.close()

        await self.scroll_to_footer()
        return opened_url

    @allure.step("Open footer link and return: {name}")
    async def click_and_return(self, name: str, heading: Optional[str] = None) -> None:
        """Follow a same-tab footer link, optionally check its heading, go back."""
        await self.link(name).click()
        await self.wait_for_page_load()
        logger.info(f"✅ Opened {name}: {self.page.url}")

        if heading:
            await expect(self.page.get_by_role("heading", name=heading)).to_be_visible()

        await self.page.go_back()
        await self.wait_for_page_load()
        await self.settle("after_back", 500)


__all__ = [
    "FooterSection",
    "DEFAULT_SOCIAL_LINKS",
    "DEFAULT_INTERNAL_LINKS",
]
