"""
================================================================================
Smart Locator with Fallback Chains
================================================================================

The storefront theme changes without notice, so every element we depend on is
described by an ordered chain of selectors instead of a single one.

    - locate():        wait for each selector of a named chain in turn
    - first_visible(): probe a selector list right now, inside a page, card
                       or modal, and take the first visible match
    - fallback hits are logged and collected into a health report

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger
from playwright.async_api import Locator, Page


class ElementNotFoundError(Exception):
    """No selector of a chain matched."""
    pass


@dataclass
class LocatorHealth:
    """One resolution of a named element: which selector of its chain won."""

    element_name: str
    primary_selector: str
    strategy: str = "primary"
    selector: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.strategy != "primary"


def chain(*selectors: str) -> Dict[str, str]:
    """
    Name an ordered selector list as a locator chain.

    >>> chain(".a", ".b")
    {'primary': '.a', 'fallback_1': '.b'}
    """
    return {
        ("primary" if position == 0 else f"fallback_{position}"): selector
        for position, selector in enumerate(selectors)
    }


Target = Union[str, Dict[str, str]]


class SmartLocator:
    """
    Resolves storefront elements through selector chains.

    Usage:
        >>> smart = SmartLocator(page)
        >>> grid = await smart.locate("product_card", timeout=30000)
        >>> hit = await smart.first_visible(ADD_TO_CART_SELECTORS, scope=card)
    """

    # element name -> {strategy: selector}, tried in insertion order
    LOCATORS: Dict[str, Dict[str, str]] = {
        "product_card": chain(".m-product-card"),
        "product_page_form": chain(".product-form", "[data-product-handle]"),
        "open_modal": chain(".m-modal.m-open-modal", ".modal--open", "[aria-modal='true']"),
        "pagination_next": chain(
            "a[rel='next']",
            ".m-pagination a[aria-label*='Next' i]",
            ".pagination__item--next",
            "a.pagination__next",
        ),
    }

    def __init__(self, page: Page):
        self.page = page
        self._history: List[LocatorHealth] = []
        self._degraded: Dict[str, LocatorHealth] = {}

    def _resolve_chain(self, target: Target, element_name: Optional[str]) -> Tuple[str, Dict[str, str]]:
        if isinstance(target, dict):
            return element_name or "custom_element", target
        return target, self.LOCATORS.get(target, {})

    async def locate(
        self,
        target: Target,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        state: str = "visible",
    ) -> Locator:
        """
        Wait for the elements of a chain one after another.

        Args:
            target: Key of `LOCATORS` or an explicit {strategy: selector} chain
            timeout: Per-selector wait in milliseconds
            element_name: Name used in logs and the health report for explicit chains
            state: Playwright state to wait for ('visible' or 'attached')

        Returns:
            First match of the first selector that reached `state`

        Raises:
            ElementNotFoundError: Unknown name or every selector timed out
        """
        name, locators = self._resolve_chain(target, element_name)
        if not locators:
            raise ElementNotFoundError(f"No locators defined for element: {name}")

        attempts: List[str] = []
        for strategy, selector in locators.items():
            candidate = self.page.locator(selector).first
            try:
                await candidate.wait_for(state=state, timeout=timeout)
            except Exception as e:
                attempts.append(f"{strategy}: {selector} -> {str(e)[:50]}")
                continue

            self._note(name, locators.get("primary", selector), strategy, selector)
            return candidate

        message = f"❌ No locator matched '{name}':\n" + "\n".join(f"  - {a}" for a in attempts)
        logger.error(message)
        raise ElementNotFoundError(message)

    async def first_visible(
        self,
        selectors: Sequence[str],
        scope: Optional[Any] = None,
        element_name: Optional[str] = None,
    ) -> Optional[Tuple[str, Locator]]:
        """
        Probe `selectors` in order without waiting.

        `scope` may be the page, a card/modal Locator or a FrameLocator.
        A probe that errors (detached node, engine-specific selector) counts
        as not visible. Only hits for a named element go into the health
        report.

        Returns:
            (selector, locator) of the first visible match, or None
        """
        root = self.page if scope is None else scope

        for selector in selectors:
            try:
                candidate = root.locator(selector).first
                visible = await candidate.is_visible()
            except Exception as e:
                logger.debug(f"Probe failed for {selector}: {e}")
                continue
            if not visible:
                continue

            if element_name:
                self.record_hit(element_name, selectors, selector)
            return selector, candidate

        return None

    def record_hit(
        self,
        element_name: str,
        selectors: Sequence[str],
        selector: str,
        strategy: Optional[str] = None,
    ) -> None:
        """
        Record that `element_name` was resolved through `selector`.

        For loops that only count a candidate as found once it was clicked
        or set. `strategy` defaults to the position of `selector` in
        `selectors` ("primary", "fallback_1", ...).
        """
        if strategy is None:
            position = list(selectors).index(selector)
            strategy = "primary" if position == 0 else f"fallback_{position}"
        self._note(element_name, selectors[0], strategy, selector)

    def _note(self, name: str, primary_selector: str, strategy: str, selector: str) -> None:
        record = LocatorHealth(name, primary_selector, strategy, selector)
        self._history.append(record)

        if record.used_fallback:
            logger.warning(f"⚠️ '{name}' resolved by {strategy} -> {selector}")
            self._degraded[name] = record
        else:
            logger.debug(f"✅ '{name}' resolved by primary selector {selector}")

    # =========================================================================
    # Convenience actions
    # =========================================================================

    async def click(self, target: Target, timeout: int = 5000, element_name: Optional[str] = None, **kwargs: Any) -> None:
        element = await self.locate(target, timeout=timeout, element_name=element_name)
        await element.click(**kwargs)

    async def fill(
        self,
        target: Target,
        value: str,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        element = await self.locate(target, timeout=timeout, element_name=element_name)
        await element.fill(value, **kwargs)

    async def get_text(self, target: Target, timeout: int = 5000, element_name: Optional[str] = None) -> str:
        element = await self.locate(target, timeout=timeout, element_name=element_name)
        return await element.text_content() or ""

    async def is_visible(self, target: Target, timeout: int = 2000, element_name: Optional[str] = None) -> bool:
        """True when some selector of the chain becomes visible within `timeout`."""
        try:
            element = await self.locate(target, timeout=timeout, element_name=element_name)
        except ElementNotFoundError:
            return False
        return await element.is_visible()

    # =========================================================================
    # Maintenance
    # =========================================================================

    def register_locator(self, element_name: str, locators: Dict[str, str]) -> None:
        """Add or replace a named chain for every SmartLocator."""
        self.LOCATORS[element_name] = locators
        logger.debug(f"Registered locator chain: {element_name}")

    def get_health_report(self) -> str:
        """Elements that were only found through a fallback selector."""
        if not self._degraded:
            return "✅ Every element matched its primary selector. No maintenance needed."

        lines = ["⚠️ Locator Health Report - selectors to update:", ""]
        for name, record in self._degraded.items():
            lines.append(f"  [{name}]")
            lines.append(f"    Primary missed: {record.primary_selector}")
            lines.append(f"    Matched: {record.strategy} -> {record.selector}")
            lines.append("")
        return "\n".join(lines)


__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "LocatorHealth",
    "chain",
]
