"""
In-memory stand-ins for the Playwright objects the page objects touch.

Only the calls the framework makes are modelled; visibility, labels and
click failures are configured per element.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Pattern, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class FakeLocator:
    """A Playwright Locator with scripted state."""

    def __init__(
        self,
        selector: str = "",
        visible: bool = False,
        text: Optional[str] = None,
        attrs: Optional[Dict[str, str]] = None,
        enabled: bool = True,
        children: Optional[Dict[str, "FakeLocator"]] = None,
        items: Optional[List["FakeLocator"]] = None,
        click_error: Optional[Exception] = None,
    ):
        self.selector = selector
        self.visible = visible
        self.text = text
        self.attrs = dict(attrs or {})
        self.enabled = enabled
        self.children = dict(children or {})
        self.items = list(items or [])
        self.click_error = click_error

        self.clicks = 0
        self.filled: List[str] = []
        self.selected_index: Optional[int] = None
        self.checked = False

    # --- composition -------------------------------------------------------

    def locator(self, selector: str) -> "FakeLocator":
        return self.children.get(selector) or FakeLocator(selector)

    @property
    def first(self) -> "FakeLocator":
        return self.items[0] if self.items else self

    def nth(self, index: int) -> "FakeLocator":
        if self.items:
            return self.items[index]
        return FakeLocator(f"{self.selector} >> nth={index}")

    async def count(self) -> int:
        if self.items:
            return len(self.items)
        return 1 if self.visible or self.attrs else 0

    # --- state -------------------------------------------------------------

    async def is_visible(self) -> bool:
        return self.visible

    async def is_enabled(self) -> bool:
        return self.enabled

    async def text_content(self) -> Optional[str]:
        return self.text

    async def get_attribute(self, name: str, timeout: Optional[int] = None) -> Optional[str]:
        return self.attrs.get(name)

    async def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        if state == "visible" and not self.visible:
            raise PlaywrightTimeoutError(f"{self.selector} not visible")

    # --- actions -----------------------------------------------------------

    async def click(self, timeout: Optional[int] = None, **kwargs: Any) -> None:
        if self.click_error:
            raise self.click_error
        self.clicks += 1

    async def fill(self, value: str, **kwargs: Any) -> None:
        self.filled.append(value)

    async def select_option(self, index: Optional[int] = None, **kwargs: Any) -> None:
        self.selected_index = index
        self.enabled = True

    async def check(self, **kwargs: Any) -> None:
        self.checked = True


class FakePage:
    """A Playwright Page whose DOM is a selector -> FakeLocator map."""

    def __init__(self, elements: Optional[Dict[str, FakeLocator]] = None, url: str = "about:blank"):
        self.elements = dict(elements or {})
        self.url = url
        self.closed = False
        self.waits: List[int] = []
        self.visited: List[str] = []
        self.evaluated: List[str] = []
        self.handlers: Dict[str, List[Callable]] = {}
        self.frames: Dict[str, "FakePage"] = {}
        self.context = FakeContext()

    def locator(self, selector: str) -> FakeLocator:
        return self.elements.get(selector) or FakeLocator(selector)

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def is_closed(self) -> bool:
        return self.closed

    async def close(self) -> None:
        self.closed = True

    async def wait_for_timeout(self, milliseconds: int) -> None:
        self.waits.append(milliseconds)

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        self.url = url

    async def go_back(self, **kwargs: Any) -> None:
        self.visited.append("<back>")

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> FakeLocator:
        return self.locator(selector)

    async def screenshot(self, path: Optional[str] = None, **kwargs: Any) -> bytes:
        data = b"\x89PNG fake"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data

    async def evaluate(self, expression: str, *args: Any) -> None:
        self.evaluated.append(expression)

    async def wait_for_load_state(self, state: str = "load", **kwargs: Any) -> None:
        return None

    async def wait_for_url(self, url: Union[str, Pattern[str]], **kwargs: Any) -> None:
        pattern = url if isinstance(url, re.Pattern) else re.compile(re.escape(url))
        if not pattern.search(self.url):
            raise PlaywrightTimeoutError(f"URL {self.url} never matched {url}")

    # --- accessibility / frame queries, keyed like "role=button[name=Pay now]" ---

    def get_by_role(self, role: str, name: Optional[str] = None, **kwargs: Any) -> FakeLocator:
        return self.locator(f"role={role}[name={name}]")

    def get_by_placeholder(self, text: str, **kwargs: Any) -> FakeLocator:
        return self.locator(f"placeholder={text}")

    def frame_locator(self, selector: str) -> "FakePage":
        return self.frames.setdefault(selector, FakePage())


class FakeResponse:
    """A network response as delivered to page.on("response")."""

    def __init__(self, url: str, status: int = 200, body: str = ""):
        self.url = url
        self.status = status
        self.body = body

    async def text(self) -> str:
        return self.body


class FakeEventInfo:
    """`expect_page()` result: `value` is awaited once the event fired."""

    def __init__(self, page: FakePage):
        self._page = page

    @property
    def value(self):
        async def _value() -> FakePage:
            return self._page
        return _value()


class FakeContext:
    """A BrowserContext whose next popup tab loads `new_page_url`."""

    def __init__(self, new_page_url: str = "about:blank"):
        self.new_page_url = new_page_url
        self.opened: List[FakePage] = []

    @asynccontextmanager
    async def expect_page(self, **kwargs: Any) -> AsyncIterator[FakeEventInfo]:
        new_page = FakePage(url=self.new_page_url)
        yield FakeEventInfo(new_page)
        self.opened.append(new_page)
