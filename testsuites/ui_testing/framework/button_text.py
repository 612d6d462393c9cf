"""
================================================================================
Button Text Classification
================================================================================

Pure helpers that classify storefront buttons by their visible label.

The add-to-cart fallback chain clicks whatever button matched first; these
helpers name *how* a product was added (the "method") and decide which
unknown buttons are safe to click.

================================================================================
"""

from __future__ import annotations

import re
from typing import Any, Optional


NO_BUTTON_FOUND = "no_button_found"
ERROR_OCCURRED = "error_occurred"

CART_KEYWORDS = (
    "add", "cart", "buy", "shop", "purchase",
    "quick", "select", "option", "order", "shop now",
)

WISHLIST_KEYWORDS = (
    "wishlist", "wish", "heart", "like", "save", "favorite",
)

# Matched case-sensitively against the raw label
NON_CART_MODAL_WORDS = ("Search", "Filter", "List", "columns")


def button_label(
    text: Optional[str],
    aria_label: Optional[str] = None,
    default: str = "",
) -> str:
    """Return the first non-empty of text content, aria-label and default, stripped."""
    for candidate in (text, aria_label, default):
        if candidate and candidate.strip():
            return candidate.strip()
    return (default or "").strip()


def get_button_type(selector: str, button_text: str) -> str:
    """
    Name the add-to-cart method from the clicked button.

    Args:
        selector: Selector that matched (or "fallback")
        button_text: Visible label of the clicked button

    Returns:
        One of quick_add, select_options, add_to_cart, quick_add_white,
        quick_add_secondary or button_<label>
    """
    text = (button_text or "").lower().strip()

    if "quick add" in text:
        return "quick_add"
    if "select option" in text:
        return "select_options"
    if "add to cart" in text:
        return "add_to_cart"
    if "m-button--white" in selector:
        return "quick_add_white"
    if "m-button--secondary" in selector:
        return "quick_add_secondary"
    return "button_" + re.sub(r"\s+", "_", text)


def is_cart_button(button_text: Optional[str]) -> bool:
    """True when the label looks like it adds to the cart."""
    if not button_text:
        return False
    text = button_text.lower().strip()
    return any(keyword in text for keyword in CART_KEYWORDS)


def is_wishlist_button(button_text: Optional[str]) -> bool:
    """True when the label belongs to a wishlist / favourite control."""
    if not button_text:
        return False
    text = button_text.lower().strip()
    return any(keyword in text for keyword in WISHLIST_KEYWORDS)


def is_non_cart_modal_button(button_text: Optional[str]) -> bool:
    """Buttons inside an open modal that must never be clicked as add-to-cart."""
    if not button_text:
        return False
    if is_wishlist_button(button_text):
        return True
    return any(word in button_text for word in NON_CART_MODAL_WORDS)


def is_add_failure(method: str) -> bool:
    """True when an add-to-cart result is a failure marker."""
    return "no_button" in method or "error" in method


async def read_button_label(button: Any, default: str = "") -> str:
    """Visible label of a Playwright button locator (text, then aria-label)."""
    text = await button.text_content()
    if text and text.strip():
        return text.strip()
    return button_label(None, await button.get_attribute("aria-label"), default)


__all__ = [
    "NO_BUTTON_FOUND",
    "ERROR_OCCURRED",
    "button_label",
    "get_button_type",
    "is_cart_button",
    "is_wishlist_button",
    "is_non_cart_modal_button",
    "is_add_failure",
    "read_button_label",
]
