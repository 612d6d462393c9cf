import pytest

from testsuites.ui_testing.framework.button_text import (
    ERROR_OCCURRED,
    NO_BUTTON_FOUND,
    button_label,
    get_button_type,
    is_add_failure,
    is_cart_button,
    is_non_cart_modal_button,
    is_wishlist_button,
    read_button_label,
)
from testsuites.unit.fakes import FakeLocator


@pytest.mark.parametrize(
    "selector, text, expected",
    [
        ('button:has-text("Quick Add")', "  Quick Add ", "quick_add"),
        ('button:has-text("Select options")', "Select Options", "select_options"),
        ('button[aria-label="Add to cart"]', "ADD TO CART", "add_to_cart"),
        ('button.m-button--white:has-text("Quick Add")', "+", "quick_add_white"),
        ('button.m-button--secondary:has-text("Quick Add")', "", "quick_add_secondary"),
        ("fallback", "Buy   it now", "button_buy_it_now"),
    ],
)
def test_get_button_type(selector, text, expected):
    assert get_button_type(selector, text) == expected


def test_text_match_wins_over_selector_class():
    assert get_button_type("button.m-button--white", "Quick Add") == "quick_add"


def test_cart_and_wishlist_keywords():
    assert is_cart_button("Shop now")
    assert is_cart_button("ORDER")
    assert not is_cart_button("Compare")
    assert not is_cart_button("")
    assert not is_cart_button(None)

    assert is_wishlist_button("Add to Wishlist")
    assert is_wishlist_button("Save for later")
    assert not is_wishlist_button("Quick Add")
    assert not is_wishlist_button(None)


def test_non_cart_modal_buttons_are_case_sensitive():
    assert is_non_cart_modal_button("Search")
    assert is_non_cart_modal_button("Show 4 columns")
    assert is_non_cart_modal_button("Add to wishlist")
    assert not is_non_cart_modal_button("search")
    assert not is_non_cart_modal_button("Add to cart")


def test_failure_markers():
    assert is_add_failure(NO_BUTTON_FOUND)
    assert is_add_failure(ERROR_OCCURRED)
    assert not is_add_failure("quick_add")


def test_button_label_priority():
    assert button_label("  Add  ", "aria", "default") == "Add"
    assert button_label("   ", "Add to cart", "default") == "Add to cart"
    assert button_label(None, None, ".add-to-cart") == ".add-to-cart"
    assert button_label(None, None) == ""


@pytest.mark.asyncio
async def test_read_button_label_falls_back_to_aria_label():
    assert await read_button_label(FakeLocator(text=" Quick Add ")) == "Quick Add"
    assert await read_button_label(FakeLocator(text="", attrs={"aria-label": "Add to cart"})) == "Add to cart"
    assert await read_button_label(FakeLocator(), default="sel") == "sel"
