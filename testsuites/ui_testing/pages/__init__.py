"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for storefront pages.

Each page class encapsulates:
    - Element locators and fallback chains
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .collection_page import CollectionPage
from .product_page import ProductPage
from .product_modal import QuickShopModal
from .checkout_page import CheckoutPage, CheckoutData, CheckoutError
from .cart_drawer import CartDrawer
from .footer_section import FooterSection

__all__ = [
    "CollectionPage",
    "ProductPage",
    "QuickShopModal",
    "CheckoutPage",
    "CheckoutData",
    "CheckoutError",
    "CartDrawer",
    "FooterSection",
]
